#!/usr/bin/env python3
"""
CarBoot site CLI

Small operational commands around the site runtime:

1) serve
   - Run the FastAPI app with uvicorn (runtime.api.server:app).

2) init
   - Create the data directory, the three JSON documents and the upload
     directories if they are missing:
       data/status.json
       data/gallery.json
       data/hero-background.json
       uploads/gallery/
       uploads/hero/

3) show
   - Print the current status, gallery and hero documents.

4) set-status
   - Open or close the site (optionally with a notice) without going
     through the admin page.

The server can also be started directly, e.g.:

    uvicorn runtime.api.server:app --reload
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import Settings, settings
from runtime.services.upload_manager import UploadManager
from runtime.store.site_store import SiteStore


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _build_store(data_dir: str) -> SiteStore:
    return SiteStore(data_dir=data_dir)


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


def cmd_serve(host: str, port: int, reload: bool, data_dir: str, uploads_dir: str) -> None:
    """Run the site with uvicorn.

    The directory options are exported to the environment and a fresh
    Settings is built from it. With --reload uvicorn imports the app in a
    child process, which inherits that environment.
    """
    os.environ["SITE_DATA_DIR"] = data_dir
    os.environ["SITE_UPLOADS_DIR"] = uploads_dir

    # Lazy imports so the offline commands do not need uvicorn installed.
    import uvicorn
    from runtime.api.server import create_app

    app = "runtime.api.server:app" if reload else create_app(Settings())

    print(f"[CarBoot] Server running on http://{host}:{port}")
    print(f"[CarBoot] Health check: http://localhost:{port}/health")
    print(f"[CarBoot] Admin panel:  http://localhost:{port}/admin")
    uvicorn.run(
        app,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


def cmd_init(data_dir: str, uploads_dir: str) -> None:
    """Create missing documents and upload directories."""
    store = _build_store(data_dir)
    store.initialize()
    UploadManager(store=store, uploads_dir=uploads_dir).ensure_directories()
    print(f"[CarBoot] ✓ Data files ready → {store.data_dir}")
    print(f"[CarBoot] ✓ Upload directories ready → {uploads_dir}")


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


def cmd_show(data_dir: str) -> None:
    store = _build_store(data_dir)
    documents = {
        "status": store.read_status().to_document(),
        "gallery": store.read_gallery().to_document(),
        "hero": store.read_hero().to_document(),
    }
    print(json.dumps(documents, indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# set-status
# ---------------------------------------------------------------------------


def cmd_set_status(data_dir: str, is_open: bool, notice: Optional[str]) -> None:
    """
    Write a new status document.

    Without --notice the current notice is kept, matching what the admin
    page pre-fills.
    """
    store = _build_store(data_dir)
    if notice is None:
        notice = store.read_status().notice
    record = store.write_status(is_open=is_open, notice=notice)
    label = "OPEN" if record.is_open else "CLOSED"
    print(f"[CarBoot] ✓ Status set to {label} at {record.last_updated.isoformat()}")
    if record.notice:
        print(f"[CarBoot]   Notice: {record.notice}")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CarBoot site CLI")
    parser.add_argument(
        "--data-dir",
        default=str(settings.data_dir),
        help="Directory holding the JSON documents (default: SITE_DATA_DIR or 'data')",
    )
    parser.add_argument(
        "--uploads-dir",
        default=str(settings.uploads_dir),
        help="Root directory for uploaded images (default: SITE_UPLOADS_DIR or 'uploads')",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = subparsers.add_parser("serve", help="Run the web server")
    p_serve.add_argument("--host", default=settings.host, help="Bind address")
    p_serve.add_argument("--port", type=int, default=settings.port, help="Bind port")
    p_serve.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)",
    )

    # init
    subparsers.add_parser(
        "init",
        help="Create missing data files and upload directories",
    )

    # show
    subparsers.add_parser("show", help="Print status, gallery and hero documents")

    # set-status
    p_status = subparsers.add_parser("set-status", help="Open or close the site")
    group = p_status.add_mutually_exclusive_group(required=True)
    group.add_argument("--open", dest="is_open", action="store_true", help="Mark as open")
    group.add_argument("--closed", dest="is_open", action="store_false", help="Mark as closed")
    p_status.add_argument("--notice", default=None, help="Notice text (use '' to clear)")

    return parser


def main(argv: Optional[list] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(settings.log_level)

    data_dir: str = args.data_dir
    command: str = args.command

    if command == "serve":
        cmd_serve(
            host=args.host,
            port=args.port,
            reload=args.reload,
            data_dir=data_dir,
            uploads_dir=args.uploads_dir,
        )
    elif command == "init":
        cmd_init(data_dir=data_dir, uploads_dir=args.uploads_dir)
    elif command == "show":
        cmd_show(data_dir=data_dir)
    elif command == "set-status":
        cmd_set_status(data_dir=data_dir, is_open=args.is_open, notice=args.notice)
    else:
        parser.error(f"Unknown command: {command}")


if __name__ == "__main__":
    main()
