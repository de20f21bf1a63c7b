"""HTTP tests for runtime.api.server using FastAPI's TestClient."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from configs.settings import Settings
from runtime.api.server import create_app
from runtime.store.site_store import SiteStore


PASSWORD = "noble-rhyl"
JPEG_1KB = b"\xff\xd8\xff\xe0" + b"\x00" * 1020


class ApiTestCase(unittest.TestCase):
    """Runs each test against a fresh app rooted in a temporary directory."""

    extra_env = {}

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.prepare_root()

        env = {
            "SITE_ADMIN_PASSWORD": PASSWORD,
            "SITE_DATA_DIR": str(self.root / "data"),
            "SITE_UPLOADS_DIR": str(self.root / "uploads"),
            "SITE_STATIC_DIR": str(self.root / "site"),
        }
        env.update(self.extra_env)
        with mock.patch.dict(os.environ, env):
            app_settings = Settings()

        self.client = TestClient(create_app(app_settings))
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def prepare_root(self):
        pass

    def upload_gallery(self, password=PASSWORD, content=JPEG_1KB,
                       content_type="image/jpeg", name="a.jpg", description="sale"):
        return self.client.post(
            "/admin/upload-gallery",
            data={"password": password, "description": description},
            files={"image": (name, content, content_type)},
        )


class TestStartup(ApiTestCase):

    def test_data_files_and_directories_created(self):
        for name in ("status.json", "gallery.json", "hero-background.json"):
            self.assertTrue((self.root / "data" / name).is_file(), name)
        self.assertTrue((self.root / "uploads" / "gallery").is_dir())
        self.assertTrue((self.root / "uploads" / "hero").is_dir())

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "OK")

    def test_unknown_route_uses_error_shape(self):
        response = self.client.get("/api/nope")
        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.json())


class TestPublicRoutes(ApiTestCase):

    def test_default_documents(self):
        status = self.client.get("/api/status").json()
        self.assertEqual(status["status"], False)
        self.assertEqual(status["notice"], "")
        self.assertIn("lastUpdated", status)

        self.assertEqual(self.client.get("/api/gallery").json(), {"images": []})
        self.assertEqual(
            self.client.get("/api/hero-background").json(),
            {"filename": None, "uploadedAt": None},
        )

    def test_client_config_defaults(self):
        self.assertEqual(
            self.client.get("/api/client-config").json(),
            {"lazyLoadImages": False, "deferHeroLoad": False, "pollIntervalMs": 30000},
        )


class TestClientConfigFromEnvironment(ApiTestCase):

    extra_env = {
        "SITE_LAZY_LOAD_IMAGES": "true",
        "SITE_DEFER_HERO_LOAD": "1",
        "SITE_POLL_INTERVAL_MS": "60000",
    }

    def test_capabilities(self):
        self.assertEqual(
            self.client.get("/api/client-config").json(),
            {"lazyLoadImages": True, "deferHeroLoad": True, "pollIntervalMs": 60000},
        )


class TestUpdateStatus(ApiTestCase):

    def test_wrong_password(self):
        response = self.client.post(
            "/admin/update-status",
            data={"password": "guess", "status": "true", "notice": ""},
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})
        self.assertFalse(self.client.get("/api/status").json()["status"])

    def test_missing_password(self):
        response = self.client.post("/admin/update-status", data={"status": "true"})
        self.assertEqual(response.status_code, 401)

    def test_form_update(self):
        response = self.client.post(
            "/admin/update-status",
            data={"password": PASSWORD, "status": "true", "notice": "Open until 2pm"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["status"], True)
        self.assertEqual(body["data"]["notice"], "Open until 2pm")

        status = self.client.get("/api/status").json()
        self.assertEqual(status["status"], True)
        self.assertEqual(status["notice"], "Open until 2pm")
        self.assertEqual(status["lastUpdated"], body["data"]["lastUpdated"])

    def test_json_update(self):
        response = self.client.post(
            "/admin/update-status",
            json={"password": PASSWORD, "status": True},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], True)
        self.assertEqual(response.json()["data"]["notice"], "")

    def test_only_true_means_open(self):
        for value in ("false", "yes", "1", ""):
            with self.subTest(value=value):
                response = self.client.post(
                    "/admin/update-status",
                    data={"password": PASSWORD, "status": value},
                )
                self.assertEqual(response.json()["data"]["status"], False)

    def test_invalid_json_body(self):
        response = self.client.post(
            "/admin/update-status",
            content=b"{broken",
            headers={"content-type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())


class TestGalleryUpload(ApiTestCase):

    def test_upload_and_serve(self):
        response = self.upload_gallery()
        self.assertEqual(response.status_code, 200)
        image = response.json()["image"]
        self.assertTrue(image["filename"].endswith(".jpg"))
        self.assertEqual(image["originalName"], "a.jpg")
        self.assertEqual(image["description"], "sale")

        gallery = self.client.get("/api/gallery").json()
        self.assertEqual([i["filename"] for i in gallery["images"]], [image["filename"]])

        served = self.client.get(f"/uploads/gallery/{image['filename']}")
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, JPEG_1KB)

    def test_wrong_password_stores_nothing(self):
        response = self.upload_gallery(password="nope")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(list((self.root / "uploads" / "gallery").iterdir()), [])

    def test_non_image_rejected(self):
        response = self.upload_gallery(content=b"%PDF", content_type="application/pdf",
                                       name="flyer.pdf")
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())
        self.assertEqual(self.client.get("/api/gallery").json(), {"images": []})

    def test_missing_file(self):
        response = self.client.post(
            "/admin/upload-gallery",
            data={"password": PASSWORD, "description": "no file"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "No file uploaded"})


class TestGalleryLimits(ApiTestCase):

    extra_env = {
        "SITE_GALLERY_MAX_IMAGES": "2",
        "SITE_GALLERY_MAX_BYTES": "2048",
    }

    def test_gallery_full(self):
        self.assertEqual(self.upload_gallery(name="1.jpg").status_code, 200)
        self.assertEqual(self.upload_gallery(name="2.jpg").status_code, 200)

        response = self.upload_gallery(name="3.jpg")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Gallery full (2 max)"})
        self.assertEqual(len(self.client.get("/api/gallery").json()["images"]), 2)
        self.assertEqual(len(list((self.root / "uploads" / "gallery").iterdir())), 2)

    def test_payload_too_large(self):
        response = self.upload_gallery(content=b"\x00" * 4096)
        self.assertEqual(response.status_code, 413)
        self.assertIn("error", response.json())
        self.assertEqual(self.client.get("/api/gallery").json(), {"images": []})

    def test_admin_page_shows_full_gallery(self):
        self.upload_gallery(name="1.jpg")
        self.upload_gallery(name="2.jpg")
        html = self.client.get("/admin").text
        self.assertIn("Gallery (2/2)", html)
        self.assertIn("Gallery Full", html)
        self.assertNotIn('action="/admin/upload-gallery"', html)


class TestHeroUpload(ApiTestCase):

    def test_upload_replaces_record(self):
        first = self.client.post(
            "/admin/upload-hero",
            data={"password": PASSWORD},
            files={"image": ("old.png", b"\x89PNG", "image/png")},
        )
        self.assertEqual(first.status_code, 200)

        second = self.client.post(
            "/admin/upload-hero",
            data={"password": PASSWORD},
            files={"image": ("field.jpg", JPEG_1KB, "image/jpeg")},
        )
        self.assertEqual(second.status_code, 200)
        hero = second.json()["hero"]
        self.assertEqual(hero["filename"], "hero-background.jpg")
        self.assertEqual(hero["originalName"], "field.jpg")

        stored = self.client.get("/api/hero-background").json()
        self.assertEqual(stored, hero)

        served = self.client.get("/uploads/hero/hero-background.jpg")
        self.assertEqual(served.content, JPEG_1KB)

    def test_wrong_password(self):
        response = self.client.post(
            "/admin/upload-hero",
            data={"password": ""},
            files={"image": ("field.jpg", JPEG_1KB, "image/jpeg")},
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            self.client.get("/api/hero-background").json()["filename"], None
        )


class TestAdminPage(ApiTestCase):

    def test_reflects_current_status(self):
        html = self.client.get("/admin").text
        self.assertIn("Currently: CLOSED", html)
        self.assertIn("Gallery (0/10)", html)
        self.assertIn('action="/admin/upload-gallery"', html)

    def test_notice_is_escaped(self):
        self.client.post(
            "/admin/update-status",
            data={"password": PASSWORD, "status": "true", "notice": "<b>Pitches £5</b>"},
        )
        html = self.client.get("/admin").text
        self.assertIn("Currently: OPEN", html)
        self.assertIn("&lt;b&gt;Pitches £5&lt;/b&gt;", html)
        self.assertNotIn("<b>Pitches", html)


class TestCors(ApiTestCase):

    def test_any_origin_allowed_by_default(self):
        response = self.client.get("/api/status", headers={"Origin": "https://example.org"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["access-control-allow-origin"], "*")

    def test_preflight_for_admin_post(self):
        response = self.client.options(
            "/admin/update-status",
            headers={
                "Origin": "https://example.org",
                "Access-Control-Request-Method": "POST",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("POST", response.headers["access-control-allow-methods"])


class TestCorsRestrictedOrigins(ApiTestCase):

    extra_env = {"SITE_CORS_ORIGINS": "https://rhylcarboot.example, https://www.rhylcarboot.example"}

    def test_listed_origin_is_echoed(self):
        response = self.client.get(
            "/api/gallery", headers={"Origin": "https://www.rhylcarboot.example"}
        )
        self.assertEqual(
            response.headers["access-control-allow-origin"], "https://www.rhylcarboot.example"
        )

    def test_other_origin_gets_no_header(self):
        response = self.client.get("/api/gallery", headers={"Origin": "https://elsewhere.example"})
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("access-control-allow-origin", response.headers)


class TestUnexpectedErrors(ApiTestCase):

    def test_unexpected_exception_returns_json_500(self):
        client = TestClient(self.client.app, raise_server_exceptions=False)
        with mock.patch.object(SiteStore, "read_status", side_effect=RuntimeError("disk on fire")):
            with self.assertLogs("runtime.api.server", level="ERROR"):
                response = client.get("/api/status")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Internal server error"})


class TestOpenApiErrors(ApiTestCase):

    def test_admin_routes_document_error_body(self):
        schema = self.client.get("/openapi.json").json()
        responses = schema["paths"]["/admin/upload-gallery"]["post"]["responses"]
        for code in ("400", "401", "413", "500"):
            with self.subTest(code=code):
                ref = responses[code]["content"]["application/json"]["schema"]["$ref"]
                self.assertTrue(ref.endswith("/ErrorResponse"))
        self.assertEqual(
            schema["components"]["schemas"]["ErrorResponse"]["required"], ["error"]
        )

class TestStaticSite(ApiTestCase):

    def prepare_root(self):
        site = self.root / "site"
        site.mkdir()
        (site / "index.html").write_text("<h1>Rhyl Car Boot</h1>", encoding="utf-8")

    def test_index_served_at_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Rhyl Car Boot", response.text)

    def test_api_routes_take_precedence(self):
        self.assertEqual(self.client.get("/api/gallery").json(), {"images": []})


class TestWithoutStaticSite(ApiTestCase):

    def test_root_not_found(self):
        self.assertEqual(self.client.get("/").status_code, 404)


if __name__ == "__main__":
    unittest.main()
