"""HTML for the admin panel served at GET /admin.

Rendered from the current documents on every request. All values coming
from the store are HTML-escaped before interpolation.
"""

from html import escape
from string import Template

from ..models.site_models import GalleryRecord, StatusRecord


_PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Admin - Rhyl Car Boot</title>
    <style>
        body { font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; background: #f5f5f5; }
        .container { background: white; padding: 30px; border-radius: 8px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        h1 { color: #21808D; text-align: center; margin-bottom: 30px; }
        .section { margin-bottom: 30px; padding: 20px; border: 1px solid #ddd; border-radius: 5px; background: #fafafa; }
        .form-group { margin-bottom: 15px; }
        label { display: block; margin-bottom: 5px; font-weight: bold; }
        input, textarea, select { width: 100%; padding: 8px; border: 1px solid #ddd; border-radius: 4px; box-sizing: border-box; }
        button { background: #21808D; color: white; padding: 10px 20px; border: none; border-radius: 4px; cursor: pointer; }
        button:hover { background: #1d6f7a; }
        .status-current { font-size: 18px; padding: 10px; text-align: center; border-radius: 4px; margin-bottom: 15px; }
        .status-open { background: #d4edda; color: #155724; }
        .status-closed { background: #f8d7da; color: #721c24; }
    </style>
</head>
<body>
    <div class="container">
        <h1>Rhyl Car Boot - Admin Panel</h1>

        <div class="section">
            <h2>Current Status</h2>
            <div class="status-current $status_class">
                Currently: $status_label$notice_line
            </div>
        </div>

        <div class="section">
            <h2>Update Status</h2>
            <form method="POST" action="/admin/update-status">
                <div class="form-group">
                    <label>Password:</label>
                    <input type="password" name="password" required>
                </div>
                <div class="form-group">
                    <label>Status:</label>
                    <select name="status" required>
                        <option value="true"$open_selected>Open</option>
                        <option value="false"$closed_selected>Closed</option>
                    </select>
                </div>
                <div class="form-group">
                    <label>Notice (optional):</label>
                    <textarea name="notice">$notice</textarea>
                </div>
                <button type="submit">Update Status</button>
            </form>
        </div>

        <div class="section">
            <h2>Gallery ($gallery_count/$gallery_max)</h2>
            $gallery_form
        </div>

        <div class="section">
            <h2>Hero Background</h2>
            <form method="POST" action="/admin/upload-hero" enctype="multipart/form-data">
                <div class="form-group">
                    <label>Password:</label>
                    <input type="password" name="password" required>
                </div>
                <div class="form-group">
                    <label>Background Image:</label>
                    <input type="file" name="image" accept="image/*" required>
                </div>
                <button type="submit">Upload Background</button>
            </form>
        </div>

        <p><a href="/">&larr; Back to Site</a></p>
    </div>
</body>
</html>
""")

_GALLERY_FORM = """<form method="POST" action="/admin/upload-gallery" enctype="multipart/form-data">
                <div class="form-group">
                    <label>Password:</label>
                    <input type="password" name="password" required>
                </div>
                <div class="form-group">
                    <label>Image:</label>
                    <input type="file" name="image" accept="image/*" required>
                </div>
                <div class="form-group">
                    <label>Description:</label>
                    <input type="text" name="description">
                </div>
                <button type="submit">Upload Image</button>
            </form>"""

_GALLERY_FULL = "<p>Gallery Full</p>"


def render_admin_page(status: StatusRecord, gallery: GalleryRecord, gallery_max: int) -> str:
    notice = escape(status.notice or "")
    count = len(gallery.images)
    return _PAGE.substitute(
        status_class="status-open" if status.is_open else "status-closed",
        status_label="OPEN" if status.is_open else "CLOSED",
        notice_line=f'<br>Notice: "{notice}"' if notice else "",
        open_selected=" selected" if status.is_open else "",
        closed_selected="" if status.is_open else " selected",
        notice=notice,
        gallery_count=count,
        gallery_max=gallery_max,
        gallery_form=_GALLERY_FORM if count < gallery_max else _GALLERY_FULL,
    )
