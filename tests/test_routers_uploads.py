"""
test_routers_uploads.py — Tests for image upload validation and storage errors.

Object storage is mocked; nothing leaves the process.

Called by: pytest
Depends on: globetrotter/routers/uploads.py, conftest.py
"""

from unittest.mock import patch

from botocore.exceptions import ClientError

from globetrotter.config import settings
from globetrotter.utils.file_validation import validate_image

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 64


class TestUpload:
    def test_png_uploaded(self, client):
        with patch("globetrotter.routers.uploads.upload_image", return_value="https://cdn.test/b/x.png") as up:
            resp = client.post("/api/upload", files={"file": ("holiday.jpg", PNG_BYTES, "image/jpeg")})
        assert resp.status_code == 200
        assert resp.json() == {"url": "https://cdn.test/b/x.png"}
        content, ext, content_type = up.call_args.args
        # Detected type wins over the client's name and header
        assert ext == "png"
        assert content_type == "image/png"
        assert content == PNG_BYTES

    def test_non_image_rejected(self, client):
        with patch("globetrotter.routers.uploads.upload_image") as up:
            resp = client.post("/api/upload", files={"file": ("notes.png", b"just some text", "image/png")})
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Unsupported file type")
        up.assert_not_called()

    def test_empty_file_rejected(self, client):
        resp = client.post("/api/upload", files={"file": ("empty.png", b"", "image/png")})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Empty file"

    def test_too_large_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_size_mb", 0)
        resp = client.post("/api/upload", files={"file": ("big.png", PNG_BYTES, "image/png")})
        assert resp.status_code == 400
        assert "too large" in resp.json()["error"]

    def test_oversized_upload_read_is_bounded(self, client, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_size_mb", 0)
        with patch("globetrotter.routers.uploads.validate_image", wraps=validate_image) as check:
            resp = client.post("/api/upload", files={"file": ("big.png", PNG_BYTES, "image/png")})
        assert resp.status_code == 400
        content, _, max_size = check.call_args.args
        assert max_size == 0
        assert len(content) == 1

    def test_missing_file(self, client):
        resp = client.post("/api/upload")
        assert resp.status_code == 400
        assert resp.json()["error"] == "No file provided"

    def test_storage_error_500(self, client):
        err = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        with patch("globetrotter.routers.uploads.upload_image", side_effect=err):
            resp = client.post("/api/upload", files={"file": ("a.png", PNG_BYTES, "image/png")})
        assert resp.status_code == 500
        assert resp.json()["error"] == "Upload failed"

    def test_requires_login(self, anon_client):
        resp = anon_client.post("/api/upload", files={"file": ("a.png", PNG_BYTES, "image/png")})
        assert resp.status_code == 401


class TestStorage:
    def test_upload_image_puts_object(self, monkeypatch):
        from globetrotter import storage

        monkeypatch.setattr(settings, "s3_bucket", "trips")
        monkeypatch.setattr(settings, "s3_public_base_url", "https://cdn.test/")
        with patch.object(storage, "get_s3_client") as get_client:
            url = storage.upload_image(b"data", "png", "image/png")

        kwargs = get_client.return_value.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "trips"
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["Key"].endswith(".png")
        assert url == f"https://cdn.test/trips/{kwargs['Key']}"
