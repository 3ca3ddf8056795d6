"""Tests for Cloudinary signatures and uploads."""

import hashlib
import io

import cloudinary.uploader
import pytest

from config import Settings
from main import app
from services.media_service import MediaService, get_media_service
from utils.exceptions import MediaConfigurationError, MediaUploadError, ValidationFailed


@pytest.fixture
def media_settings():
    return Settings(
        CLOUDINARY_CLOUD_NAME="demo-cloud",
        CLOUDINARY_API_KEY="1234567890",
        CLOUDINARY_API_SECRET="test-api-secret",
        CLOUDINARY_FOLDER="real-estate",
    )


@pytest.fixture
def fake_uploader(monkeypatch):
    calls = []

    def upload(fileobj, **options):
        calls.append(options)
        return {"secure_url": f"https://res.cloudinary.com/demo-cloud/{len(calls)}.jpg"}

    monkeypatch.setattr(cloudinary.uploader, "upload", upload)
    return calls


class TestSignature:
    def test_signature_matches_cloudinary_scheme(self, media_settings):
        result = MediaService(media_settings).signature("lands", timestamp=1700000000)

        expected = hashlib.sha1(
            b"folder=real-estate/lands&timestamp=1700000000test-api-secret"
        ).hexdigest()
        assert result == {
            "signature": expected,
            "timestamp": 1700000000,
            "folder": "real-estate/lands",
            "cloudName": "demo-cloud",
            "apiKey": "1234567890",
        }

    def test_missing_credentials(self):
        with pytest.raises(MediaConfigurationError):
            MediaService(Settings(CLOUDINARY_CLOUD_NAME="", CLOUDINARY_API_KEY="", CLOUDINARY_API_SECRET="")).signature()

    def test_signature_endpoint(self, client, admin_headers):
        response = client.get("/api/houses/cloudinary-signature", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["folder"].endswith("/houses")
        assert len(data["signature"]) == 40

    def test_signature_endpoint_without_credentials(self, client, admin_headers):
        app.dependency_overrides[get_media_service] = lambda: MediaService(
            Settings(CLOUDINARY_CLOUD_NAME="", CLOUDINARY_API_KEY="", CLOUDINARY_API_SECRET="")
        )
        response = client.get("/api/houses/cloudinary-signature", headers=admin_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "media_not_configured"

    def test_signature_endpoint_needs_admin(self, client, user_headers):
        assert client.get("/api/lands/cloudinary-signature", headers=user_headers).status_code == 403


class TestUpload:
    def test_upload_passes_credentials_per_call(self, media_settings, fake_uploader):
        urls = MediaService(media_settings).upload(
            [("front.jpg", io.BytesIO(b"a")), ("tour.mp4", io.BytesIO(b"b"))], "houses"
        )

        assert urls == [
            "https://res.cloudinary.com/demo-cloud/1.jpg",
            "https://res.cloudinary.com/demo-cloud/2.jpg",
        ]
        assert fake_uploader[0]["folder"] == "real-estate/houses"
        assert fake_uploader[0]["resource_type"] == "auto"
        assert fake_uploader[0]["api_secret"] == "test-api-secret"

    def test_rejects_unknown_format(self, media_settings, fake_uploader):
        with pytest.raises(ValidationFailed):
            MediaService(media_settings).upload([("notes.exe", io.BytesIO(b"x"))])
        assert fake_uploader == []

    def test_rejects_too_many_files(self, media_settings, fake_uploader):
        files = [(f"{i}.png", io.BytesIO(b"x")) for i in range(11)]
        with pytest.raises(ValidationFailed):
            MediaService(media_settings).upload(files)

    def test_wraps_cloudinary_failures(self, media_settings, monkeypatch):
        def broken(fileobj, **options):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(cloudinary.uploader, "upload", broken)
        with pytest.raises(MediaUploadError):
            MediaService(media_settings).upload([("a.png", io.BytesIO(b"x"))])

    def test_upload_endpoint(self, client, admin_headers, fake_uploader):
        files = [
            ("media", ("one.jpg", b"1", "image/jpeg")),
            ("media", ("two.png", b"2", "image/png")),
        ]
        response = client.post("/api/lands/upload", files=files, headers=admin_headers)

        assert response.status_code == 200, response.text
        assert len(response.json()["data"]["urls"]) == 2

    def test_upload_endpoint_bad_format(self, client, admin_headers, fake_uploader):
        files = [("media", ("script.sh", b"1", "text/plain"))]
        response = client.post("/api/lands/upload", files=files, headers=admin_headers)
        assert response.status_code == 400
