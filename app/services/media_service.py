import logging
import os
import time
from typing import BinaryIO, Dict, List, Optional, Tuple

import cloudinary.uploader
import cloudinary.utils
from fastapi import Depends

from config import Settings, get_settings
from utils.exceptions import MediaConfigurationError, MediaUploadError, ValidationFailed

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = ("jpg", "jpeg", "png", "gif", "mp4")
MAX_FILES = 10


class MediaService:
    """
    Thin adapter over Cloudinary.

    Files are either streamed through the API (`upload`) or sent by the
    browser straight to Cloudinary using the parameters from `signature`.
    Credentials come from the settings object on every call; the SDK's
    global configuration is never touched.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _credentials(self) -> Dict[str, str]:
        if not self.settings.cloudinary_configured:
            raise MediaConfigurationError("Cloudinary is not configured")
        return {
            "cloud_name": self.settings.cloudinary_cloud_name,
            "api_key": self.settings.cloudinary_api_key,
            "api_secret": self.settings.cloudinary_api_secret,
        }

    def folder_for(self, subfolder: Optional[str] = None) -> str:
        base = self.settings.cloudinary_folder.strip("/")
        return f"{base}/{subfolder}" if subfolder else base

    @staticmethod
    def check_format(filename: str):
        ext = os.path.splitext(filename or "")[1].lower().lstrip(".")
        if ext not in ALLOWED_FORMATS:
            raise ValidationFailed(
                f"Unsupported file '{filename}'. Allowed formats: {', '.join(ALLOWED_FORMATS)}"
            )

    def upload(self, files: List[Tuple[str, BinaryIO]], subfolder: Optional[str] = None) -> List[str]:
        """
        Upload `(filename, fileobj)` pairs and return their hosted URLs.

        Raises:
            ValidationFailed: No files, too many files, or a disallowed format
            MediaConfigurationError: Credentials are missing
            MediaUploadError: Cloudinary rejected an upload
        """
        if not files:
            raise ValidationFailed("No files were provided")
        if len(files) > MAX_FILES:
            raise ValidationFailed(f"At most {MAX_FILES} files can be uploaded at once")
        for filename, _ in files:
            self.check_format(filename)

        credentials = self._credentials()
        folder = self.folder_for(subfolder)
        urls = []
        for filename, fileobj in files:
            try:
                result = cloudinary.uploader.upload(
                    fileobj,
                    folder=folder,
                    resource_type="auto",
                    allowed_formats=list(ALLOWED_FORMATS),
                    **credentials,
                )
            except Exception as e:
                logger.exception("Cloudinary upload failed filename=%r folder=%s", filename, folder)
                raise MediaUploadError(f"Upload failed for '{filename}': {e}") from e
            urls.append(result.get("secure_url") or result.get("url"))
        return urls

    def signature(self, subfolder: Optional[str] = None, timestamp: Optional[int] = None) -> Dict:
        """Signed parameters letting a browser upload straight to Cloudinary."""
        credentials = self._credentials()
        timestamp = timestamp or int(time.time())
        folder = self.folder_for(subfolder)
        signature = cloudinary.utils.api_sign_request(
            {"folder": folder, "timestamp": timestamp},
            credentials["api_secret"],
        )
        return {
            "signature": signature,
            "timestamp": timestamp,
            "folder": folder,
            "cloudName": credentials["cloud_name"],
            "apiKey": credentials["api_key"],
        }


def get_media_service(settings: Settings = Depends(get_settings)) -> MediaService:
    return MediaService(settings)
