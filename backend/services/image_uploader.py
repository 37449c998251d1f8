"""Image hosting through Cloudinary."""

import io
import logging
from typing import Protocol

import cloudinary
import cloudinary.uploader

from backend.core import config
from backend.core.errors import UploadError

logger = logging.getLogger(__name__)


class ImageUploader(Protocol):
    def upload(self, data: bytes, filename: str | None = None) -> str:
        ...


class CloudinaryUploader:
    """Uploads image bytes and returns the hosted HTTPS URL."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "campus-fixit",
        timeout: float = 30.0,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self._configured = False

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _configure(self) -> None:
        if self._configured:
            return
        cloudinary.config(
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            secure=True,
        )
        self._configured = True

    def upload(self, data: bytes, filename: str | None = None) -> str:
        if not self.is_configured:
            logger.error("Image upload requested but Cloudinary credentials are not set")
            raise UploadError()

        self._configure()
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(data),
                resource_type="image",
                folder=self.folder,
                filename=filename,
                timeout=self.timeout,
            )
        except Exception as exc:
            logger.exception("Image upload to Cloudinary failed")
            raise UploadError() from exc

        url = result.get("secure_url") or result.get("url")
        if not url:
            logger.error("Cloudinary response did not include a URL")
            raise UploadError()
        return url


_uploader: CloudinaryUploader | None = None


def get_image_uploader() -> ImageUploader:
    global _uploader

    if _uploader is None:
        _uploader = CloudinaryUploader(
            cloud_name=config.CLOUDINARY_CLOUD_NAME,
            api_key=config.CLOUDINARY_API_KEY,
            api_secret=config.CLOUDINARY_API_SECRET,
            folder=config.CLOUDINARY_FOLDER,
            timeout=config.UPLOAD_TIMEOUT_SECONDS,
        )
    return _uploader
