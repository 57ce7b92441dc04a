"""
Image host helpers: URL transformation and uploads to Cloudinary.

URL rewriting is a pure string operation. Uploads use Cloudinary's REST API
with an unsigned upload preset.
Reference: https://cloudinary.com/documentation/image_transformations
"""
import logging
from functools import lru_cache
from typing import Optional, Union

import httpx

from lokalfinds.api.v1.schemas.image import ImageUploadResult
from lokalfinds.core.config import settings
from lokalfinds.core.exceptions import ImageUploadError

logger = logging.getLogger(__name__)


def build_transformation(
    width: int,
    height: int,
    quality: Union[str, int] = "auto",
    format: str = "auto",
) -> str:
    """Render a Cloudinary transformation segment, e.g. w_200,h_200,c_fill,q_auto,f_auto."""
    return f"w_{width},h_{height},c_fill,q_{quality},f_{format}"


def get_optimized_image_url(
    original_url: Optional[str],
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Union[str, int] = "auto",
    format: str = "auto",
) -> Optional[str]:
    """
    Insert a transformation segment right after the /upload/ marker of an image host URL.

    URLs that are empty or not served by the image host are returned unchanged.
    No network call is made.

    Args:
        original_url: Image URL (may be None)
        width: Target width (defaults to DEFAULT_IMAGE_WIDTH)
        height: Target height (defaults to DEFAULT_IMAGE_HEIGHT)
        quality: "auto" or an integer quality
        format: "auto" or a file extension

    Returns:
        The rewritten URL, or original_url untouched
    """
    if not original_url or settings.IMAGE_HOST_MARKER not in original_url:
        return original_url

    transformation = build_transformation(
        width if width is not None else settings.DEFAULT_IMAGE_WIDTH,
        height if height is not None else settings.DEFAULT_IMAGE_HEIGHT,
        quality,
        format,
    )
    marker = settings.IMAGE_UPLOAD_SEGMENT
    # Only the first occurrence: a public ID may itself contain "/upload/"
    return original_url.replace(marker, f"{marker}{transformation}/", 1)


@lru_cache()
def get_image_host_service() -> "ImageHostService":
    """
    Get a singleton ImageHostService instance.

    Reference: https://docs.python.org/3/library/functools.html#functools.lru_cache
    """
    return ImageHostService()


class ImageHostService:
    """Uploads images to Cloudinary using an unsigned upload preset"""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        upload_preset: Optional[str] = None,
        folder: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.upload_preset = upload_preset or settings.CLOUDINARY_UPLOAD_PRESET
        self.folder = folder or settings.CLOUDINARY_UPLOAD_FOLDER
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    @property
    def upload_url(self) -> str:
        return f"{settings.CLOUDINARY_API_BASE_URL}/{self.cloud_name}/image/upload"

    async def upload_image(
        self,
        file_content: bytes,
        filename: str = "product-image.jpg",
        content_type: str = "image/jpeg",
    ) -> ImageUploadResult:
        """
        Upload an image and return its public URL.

        Args:
            file_content: Raw image bytes
            filename: Name sent with the multipart upload
            content_type: MIME type of the image

        Returns:
            ImageUploadResult with the secure URL and public ID

        Raises:
            ImageUploadError: If configuration is missing, the file is empty,
                or the image host rejects the upload
        """
        if not self.cloud_name or not self.upload_preset:
            raise ImageUploadError(
                "Image host configuration is missing. Set CLOUDINARY_CLOUD_NAME "
                "and CLOUDINARY_UPLOAD_PRESET."
            )
        if not file_content:
            raise ImageUploadError("File is empty")

        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.post(
                    self.upload_url,
                    data={"upload_preset": self.upload_preset, "folder": self.folder},
                    files={"file": (filename, file_content, content_type)},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Image upload rejected ({e.response.status_code}): {e.response.text}"
            )
            raise ImageUploadError(f"Upload failed: {e.response.text}", cause=e) from e
        except httpx.HTTPError as e:
            logger.error(f"Image upload failed: {type(e).__name__}: {e}", exc_info=True)
            raise ImageUploadError(f"Upload failed: {e}", cause=e) from e

        logger.info(f"Uploaded image {payload.get('public_id')} ({len(file_content)} bytes)")
        return ImageUploadResult(
            url=payload["secure_url"],
            public_id=payload["public_id"],
            width=payload.get("width"),
            height=payload.get("height"),
        )
