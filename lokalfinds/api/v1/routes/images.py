"""
Image routes
Rewrites image host URLs into resized variants and uploads product images
"""
import logging
from typing import Optional

import pydantic
from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status

from lokalfinds.api.v1.schemas.image import ImageTransform, ImageUploadResult, OptimizedImageResponse
from lokalfinds.core.config import settings
from lokalfinds.core.exceptions import ImageUploadError
from lokalfinds.services.image import get_image_host_service, get_optimized_image_url

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/images",
    tags=["images"],
)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@router.get(
    "/optimize",
    response_model=OptimizedImageResponse,
    summary="Rewrite an image URL into a resized variant",
    responses={422: {"description": "Invalid transformation"}},
)
async def optimize_image_url(
    url: str = Query(..., description="Original image URL"),
    width: Optional[int] = Query(None, gt=0, description="Target width (default 400)"),
    height: Optional[int] = Query(None, gt=0, description="Target height (default 400)"),
    quality: str = Query("auto", description="'auto' or an integer quality"),
    format: str = Query("auto", description="'auto' or a file extension"),
) -> OptimizedImageResponse:
    """
    Insert a resize transformation after the host's upload segment.

    URLs that are not served by the image host come back unchanged.
    """
    try:
        transform = ImageTransform(
            width=width or settings.DEFAULT_IMAGE_WIDTH,
            height=height or settings.DEFAULT_IMAGE_HEIGHT,
            quality=int(quality) if quality.isdigit() else quality,
            format=format,
        )
    except pydantic.ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid transformation: {e.errors()[0]['msg']}",
        ) from e

    return OptimizedImageResponse(
        url=get_optimized_image_url(
            url, transform.width, transform.height, transform.quality, transform.format
        )
    )


@router.post(
    "/upload",
    response_model=ImageUploadResult,
    summary="Upload a product image",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Image uploaded successfully"},
        400: {"description": "Invalid file"},
        502: {"description": "Image host rejected the upload"},
    },
)
async def upload_image(
    file: UploadFile = File(..., description="Image file to upload"),
) -> ImageUploadResult:
    """
    Upload an image to the image host and return its public URL.

    The returned URL is what product and profile forms store.
    """
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type: {file.content_type}",
        )

    file_content = await file.read()
    if len(file_content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File is too large (max 10 MB)",
        )

    image_host = get_image_host_service()
    try:
        return await image_host.upload_image(
            file_content,
            filename=file.filename or "product-image.jpg",
            content_type=file.content_type,
        )
    except ImageUploadError as e:
        logger.warning(f"Image upload failed: {e.message}")
        status_code = (
            status.HTTP_400_BAD_REQUEST if e.cause is None else status.HTTP_502_BAD_GATEWAY
        )
        raise HTTPException(status_code=status_code, detail=e.message) from e
