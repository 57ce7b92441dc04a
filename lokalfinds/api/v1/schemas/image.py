"""
Schemas for image host URLs and uploads
"""
from typing import Literal, Optional, Union
from pydantic import BaseModel, Field


class ImageTransform(BaseModel):
    """
    Transformation applied when rewriting an image host URL.

    Rendered as w_<width>,h_<height>,c_fill,q_<quality>,f_<format>.
    """
    width: int = Field(400, gt=0, description="Target width in pixels")
    height: int = Field(400, gt=0, description="Target height in pixels")
    quality: Union[Literal["auto"], int] = Field("auto", description="'auto' or an explicit quality")
    format: str = Field("auto", description="'auto' or a file extension such as 'webp'")


class OptimizedImageResponse(BaseModel):
    url: Optional[str] = Field(None, description="Rewritten URL, or the input unchanged")


class ImageUploadResult(BaseModel):
    """Response from the image host after an upload"""
    url: str = Field(..., description="Public (secure) URL of the uploaded image")
    public_id: str = Field(..., description="Image host identifier")
    width: Optional[int] = Field(None, description="Image width in pixels")
    height: Optional[int] = Field(None, description="Image height in pixels")
