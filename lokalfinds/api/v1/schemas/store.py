"""
Schemas for business profiles (stores).

Reference: https://fastapi.tiangolo.com/tutorial/response-model/
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from lokalfinds.api.v1.schemas.classifier import CategoryInfo, ProfileTypeInfo


class SocialLink(BaseModel):
    """Social link as stored on the profile."""

    platform: str = Field("link", description="Platform identifier (facebook, instagram, ...)")
    url: str = Field(..., description="Link target as entered by the owner")


class SocialLinkView(SocialLink):
    """Social link with display metadata resolved."""

    icon: str = Field(..., description="Icon name for the platform")
    color: str = Field(..., description="Brand color for the platform")
    href: str = Field(..., description="Openable URL (https:// prefixed when missing a scheme)")


class BusinessProfileView(BaseModel):
    """
    Business profile as rendered by screens.

    Every optional field carries an explicit default and classifier lookups are
    already resolved, so display code never needs to null-check them.
    """

    id: int
    owner_id: str
    name: str
    address: str
    hours: str
    contact: str = ""
    email: str = ""
    website: str = ""
    description: str = ""
    social_links: List[SocialLinkView] = Field(default_factory=list)
    profile_type: ProfileTypeInfo
    category: CategoryInfo
    cover_image_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BusinessProfileCreate(BaseModel):
    """
    Input for creating a business profile.

    Field rules (required name/address/hours, email format) are checked by the
    gateway so that failures surface as ValidationError.
    """

    name: str = ""
    address: str = ""
    hours: str = ""
    contact: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    social_links: List[SocialLink] = Field(default_factory=list)
    profile_type: Optional[str] = None
    category: Optional[str] = None
    cover_image_url: Optional[str] = None
    profile_image_url: Optional[str] = None


class BusinessProfileUpdate(BaseModel):
    """Partial update of a business profile. Only set fields are written."""

    name: Optional[str] = None
    address: Optional[str] = None
    hours: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    social_links: Optional[List[SocialLink]] = None
    profile_type: Optional[str] = None
    category: Optional[str] = None
    cover_image_url: Optional[str] = None
    profile_image_url: Optional[str] = None
