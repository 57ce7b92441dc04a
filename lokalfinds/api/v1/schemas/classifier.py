"""
Schemas for static classifier records (profile types, categories, listing
types, social platforms).
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ProfileTypeInfo(BaseModel):
    """Display metadata for a business profile type."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Profile type identifier")
    name: str = Field(..., description="Display name")
    description: str = Field("", description="Who this profile type is for")
    icon: str = Field(..., description="Icon name")
    can_have: List[str] = Field(
        default_factory=list,
        description="Listing sections available to this profile type (products, services, ...)",
    )
    color: str = Field(..., description="Hex color")


class CategoryInfo(BaseModel):
    """Display metadata for a business category."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    types: List[str] = Field(
        default_factory=list, description="Profile types that can use this category"
    )


class ListingTypeInfo(BaseModel):
    """Display metadata for something a business can list."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    fields: List[str] = Field(default_factory=list)


class SocialPlatformInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    icon: str
    color: str


class ProfileTab(BaseModel):
    """A tab on the store details screen."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
