"""
Read-only classifier tables used to build store forms and pages.
"""
from typing import List, Optional

from fastapi import APIRouter, Query

from lokalfinds.api.v1.schemas.classifier import CategoryInfo, ProfileTab, ProfileTypeInfo
from lokalfinds.services.classifiers import (
    BUSINESS_CATEGORIES,
    PROFILE_TYPES,
    get_categories_for_profile_type,
    get_tabs_for_profile,
    search_categories,
)

router = APIRouter(
    prefix="/classifiers",
    tags=["classifiers"],
)


@router.get("/profile-types", response_model=List[ProfileTypeInfo], summary="List profile types")
async def list_profile_types() -> List[ProfileTypeInfo]:
    return list(PROFILE_TYPES.values())


@router.get("/categories", response_model=List[CategoryInfo], summary="List business categories")
async def list_categories(
    profile_type: Optional[str] = Query(None, description="Only categories offered to this profile type"),
    q: Optional[str] = Query(None, description="Case-insensitive search on category name or id"),
) -> List[CategoryInfo]:
    categories = get_categories_for_profile_type(profile_type) if profile_type else list(BUSINESS_CATEGORIES)
    if q:
        matches = {category.id for category in search_categories(q)}
        categories = [category for category in categories if category.id in matches]
    return categories


@router.get(
    "/profile-types/{type_id}/tabs",
    response_model=List[ProfileTab],
    summary="Tabs shown on a store page",
)
async def list_profile_tabs(type_id: str) -> List[ProfileTab]:
    """Details first, then one tab per section the profile type can have. Unknown types get only Details."""
    return get_tabs_for_profile(type_id)
