"""
Routes for public store data: business profiles, their products and reviews.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from lokalfinds.api.v1.schemas.product import ProductView
from lokalfinds.api.v1.schemas.review import StoreReviewsResponse
from lokalfinds.api.v1.schemas.store import BusinessProfileView
from lokalfinds.core.dependencies import get_gateway
from lokalfinds.core.exceptions import FetchError
from lokalfinds.services.gateway import DataGateway
from lokalfinds.services.review import summarize_reviews

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/stores",
    tags=["stores"],
)

UNAVAILABLE = {503: {"description": "Backend unavailable"}}


def _unavailable(e: FetchError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


@router.get(
    "",
    response_model=List[BusinessProfileView],
    summary="List stores",
    responses=UNAVAILABLE,
)
async def list_stores(gateway: DataGateway = Depends(get_gateway)) -> List[BusinessProfileView]:
    try:
        return await gateway.fetch_business_profiles()
    except FetchError as e:
        raise _unavailable(e) from e


@router.get(
    "/owner/{owner_id}",
    response_model=BusinessProfileView,
    summary="Get the store owned by a user",
    responses={404: {"description": "User has no store"}, **UNAVAILABLE},
)
async def get_store_by_owner(
    owner_id: str, gateway: DataGateway = Depends(get_gateway)
) -> BusinessProfileView:
    try:
        profile = await gateway.fetch_business_profile_by_owner(owner_id)
    except FetchError as e:
        raise _unavailable(e) from e
    if profile is None:
        raise _not_found("Store")
    return profile


@router.get(
    "/{store_id}",
    response_model=BusinessProfileView,
    summary="Get a store",
    responses={404: {"description": "Store not found"}, **UNAVAILABLE},
)
async def get_store(store_id: int, gateway: DataGateway = Depends(get_gateway)) -> BusinessProfileView:
    try:
        profile = await gateway.fetch_business_profile(store_id)
    except FetchError as e:
        raise _unavailable(e) from e
    if profile is None:
        raise _not_found("Store")
    return profile


@router.get(
    "/{store_id}/products",
    response_model=List[ProductView],
    summary="List a store's products",
    responses=UNAVAILABLE,
)
async def get_store_products(
    store_id: int, gateway: DataGateway = Depends(get_gateway)
) -> List[ProductView]:
    try:
        return await gateway.fetch_products_by_store(store_id)
    except FetchError as e:
        raise _unavailable(e) from e


@router.get(
    "/{store_id}/reviews",
    response_model=StoreReviewsResponse,
    summary="List a store's reviews with their summary",
    responses=UNAVAILABLE,
)
async def get_store_reviews(
    store_id: int,
    limit: Optional[int] = Query(
        None, ge=1, le=1000, description="Maximum number of reviews to return (newest first)"
    ),
    gateway: DataGateway = Depends(get_gateway),
) -> StoreReviewsResponse:
    """
    Reviews newest first. The summary always covers every review of the
    store, even when `limit` trims the list.
    """
    try:
        reviews = await gateway.fetch_reviews_by_store(store_id)
    except FetchError as e:
        raise _unavailable(e) from e
    shown = reviews[:limit] if limit is not None else reviews
    return StoreReviewsResponse(summary=summarize_reviews(reviews), reviews=shown)
