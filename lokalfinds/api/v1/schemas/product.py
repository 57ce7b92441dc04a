"""
Schemas for products listed by a store.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field


class ProductView(BaseModel):
    """Product as rendered by screens."""

    id: int
    store_id: int
    name: str
    price: Decimal = Field(..., description="Price with two fraction digits")
    price_display: str = Field(..., description="Price formatted with two fraction digits")
    description: str = ""
    in_stock: bool = True
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class ProductCreate(BaseModel):
    """
    Input for adding a product.

    price is accepted as entered in the form (string or number) and parsed by
    the gateway.
    """

    name: str = ""
    price: Union[str, int, float, Decimal, None] = None
    description: Optional[str] = None
    in_stock: bool = True
    image_url: Optional[str] = None


class ProductUpdate(BaseModel):
    """Partial update of a product. Only set fields are written."""

    name: Optional[str] = None
    price: Union[str, int, float, Decimal, None] = None
    description: Optional[str] = None
    in_stock: Optional[bool] = None
    image_url: Optional[str] = None
