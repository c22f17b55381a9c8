from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    name: str = Field(..., max_length=255, description="Product name")
    description: Optional[str] = None
    price: Optional[Decimal] = None


class ProductCreate(ProductBase):
    """Inbound product payload. The store assigns the identifier."""

    model_config = ConfigDict(extra="ignore")


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
