from pydantic import BaseModel, Field, ConfigDict, computed_field, field_validator
from decimal import Decimal
from typing import Optional, List
from datetime import datetime

from snackhub.modules.files.service import public_url


class ProductCreate(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(..., ge=0)

    @field_validator("product_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("The product name field is required.")
        return cleaned


class ProductUpdate(ProductCreate):
    pass


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    product_name: str
    price: Decimal
    quantity: int
    product_picture: Optional[str] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def product_picture_url(self) -> Optional[str]:
        return public_url(self.product_picture)


class ProductList(BaseModel):
    products: List[ProductOut]
