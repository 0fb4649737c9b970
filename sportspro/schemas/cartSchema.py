from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

# Wire format is camelCase; python attributes stay snake_case.
CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


# ============= CART REQUEST SCHEMAS =============
class CartAddItemRequest(BaseModel):
    """Request schema for adding to cart"""
    equipment_id: str
    quantity: int = 1  # Lower bound enforced by the service so it answers 400, not 422

    model_config = CAMEL_CONFIG


class CartUpdateItemRequest(BaseModel):
    """Request schema for updating cart item"""
    quantity: int

    model_config = CAMEL_CONFIG


# ============= CART RESPONSE SCHEMAS =============
class EquipmentSnapshot(BaseModel):
    """Display fields joined in from the catalog when the cart is read"""
    id: str
    name: str
    brand: str
    category: str
    images: List[str] = Field(default_factory=list)

    model_config = CAMEL_CONFIG


class CartLineItemRead(BaseModel):
    id: str
    equipment_id: str
    price: float
    quantity: int
    equipment: Optional[EquipmentSnapshot] = None

    model_config = CAMEL_CONFIG


class CartRead(BaseModel):
    """Schema for reading cart"""
    id: Optional[str] = None
    items: List[CartLineItemRead] = Field(default_factory=list)
    total_items: int = 0
    total_price: float = 0.0
    version: int = 0
    updated_at: Optional[datetime] = None

    model_config = CAMEL_CONFIG
