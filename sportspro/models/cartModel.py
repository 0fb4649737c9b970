from datetime import datetime
from typing import Optional, List
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field, ConfigDict
from pymongo import IndexModel, ASCENDING


class CartLineItem(BaseModel):
    """One equipment reference in a cart, priced at the moment it was first added"""
    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    equipment_id: PydanticObjectId
    price: float = Field(..., ge=0)  # Snapshot, never refreshed from the catalog
    quantity: int = Field(..., ge=1)
    added_at: datetime = Field(default_factory=datetime.utcnow)


class Cart(Document):
    """Shopping cart for a user.

    Totals are derived from the line items and are recomputed by
    ``mark_mutated`` before every write; ``version`` increases by one per
    committed mutation so clients can tell newer states from older ones.
    """
    id: Optional[PydanticObjectId] = Field(None, alias="_id")
    user_id: PydanticObjectId  # Reference to User
    items: List[CartLineItem] = Field(default_factory=list)
    total_items: int = 0
    total_price: float = 0.0
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "carts"
        use_revision = True
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True),  # One cart per user
        ]

    model_config = ConfigDict(populate_by_name=True)

    def find_item(self, item_id) -> Optional[CartLineItem]:
        item_id = str(item_id)
        return next((item for item in self.items if str(item.id) == item_id), None)

    def find_item_for_equipment(self, equipment_id: PydanticObjectId) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.equipment_id == equipment_id), None)

    def add_line(self, equipment_id: PydanticObjectId, price: float, quantity: int) -> CartLineItem:
        """Increase the line for this equipment, or append one priced at ``price``."""
        existing_item = self.find_item_for_equipment(equipment_id)
        if existing_item:
            existing_item.quantity += quantity
            return existing_item

        item = CartLineItem(equipment_id=equipment_id, price=price, quantity=quantity)
        self.items.append(item)
        return item

    def remove_line(self, item_id) -> bool:
        remaining = [item for item in self.items if str(item.id) != str(item_id)]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

    def recompute_totals(self) -> None:
        self.total_items = sum(item.quantity for item in self.items)
        self.total_price = round(sum(item.price * item.quantity for item in self.items), 2)

    def mark_mutated(self) -> None:
        self.recompute_totals()
        self.version += 1
        self.updated_at = datetime.utcnow()
