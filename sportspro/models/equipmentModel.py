from datetime import datetime
from typing import Optional, List
from beanie import Document, PydanticObjectId
from pydantic import Field, ConfigDict

from sportspro.commonUtils.enumUtils import EquipmentAvailability


class Equipment(Document):
    """Catalog item sold in the equipment store"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")

    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1)
    sport: str = Field(..., min_length=1)
    brand: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    original_price: Optional[float] = None
    description: str = ""
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    availability: EquipmentAvailability = EquipmentAvailability.IN_STOCK
    stock: int = Field(0, ge=0)
    is_active: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "equipment"
        indexes = [
            [("sport", 1), ("category", 1)],
            [("price", 1)],
        ]

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )
