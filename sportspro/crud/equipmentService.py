from typing import Dict, Iterable
from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, status
from sportspro.models.equipmentModel import Equipment
from sportspro.commonUtils.enumUtils import EquipmentAvailability


class EquipmentService:
    """Read-only access to the equipment catalog"""

    @staticmethod
    async def get_item(equipment_id) -> Equipment:
        """Resolve a catalog reference or raise 404"""
        try:
            object_id = PydanticObjectId(equipment_id)
        except (InvalidId, TypeError):
            object_id = None

        equipment = await Equipment.get(object_id) if object_id else None
        if not equipment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Equipment not found"
            )
        return equipment

    @staticmethod
    def ensure_available(equipment: Equipment, quantity: int) -> None:
        if not equipment.is_active or equipment.availability == EquipmentAvailability.OUT_OF_STOCK:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Equipment is not available for purchase"
            )

        if equipment.availability != EquipmentAvailability.PRE_ORDER and equipment.stock < quantity:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Insufficient stock"
            )

    @staticmethod
    async def get_items_map(equipment_ids: Iterable[PydanticObjectId]) -> Dict[PydanticObjectId, Equipment]:
        ids = list(set(equipment_ids))
        if not ids:
            return {}
        equipment = await Equipment.find({"_id": {"$in": ids}}).to_list()
        return {item.id: item for item in equipment}
