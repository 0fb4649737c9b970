from typing import Callable, Optional
from beanie import PydanticObjectId
from beanie.exceptions import RevisionIdWasChanged
from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError
from sportspro.models.cartModel import Cart
from sportspro.crud.equipmentService import EquipmentService
from sportspro.config.settings import settings

import logging

logger = logging.getLogger(__name__)

# A mutation edits the cart in place and reports whether anything changed.
CartMutation = Callable[[Cart], bool]


class CartService:
    """Service layer for cart operations"""

    @staticmethod
    async def get_cart(user_id: PydanticObjectId) -> Optional[Cart]:
        return await Cart.find_one(Cart.user_id == user_id)

    @staticmethod
    async def _commit(user_id: PydanticObjectId, operation: str, mutation: CartMutation) -> Cart:
        """
        Apply ``mutation`` to the user's cart as one read-modify-write.

        A user without a cart gets an unsaved empty one; it is only inserted
        when the mutation actually changed it, so reads, removals and clears
        never create carts. A concurrent writer shows up as a revision
        mismatch (or a duplicate user_id on a racing first insert), in which
        case the cart is re-read and the mutation applied again.
        """
        for attempt in range(1, settings.CART_COMMIT_ATTEMPTS + 1):
            cart = await CartService.get_cart(user_id)
            if not cart:
                cart = Cart(user_id=user_id, items=[])

            if not mutation(cart):
                return cart

            cart.mark_mutated()
            try:
                if cart.id is None:
                    await cart.insert()
                else:
                    await cart.save()
            except (RevisionIdWasChanged, DuplicateKeyError):
                logger.warning(f"Concurrent write on cart of user {user_id} during {operation}, "
                               f"attempt {attempt}/{settings.CART_COMMIT_ATTEMPTS}")
                continue

            logger.info(f"Cart of user {user_id}: {operation} committed (version {cart.version})")
            return cart

        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cart was modified concurrently, please retry"
        )

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        if quantity < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Quantity must be at least 1"
            )

    @staticmethod
    async def add_item(user_id: PydanticObjectId, equipment_id: str, quantity: int = 1) -> Cart:
        """Add item to cart or increase quantity if exists"""
        CartService._validate_quantity(quantity)

        # Verify equipment exists and is available
        equipment = await EquipmentService.get_item(equipment_id)
        EquipmentService.ensure_available(equipment, quantity)

        def mutation(cart: Cart) -> bool:
            # An existing line keeps its original price snapshot
            cart.add_line(equipment.id, equipment.price, quantity)
            return True

        return await CartService._commit(user_id, "add", mutation)

    @staticmethod
    async def update_item_quantity(user_id: PydanticObjectId, item_id: str, quantity: int) -> Cart:
        """Update quantity of item in cart"""
        CartService._validate_quantity(quantity)

        def mutation(cart: Cart) -> bool:
            # Ids from other users' carts are indistinguishable from unknown ids
            item = cart.find_item(item_id)
            if not item:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Item not found in cart"
                )
            item.quantity = quantity
            return True

        return await CartService._commit(user_id, "update", mutation)

    @staticmethod
    async def remove_item(user_id: PydanticObjectId, item_id: str) -> Cart:
        """Remove item from cart entirely; unknown ids leave the cart as it is"""
        return await CartService._commit(user_id, "remove", lambda cart: cart.remove_line(item_id))

    @staticmethod
    async def clear_cart(user_id: PydanticObjectId) -> Cart:
        """Clear all items from cart"""

        def mutation(cart: Cart) -> bool:
            if not cart.items:
                return False
            cart.items = []
            return True

        return await CartService._commit(user_id, "clear", mutation)

    @staticmethod
    async def get_cart_with_equipment(user_id: PydanticObjectId, cart: Optional[Cart] = None) -> dict:
        """Get cart with fresh catalog display fields joined onto each line"""
        if cart is None:
            cart = await CartService.get_cart(user_id)
        if not cart:
            return {"id": None, "items": [], "total_items": 0, "total_price": 0.0, "version": 0}

        equipment_map = await EquipmentService.get_items_map(item.equipment_id for item in cart.items)

        items_with_equipment = []
        for item in cart.items:
            equipment = equipment_map.get(item.equipment_id)
            items_with_equipment.append({
                "id": str(item.id),
                "equipment_id": str(item.equipment_id),
                "price": item.price,
                "quantity": item.quantity,
                "equipment": {
                    "id": str(equipment.id),
                    "name": equipment.name,
                    "brand": equipment.brand,
                    "category": equipment.category,
                    "images": equipment.images,
                } if equipment else None
            })

        return {
            "id": str(cart.id) if cart.id else None,
            "items": items_with_equipment,
            "total_items": cart.total_items,
            "total_price": cart.total_price,
            "version": cart.version,
            "updated_at": cart.updated_at if cart.id else None,
        }
