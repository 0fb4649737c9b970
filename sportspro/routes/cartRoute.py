from fastapi import APIRouter, Depends

from sportspro.models.userModel import User
from sportspro.schemas.cartSchema import CartRead, CartAddItemRequest, CartUpdateItemRequest
from sportspro.crud.userService import current_active_user
from sportspro.crud.cartService import CartService

router = APIRouter()


# ============= CART ROUTES =============
@router.get("/cart", response_model=CartRead)
async def get_cart(current_user: User = Depends(current_active_user)):
    """Get current user's cart"""
    return await CartService.get_cart_with_equipment(current_user.id)


@router.post("/cart/add", response_model=CartRead)
async def add_to_cart(
        item: CartAddItemRequest,
        current_user: User = Depends(current_active_user)
):
    """Add item to cart"""
    cart = await CartService.add_item(current_user.id, item.equipment_id, item.quantity)
    return await CartService.get_cart_with_equipment(current_user.id, cart)


@router.put("/cart/update/{item_id}", response_model=CartRead)
async def update_cart_item(
        item_id: str,
        update: CartUpdateItemRequest,
        current_user: User = Depends(current_active_user)
):
    """Update quantity of item in cart"""
    cart = await CartService.update_item_quantity(current_user.id, item_id, update.quantity)
    return await CartService.get_cart_with_equipment(current_user.id, cart)


@router.delete("/cart/remove/{item_id}", response_model=CartRead)
async def remove_from_cart(
        item_id: str,
        current_user: User = Depends(current_active_user)
):
    """Remove item from cart"""
    cart = await CartService.remove_item(current_user.id, item_id)
    return await CartService.get_cart_with_equipment(current_user.id, cart)


@router.delete("/cart/clear", response_model=CartRead)
async def clear_cart(current_user: User = Depends(current_active_user)):
    """Clear entire cart"""
    cart = await CartService.clear_cart(current_user.id)
    return await CartService.get_cart_with_equipment(current_user.id, cart)
