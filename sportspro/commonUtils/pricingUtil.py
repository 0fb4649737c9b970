from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel

from sportspro.schemas.cartSchema import CartRead

# Display-only figures; the cart itself only ever stores the pre-tax total.
TAX_RATE = Decimal("0.08")
SHIPPING_COST = Decimal("0.00")
CENT = Decimal("0.01")


class OrderSummary(BaseModel):
    total_items: int
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0


def _to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def summarize_cart(cart: CartRead) -> OrderSummary:
    subtotal = _to_cents(Decimal(str(cart.total_price)))
    tax = _to_cents(subtotal * TAX_RATE)
    return OrderSummary(
        total_items=cart.total_items,
        subtotal=subtotal,
        shipping=SHIPPING_COST,
        tax=tax,
        total=subtotal + SHIPPING_COST + tax,
    )
