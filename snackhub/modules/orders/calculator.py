"""
Order totals.

subtotal = sum(price * quantity)
tax = subtotal * TAX_RATE
discount_amount = (subtotal + tax) * discount / 100
total = max(subtotal + tax - discount_amount, 0)
change = amount_paid - total
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

TAX_RATE = Decimal("0.12")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Round to cents, half up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal

    def change_for(self, amount_paid) -> Decimal:
        return to_money(to_money(amount_paid) - self.total_amount)


def line_subtotal(price, quantity: int) -> Decimal:
    return to_money(to_money(price) * quantity)


def compute_totals(lines: Iterable[Tuple[Decimal, int]], discount=0) -> OrderTotals:
    """
    Compute totals for (unit_price, quantity) lines and a discount percent.

    Example: one line (50, 2) with no discount gives subtotal 100.00,
    tax 12.00 and total 112.00.
    """
    discount = Decimal(str(discount))
    if discount < 0 or discount > 100:
        raise ValueError("discount must be between 0 and 100")

    subtotal = to_money(sum((line_subtotal(price, qty) for price, qty in lines), ZERO))
    tax_amount = to_money(subtotal * TAX_RATE)
    discount_amount = to_money((subtotal + tax_amount) * discount / 100)
    total_amount = max(to_money(subtotal + tax_amount - discount_amount), ZERO)

    return OrderTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total_amount=total_amount,
    )
