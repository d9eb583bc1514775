"""
Pricing and basket calculation for checkout.

Everything in this module is pure: no database access, no clock, no
logging. Given product snapshots, requested quantities, a discount and the
cash tendered it either returns the fully priced sale (plus the absolute
stock value each product must end up at) or raises a typed checkout error.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Sequence, Tuple

from apps.inventory.services import ProductSnapshot

from .exceptions import InsufficientStock, InvalidDiscount, InvalidQuantity, PaymentInsufficient

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class LineItemRequest:
    """One basket line as submitted by the caller."""

    product_id: Any
    quantity: int


@dataclass(frozen=True)
class SaleLine:
    """A priced line, with the name and price captured at sale time."""

    line_number: int
    product_id: Any
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class StockMutation:
    """
    Absolute stock write for one product.

    ``expected_stock`` is the value the calculation was based on; a store
    only applies ``new_stock`` while the stored value still equals it.
    """

    product_id: Any
    expected_stock: int
    new_stock: int


@dataclass(frozen=True)
class SaleDraft:
    """Everything needed to persist a sale, minus the store-assigned id and timestamp."""

    sale_number: str
    payment_method: str
    total_amount: Decimal
    discount: Decimal
    grand_total: Decimal
    cash: Decimal
    change: Decimal
    lines: Tuple[SaleLine, ...]


@dataclass(frozen=True)
class PricedBasket:
    lines: Tuple[SaleLine, ...]
    total_amount: Decimal
    discount: Decimal
    grand_total: Decimal
    cash: Decimal
    change: Decimal
    stock_mutations: Tuple[StockMutation, ...] = field(default_factory=tuple)

    def to_draft(self, sale_number, payment_method):
        return SaleDraft(
            sale_number=sale_number,
            payment_method=payment_method,
            total_amount=self.total_amount,
            discount=self.discount,
            grand_total=self.grand_total,
            cash=self.cash,
            change=self.change,
            lines=self.lines,
        )


def calculate_sale(
    items: Sequence[Tuple[ProductSnapshot, int]],
    discount: Decimal = ZERO,
    cash: Decimal = ZERO,
) -> PricedBasket:
    """
    Price a basket against product snapshots.

    ``items`` is the ordered basket as ``(snapshot, quantity)`` pairs. When a
    product appears on several lines every line draws from the same
    snapshot stock, so the check is made against the running total
    requested for that product.

    Raises:
        InvalidQuantity: a line asks for fewer than one unit
        InsufficientStock: cumulative quantity for a product exceeds its stock
        InvalidDiscount: discount is negative or larger than the total amount
        PaymentInsufficient: cash tendered is less than the grand total
    """
    discount = Decimal(discount)
    cash = Decimal(cash)

    lines: List[SaleLine] = []
    requested: Dict[Any, int] = {}
    snapshots: Dict[Any, ProductSnapshot] = {}
    total_amount = ZERO

    for line_number, (snapshot, quantity) in enumerate(items, start=1):
        if quantity < 1:
            raise InvalidQuantity(snapshot.product_id, quantity)

        cumulative = requested.get(snapshot.product_id, 0) + quantity
        if cumulative > snapshot.stock:
            raise InsufficientStock(
                snapshot.product_id, available=snapshot.stock, requested=cumulative
            )
        requested[snapshot.product_id] = cumulative
        snapshots.setdefault(snapshot.product_id, snapshot)

        subtotal = snapshot.price * quantity
        total_amount += subtotal
        lines.append(
            SaleLine(
                line_number=line_number,
                product_id=snapshot.product_id,
                product_name=snapshot.name,
                quantity=quantity,
                unit_price=snapshot.price,
                subtotal=subtotal,
            )
        )

    grand_total = total_amount - discount
    if discount < 0 or grand_total < 0:
        raise InvalidDiscount(total_amount, discount)

    change = cash - grand_total
    if change < 0:
        raise PaymentInsufficient(grand_total, cash)

    mutations = tuple(
        StockMutation(
            product_id=product_id,
            expected_stock=snapshots[product_id].stock,
            new_stock=snapshots[product_id].stock - quantity,
        )
        for product_id, quantity in requested.items()
    )

    return PricedBasket(
        lines=tuple(lines),
        total_amount=total_amount,
        discount=discount,
        grand_total=grand_total,
        cash=cash,
        change=change,
        stock_mutations=mutations,
    )
