"""
Storage collaborators for the checkout core.

A sale store reads product snapshots and applies a checkout as one atomic
unit: every stock write plus the sale and its lines, or nothing at all.
Stock writes are conditional. Each product's stock is only replaced while
it still holds the value the sale was priced against, so two checkouts that
read the same stock cannot both commit.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Protocol, Sequence

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.inventory.models import Product
from apps.inventory.services import ProductSnapshot, get_product_snapshots

from .exceptions import DuplicateSaleNumber, PersistenceFailed, SaleNotFound, StockConflict
from .models import Sale, SaleItem
from .pricing import SaleDraft, StockMutation

logger = logging.getLogger(__name__)


class SaleStore(Protocol):
    """Contract the checkout service depends on."""

    def read_products(self, product_ids: Iterable[Any]) -> Dict[Any, ProductSnapshot]:
        ...

    def atomic_apply(
        self,
        mutations: Sequence[StockMutation],
        draft: SaleDraft,
        cashier: Optional[Any] = None,
    ) -> Any:
        """
        Apply all stock mutations and record the sale, or change nothing.

        Raises StockConflict, DuplicateSaleNumber or PersistenceFailed.
        """
        ...

    def get_sale(self, sale_id: Any) -> Any:
        ...

    def list_sales(self) -> Iterable[Any]:
        ...


class DjangoSaleStore:
    """
    Sale store backed by the Django ORM.

    The apply runs inside ``transaction.atomic()``. Each stock write is an
    ``UPDATE ... WHERE stock = <expected>``; the database row lock taken by
    the update serializes competing checkouts on the same product while
    checkouts on disjoint products proceed in parallel. Products are updated
    in id order so overlapping checkouts lock rows in the same order.
    """

    def read_products(self, product_ids):
        return get_product_snapshots(product_ids)

    def atomic_apply(self, mutations, draft, cashier=None):
        try:
            with transaction.atomic():
                if Sale.objects.filter(sale_number=draft.sale_number).exists():
                    raise DuplicateSaleNumber(draft.sale_number)

                now = timezone.now()
                for mutation in sorted(mutations, key=lambda m: str(m.product_id)):
                    if mutation.new_stock < 0:
                        raise StockConflict(mutation.product_id)
                    updated = Product.objects.filter(
                        id=mutation.product_id, stock=mutation.expected_stock
                    ).update(stock=mutation.new_stock, updated_at=now)
                    if updated != 1:
                        logger.debug(
                            f"Conditional stock write missed for product {mutation.product_id} "
                            f"(expected {mutation.expected_stock})"
                        )
                        raise StockConflict(mutation.product_id)

                sale = Sale.objects.create(
                    sale_number=draft.sale_number,
                    cashier=cashier,
                    total_amount=draft.total_amount,
                    discount=draft.discount,
                    grand_total=draft.grand_total,
                    cash=draft.cash,
                    change=draft.change,
                    payment_method=draft.payment_method,
                )
                for line in draft.lines:
                    SaleItem.objects.create(
                        sale=sale,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        line_number=line.line_number,
                    )
        except IntegrityError as exc:
            # Another checkout may have claimed the sale number after the check above.
            if Sale.objects.filter(sale_number=draft.sale_number).exists():
                raise DuplicateSaleNumber(draft.sale_number) from exc
            raise PersistenceFailed() from exc
        except DatabaseError as exc:
            raise PersistenceFailed() from exc

        return sale

    def get_sale(self, sale_id):
        try:
            return (
                Sale.objects.select_related("cashier")
                .prefetch_related("items")
                .get(id=sale_id)
            )
        except Sale.DoesNotExist:
            raise SaleNotFound(sale_id)

    def list_sales(self):
        return Sale.objects.select_related("cashier").prefetch_related("items")
