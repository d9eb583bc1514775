"""
Checkout orchestration.

``CheckoutService.process_sale`` runs a checkout through four states:

    VALIDATING -> CALCULATING -> COMMITTING -> COMMITTED | ABORTED

Every failure before COMMITTING happens before anything is written. The
COMMITTING step hands all writes to the store's ``atomic_apply`` in one call,
so a failed checkout never leaves partial effects behind. The service does
not retry a ``StockConflict``; whether to retry is up to the caller.
"""

import enum
import logging
import secrets

from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

from .exceptions import (
    CheckoutError,
    DuplicateSaleNumber,
    EmptyBasket,
    PersistenceFailed,
    ProductNotFound,
    StockConflict,
)
from .pricing import ZERO, LineItemRequest, calculate_sale

logger = logging.getLogger(__name__)


class CheckoutState(enum.Enum):
    VALIDATING = "validating"
    CALCULATING = "calculating"
    COMMITTING = "committing"
    COMMITTED = "committed"
    ABORTED = "aborted"


def generate_sale_number(prefix=None):
    """
    Build a sale number such as ``INV-20240101120000-3FA9C1``.

    Timestamp to the second plus a random suffix. Collisions are still
    possible, and the store rejects them.
    """
    if prefix is None:
        prefix = getattr(settings, "POS_SALE_NUMBER_PREFIX", "INV")
    return f"{prefix}-{timezone.now():%Y%m%d%H%M%S}-{secrets.token_hex(3).upper()}"


class CheckoutService:
    """
    Runs checkouts against an injected sale store.

    Args:
        store: object implementing ``apps.sales.stores.SaleStore``
        sale_number_factory: callable returning a new sale number
        max_sale_number_attempts: how many sale numbers to try before giving up
    """

    def __init__(self, store, sale_number_factory=None, max_sale_number_attempts=None):
        self.store = store
        self.sale_number_factory = sale_number_factory or generate_sale_number
        if max_sale_number_attempts is None:
            max_sale_number_attempts = getattr(settings, "POS_SALE_NUMBER_ATTEMPTS", 3)
        self.max_sale_number_attempts = max(1, int(max_sale_number_attempts))

    def quote(self, basket, discount=ZERO, cash=ZERO):
        """
        Validate and price a basket without writing anything.

        Returns the ``PricedBasket`` or raises the same errors as a checkout
        would before its commit step.
        """
        basket = self._normalize_basket(basket)
        snapshots = self._read_snapshots(basket)
        return calculate_sale(
            [(snapshots[line.product_id], line.quantity) for line in basket],
            discount=discount,
            cash=cash,
        )

    def process_sale(self, basket, payment_method, discount=ZERO, cash=ZERO, cashier=None):
        """
        Validate, price and commit a checkout.

        Args:
            basket: sequence of ``LineItemRequest`` or ``(product_id, quantity)`` pairs
            payment_method: free-form payment method label
            discount: sale-level discount amount
            cash: amount tendered
            cashier: user recording the sale, if any

        Returns:
            The committed sale as returned by the store.

        Raises:
            CheckoutError: one of its subclasses describing why nothing was recorded
        """
        state = CheckoutState.VALIDATING
        try:
            basket = self._normalize_basket(basket)
            snapshots = self._read_snapshots(basket)

            state = CheckoutState.CALCULATING
            priced = calculate_sale(
                [(snapshots[line.product_id], line.quantity) for line in basket],
                discount=discount,
                cash=cash,
            )

            state = CheckoutState.COMMITTING
            sale = self._commit(priced, payment_method, cashier)
        except StockConflict as exc:
            logger.warning(
                f"Checkout aborted in {state.value}: stock conflict on product {exc.product_id}"
            )
            raise
        except PersistenceFailed:
            logger.error(f"Checkout aborted in {state.value}: persistence failed", exc_info=True)
            raise
        except CheckoutError as exc:
            logger.info(f"Checkout rejected in {state.value}: {exc.code} ({exc.detail})")
            raise

        state = CheckoutState.COMMITTED
        logger.info(
            f"Checkout {state.value}: sale {sale.sale_number} "
            f"grand_total={sale.grand_total} lines={len(priced.lines)}"
        )
        return sale

    def get_sale(self, sale_id):
        return self.store.get_sale(sale_id)

    def list_sales(self):
        return self.store.list_sales()

    def _normalize_basket(self, basket):
        if not basket:
            raise EmptyBasket()
        lines = []
        for line in basket:
            if not isinstance(line, LineItemRequest):
                product_id, quantity = line
                line = LineItemRequest(product_id=product_id, quantity=quantity)
            lines.append(line)
        return lines

    def _read_snapshots(self, basket):
        """Read one snapshot per distinct product, failing on the first unknown id."""
        snapshots = self.store.read_products(line.product_id for line in basket)
        for line in basket:
            if line.product_id not in snapshots:
                raise ProductNotFound(line.product_id)
        return snapshots

    def _commit(self, priced, payment_method, cashier):
        for attempt in range(1, self.max_sale_number_attempts + 1):
            draft = priced.to_draft(self.sale_number_factory(), payment_method)
            try:
                return self.store.atomic_apply(priced.stock_mutations, draft, cashier=cashier)
            except DuplicateSaleNumber:
                logger.warning(
                    f"Sale number {draft.sale_number} already used "
                    f"(attempt {attempt}/{self.max_sale_number_attempts})"
                )
        raise PersistenceFailed("Could not allocate a unique sale number. Please retry.")


def get_checkout_service():
    """Build a CheckoutService with the store configured in ``POS_SALE_STORE``."""
    store_path = getattr(settings, "POS_SALE_STORE", "apps.sales.stores.DjangoSaleStore")
    store_class = import_string(store_path)
    return CheckoutService(store_class())
