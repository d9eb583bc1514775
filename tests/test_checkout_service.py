"""
Tests for the checkout service against the in-memory store.

These run without a database; the store fake applies each checkout under
one lock, which is enough to exercise commit-time conflict detection with
real threads.
"""

import threading
from decimal import Decimal

import pytest

from apps.inventory.services import ProductSnapshot
from apps.sales.exceptions import (
    EmptyBasket,
    InsufficientStock,
    InvalidDiscount,
    InvalidQuantity,
    PaymentInsufficient,
    PersistenceFailed,
    ProductNotFound,
    SaleNotFound,
    StockConflict,
)
from apps.sales.pricing import LineItemRequest
from apps.sales.services import CheckoutService, generate_sale_number

from .fakes import InMemorySaleStore


def make_store(*products):
    return InMemorySaleStore(
        [
            ProductSnapshot(product_id=pid, name=name, price=Decimal(price), stock=stock)
            for pid, name, price, stock in products
        ]
    )


def sequential_numbers(*numbers):
    iterator = iter(numbers)
    return lambda: next(iterator)


@pytest.fixture
def store():
    return make_store(("P", "Iced Tea", "5.00", 10), ("Q", "Cheesecake", "12.50", 4))


@pytest.fixture
def service(store):
    return CheckoutService(store, max_sale_number_attempts=3)


class TestProcessSale:
    def test_successful_checkout(self, store, service):
        sale = service.process_sale(
            [LineItemRequest("P", 3)], payment_method="Cash", cash=Decimal("20")
        )

        assert sale.total_amount == Decimal("15.00")
        assert sale.grand_total == Decimal("15.00")
        assert sale.change == Decimal("5.00")
        assert sale.payment_method == "Cash"
        assert sale.sale_number.startswith("INV-")
        assert store.stock_of("P") == 7
        assert service.get_sale(sale.id) is sale

    def test_accepts_plain_pairs(self, store, service):
        service.process_sale([("P", 1), ("Q", 2)], payment_method="QRIS", cash=Decimal("30"))

        assert store.stock_of("P") == 9
        assert store.stock_of("Q") == 2

    def test_records_cashier(self, service):
        cashier = object()

        sale = service.process_sale(
            [("P", 1)], payment_method="Cash", cash=Decimal("5"), cashier=cashier
        )

        assert sale.cashier is cashier

    @pytest.mark.parametrize(
        "basket, kwargs, error",
        [
            ([], {"cash": Decimal("10")}, EmptyBasket),
            ([("missing", 1)], {"cash": Decimal("10")}, ProductNotFound),
            ([("Q", 5)], {"cash": Decimal("100")}, InsufficientStock),
            ([("P", 2)], {"cash": Decimal("100"), "discount": Decimal("10.01")}, InvalidDiscount),
            ([("P", 6)], {"cash": Decimal("20")}, PaymentInsufficient),
            ([("P", 3), ("P", 8)], {"cash": Decimal("100")}, InsufficientStock),
            ([("P", 1)], {"cash": Decimal("15"), "discount": Decimal("-10.00")}, InvalidDiscount),
            ([("P", 0)], {"cash": Decimal("10")}, InvalidQuantity),
        ],
    )
    def test_rejections_leave_store_untouched(self, store, service, basket, kwargs, error):
        before = store.state()

        with pytest.raises(error):
            service.process_sale(basket, payment_method="Cash", **kwargs)

        assert store.state() == before

    def test_unknown_product_reports_its_id(self, service):
        with pytest.raises(ProductNotFound) as exc_info:
            service.process_sale([("P", 1), ("nope", 1)], payment_method="Cash", cash=Decimal("10"))

        assert exc_info.value.product_id == "nope"

    def test_duplicate_lines_deduct_combined_quantity(self, store, service):
        sale = service.process_sale(
            [("P", 3), ("P", 4)], payment_method="Cash", cash=Decimal("35")
        )

        assert store.stock_of("P") == 3
        assert [line.quantity for line in sale.lines] == [3, 4]

    def test_persistence_failure_has_no_effect(self, store, service):
        store.fail_next_apply = True
        before = store.state()

        with pytest.raises(PersistenceFailed):
            service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))

        assert store.state() == before

    def test_stock_conflict_when_stock_changes_after_read(self, store):
        class ConcurrentSaleStore(InMemorySaleStore):
            """Lets another checkout take the last unit after this one has read stock."""

            competitor_ran = False

            def read_products(self, product_ids):
                snapshots = super().read_products(product_ids)
                if not self.competitor_ran:
                    self.competitor_ran = True
                    CheckoutService(self).process_sale(
                        [("P", 1)], payment_method="Cash", cash=Decimal("5")
                    )
                return snapshots

        racing = ConcurrentSaleStore(
            [ProductSnapshot(product_id="P", name="Iced Tea", price=Decimal("5.00"), stock=1)]
        )

        with pytest.raises(StockConflict) as exc_info:
            CheckoutService(racing).process_sale(
                [("P", 1)], payment_method="Cash", cash=Decimal("5")
            )

        assert exc_info.value.product_id == "P"
        assert racing.stock_of("P") == 0
        assert len(racing.sales) == 1

    def test_retry_after_conflict_does_not_double_apply(self, store, service):
        class OneConflictStore(InMemorySaleStore):
            conflicts = 1

            def atomic_apply(self, mutations, draft, cashier=None):
                if self.conflicts:
                    self.conflicts -= 1
                    raise StockConflict(mutations[0].product_id)
                return super().atomic_apply(mutations, draft, cashier=cashier)

        flaky = OneConflictStore(
            [ProductSnapshot(product_id="P", name="Iced Tea", price=Decimal("5.00"), stock=5)]
        )
        checkout = CheckoutService(flaky)

        with pytest.raises(StockConflict):
            checkout.process_sale([("P", 2)], payment_method="Cash", cash=Decimal("10"))
        assert flaky.stock_of("P") == 5

        checkout.process_sale([("P", 2)], payment_method="Cash", cash=Decimal("10"))

        assert flaky.stock_of("P") == 3
        assert len(flaky.sales) == 1


class TestSaleNumbers:
    def test_generated_number_format(self):
        number = generate_sale_number("POS")

        prefix, stamp, suffix = number.split("-")
        assert prefix == "POS"
        assert len(stamp) == 14 and stamp.isdigit()
        assert len(suffix) == 6

    def test_collision_regenerates_number(self, store):
        service = CheckoutService(
            store, sale_number_factory=sequential_numbers("INV-1", "INV-1", "INV-2")
        )

        first = service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))
        second = service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))

        assert first.sale_number == "INV-1"
        assert second.sale_number == "INV-2"
        assert store.stock_of("P") == 8

    def test_gives_up_after_configured_attempts(self, store):
        service = CheckoutService(
            store,
            sale_number_factory=lambda: "INV-SAME",
            max_sale_number_attempts=2,
        )
        service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))
        before = store.state()

        with pytest.raises(PersistenceFailed):
            service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))

        assert store.state() == before


class TestQuote:
    def test_quote_prices_without_writing(self, store, service):
        before = store.state()

        priced = service.quote([("P", 2), ("Q", 1)], discount=Decimal("2.50"), cash=Decimal("20"))

        assert priced.total_amount == Decimal("22.50")
        assert priced.grand_total == Decimal("20.00")
        assert priced.change == Decimal("0.00")
        assert store.state() == before

    def test_quote_reports_same_errors(self, service):
        with pytest.raises(EmptyBasket):
            service.quote([])
        with pytest.raises(InsufficientStock):
            service.quote([("Q", 9)], cash=Decimal("1000"))


class TestReads:
    def test_get_unknown_sale(self, service):
        with pytest.raises(SaleNotFound):
            service.get_sale("missing")

    def test_list_sales_newest_first(self, service):
        first = service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))
        second = service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))

        listed = list(service.list_sales())

        assert {sale.id for sale in listed} == {first.id, second.id}
        assert listed[0].created_at >= listed[1].created_at


@pytest.mark.slow
class TestConcurrentCheckouts:
    def test_two_threads_race_for_last_unit(self):
        """Both checkouts read stock 1; exactly one may commit."""
        barrier = threading.Barrier(2, timeout=5)

        class BarrierStore(InMemorySaleStore):
            def read_products(self, product_ids):
                snapshots = super().read_products(product_ids)
                barrier.wait()
                return snapshots

        store = BarrierStore(
            [ProductSnapshot(product_id="P", name="Iced Tea", price=Decimal("5.00"), stock=1)]
        )
        service = CheckoutService(store)
        outcomes = []
        outcomes_lock = threading.Lock()

        def checkout():
            try:
                result = service.process_sale([("P", 1)], payment_method="Cash", cash=Decimal("5"))
            except StockConflict as exc:
                result = exc
            with outcomes_lock:
                outcomes.append(result)

        threads = [threading.Thread(target=checkout) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        conflicts = [o for o in outcomes if isinstance(o, StockConflict)]
        committed = [o for o in outcomes if not isinstance(o, StockConflict)]
        assert len(conflicts) == 1
        assert len(committed) == 1
        assert store.stock_of("P") == 0
        assert len(store.sales) == 1
