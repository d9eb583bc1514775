"""
Typed checkout errors.

Every way a checkout can fail is a distinct exception type carrying a
machine-readable ``code``, the HTTP status the API answers with, and the
structured fields a caller needs to react (which product, how much stock).
Nothing in the checkout path inspects error message text.
"""

from rest_framework import status


class CheckoutError(Exception):
    """Base class for all checkout failures."""

    code = "checkout_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Checkout failed."

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def get_fields(self):
        """Structured fields describing the failure."""
        return {}

    def as_dict(self):
        payload = {"detail": self.detail, "code": self.code}
        payload.update(self.get_fields())
        return payload


class EmptyBasket(CheckoutError):
    code = "empty_basket"
    default_detail = "The basket must contain at least one item."


class ProductNotFound(CheckoutError):
    code = "product_not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found.")

    def get_fields(self):
        return {"product_id": str(self.product_id)}


class InsufficientStock(CheckoutError):
    code = "insufficient_stock"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, product_id, available, requested):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"available {available}, requested {requested}."
        )

    def get_fields(self):
        return {
            "product_id": str(self.product_id),
            "available": self.available,
            "requested": self.requested,
        }


class InvalidQuantity(CheckoutError):
    code = "invalid_quantity"

    def __init__(self, product_id, quantity):
        self.product_id = product_id
        self.quantity = quantity
        super().__init__(f"Quantity for product {product_id} must be at least 1, got {quantity}.")

    def get_fields(self):
        return {"product_id": str(self.product_id), "quantity": self.quantity}


class InvalidDiscount(CheckoutError):
    code = "invalid_discount"

    def __init__(self, total_amount, discount):
        self.total_amount = total_amount
        self.discount = discount
        if discount < 0:
            detail = f"Discount {discount} must not be negative."
        else:
            detail = f"Discount {discount} exceeds the total amount {total_amount}."
        super().__init__(detail)

    def get_fields(self):
        return {"total_amount": str(self.total_amount), "discount": str(self.discount)}


class PaymentInsufficient(CheckoutError):
    code = "payment_insufficient"
    status_code = status.HTTP_402_PAYMENT_REQUIRED

    def __init__(self, grand_total, cash):
        self.grand_total = grand_total
        self.cash = cash
        super().__init__(f"Cash tendered {cash} is less than the grand total {grand_total}.")

    def get_fields(self):
        return {"grand_total": str(self.grand_total), "cash": str(self.cash)}


class StockConflict(CheckoutError):
    """
    Stock changed between the snapshot read and the commit.

    Nothing was written; the caller may retry the whole checkout.
    """

    code = "stock_conflict"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(
            f"Stock for product {product_id} changed during checkout. Please retry."
        )

    def get_fields(self):
        return {"product_id": str(self.product_id)}


class PersistenceFailed(CheckoutError):
    code = "persistence_failed"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The sale could not be recorded. Please retry."


class DuplicateSaleNumber(CheckoutError):
    """Raised by a store when the generated sale number is already taken."""

    code = "duplicate_sale_number"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, sale_number):
        self.sale_number = sale_number
        super().__init__(f"Sale number {sale_number} is already in use.")


class SaleNotFound(CheckoutError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, sale_id):
        self.sale_id = sale_id
        super().__init__(f"Sale {sale_id} not found.")
