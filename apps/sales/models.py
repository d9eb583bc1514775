"""
Sales models for the point-of-sale back end.

A sale and its line items are written exactly once, by the checkout core,
in the same database transaction as the stock updates they cause. After
that they are read-only: there is no edit, void or refund path.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class ImmutableRecordError(ValueError):
    """Raised when code tries to modify or delete a committed sales record."""

    pass


class Sale(models.Model):
    """
    Sale header for one completed checkout.

    Invariants enforced at creation:
    - discount >= 0
    - grand_total == total_amount - discount, and grand_total >= 0
    - change == cash - grand_total, and change >= 0
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the sale",
    )

    sale_number = models.CharField(
        max_length=50,
        unique=True,
        help_text="Unique sale code printed on the receipt (e.g., 'INV-20240101120000-3FA9C1')",
    )

    cashier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_processed",
        help_text="User who processed the sale",
    )

    # Financial details
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of line subtotals before discount",
    )

    discount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Discount amount",
    )

    grand_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount due (total amount - discount)",
    )

    # Payment details
    cash = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount tendered by the customer",
    )

    change = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Change returned (cash - grand total)",
    )

    payment_method = models.CharField(
        max_length=50,
        help_text="Payment method used (e.g., 'Cash', 'QRIS', 'Card')",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the sale was committed",
    )

    class Meta:
        db_table = "sales"
        ordering = ["-created_at"]
        verbose_name = "Sale"
        verbose_name_plural = "Sales"
        indexes = [
            models.Index(fields=["payment_method", "-created_at"], name="sale_payment_date_idx"),
            models.Index(fields=["cashier", "-created_at"], name="sale_cashier_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(discount__gte=0), name="sale_discount_gte_0"),
            models.CheckConstraint(
                condition=models.Q(grand_total__gte=0), name="sale_grand_total_gte_0"
            ),
            models.CheckConstraint(condition=models.Q(change__gte=0), name="sale_change_gte_0"),
        ]

    def __str__(self):
        return f"{self.sale_number} - {self.grand_total}"

    def save(self, *args, **kwargs):
        """
        Sales are append-only: only the initial insert is allowed.
        """
        if not self._state.adding:
            raise ImmutableRecordError(f"Sale {self.sale_number} is immutable once recorded")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(f"Sale {self.sale_number} cannot be deleted")

    def calculate_totals(self):
        """
        Recompute the monetary fields from the stored line items.

        Returns a dict; nothing is written. Used to audit a stored sale.
        """
        total_amount = sum((item.subtotal for item in self.items.all()), Decimal("0.00"))
        grand_total = total_amount - self.discount
        return {
            "total_amount": total_amount,
            "grand_total": grand_total,
            "change": self.cash - grand_total,
        }


class SaleItem(models.Model):
    """
    One line of a sale.

    The product id, name and unit price are captured at sale time so the
    record stays correct if the product is later renamed, repriced or
    deleted. ``subtotal`` is always ``quantity * unit_price``.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the sale item",
    )

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Sale that this item belongs to",
    )

    product = models.ForeignKey(
        "inventory.Product",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="sale_items",
        help_text="Product that was sold (kept even if the product is deleted)",
    )

    product_name = models.CharField(
        max_length=100,
        help_text="Product name at time of sale",
    )

    # Quantity and pricing
    quantity = models.IntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold",
    )

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price at time of sale (may differ from current product price)",
    )

    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Subtotal for this line item (quantity * unit_price)",
    )

    line_number = models.PositiveIntegerField(
        default=0,
        help_text="Position of the line in the submitted basket",
    )

    class Meta:
        db_table = "sale_items"
        ordering = ["sale", "line_number"]
        verbose_name = "Sale Item"
        verbose_name_plural = "Sale Items"
        indexes = [
            models.Index(fields=["sale"], name="saleitem_sale_idx"),
            models.Index(fields=["product"], name="saleitem_product_idx"),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    def save(self, *args, **kwargs):
        """
        Derive the subtotal and refuse updates to a recorded line.
        """
        if not self._state.adding:
            raise ImmutableRecordError("Sale items are immutable once recorded")
        self.subtotal = self.calculate_subtotal()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Sale items cannot be deleted")

    def calculate_subtotal(self):
        """Calculate and return the subtotal for this item."""
        return self.unit_price * self.quantity
