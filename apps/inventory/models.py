"""
Inventory models for the point-of-sale back end.

- Product categories
- Products with selling price, cost and on-hand stock
"""

import time
import uuid
from decimal import Decimal

from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models


class Category(models.Model):
    """
    Product categories for organizing the catalog.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the category",
    )

    name = models.CharField(
        max_length=50,
        unique=True,
        validators=[MinLengthValidator(3)],
        help_text="Category name (e.g., Beverages, Snacks)",
    )

    description = models.TextField(
        blank=True,
        help_text="Optional description of the category",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "inventory_categories"
        ordering = ["name"]
        verbose_name = "Category"
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name


class Product(models.Model):
    """
    Sellable product with its current price and on-hand stock.

    Stock is the only cross-request shared mutable state in the system.
    Checkout never writes it through ``save()``; see
    ``apps.sales.stores.DjangoSaleStore.atomic_apply``.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the product",
    )

    sku = models.CharField(
        max_length=100,
        unique=True,
        blank=True,
        help_text="Stock keeping unit, generated when left blank",
    )

    name = models.CharField(
        max_length=100,
        validators=[MinLengthValidator(3)],
        help_text="Product name shown at the till",
    )

    description = models.TextField(
        blank=True,
        help_text="Optional description of the product",
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="products",
        help_text="Category this product belongs to",
    )

    # Pricing
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Current selling price per unit",
    )

    cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Purchase cost per unit",
    )

    # Stock
    stock = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Units currently on hand",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the product was added to the catalog",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the product was last updated",
    )

    class Meta:
        db_table = "inventory_products"
        ordering = ["-created_at"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
            models.Index(fields=["name"], name="product_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(stock__gte=0), name="product_stock_gte_0"),
            models.CheckConstraint(condition=models.Q(price__gte=0), name="product_price_gte_0"),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name}"

    def save(self, *args, **kwargs):
        """
        Override save to generate a SKU if none was provided.
        """
        if not self.sku:
            self.sku = f"SKU-{time.time_ns()}"
        super().save(*args, **kwargs)

    def is_low_stock(self, threshold=5):
        """Check if stock is at or below the given threshold."""
        return self.stock <= threshold

    def is_out_of_stock(self):
        """Check if product is out of stock."""
        return self.stock == 0

    def calculate_total_value(self):
        """Calculate total stock value at cost (cost * stock)."""
        return self.cost * self.stock
