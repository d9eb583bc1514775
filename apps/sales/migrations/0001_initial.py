import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the sale",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "sale_number",
                    models.CharField(
                        help_text="Unique sale code printed on the receipt (e.g., 'INV-20240101120000-3FA9C1')",
                        max_length=50,
                        unique=True,
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Sum of line subtotals before discount",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "discount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Discount amount",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "grand_total",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount due (total amount - discount)",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "cash",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount tendered by the customer",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "change",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Change returned (cash - grand total)",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        help_text="Payment method used (e.g., 'Cash', 'QRIS', 'Card')",
                        max_length=50,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, db_index=True, help_text="When the sale was committed"
                    ),
                ),
                (
                    "cashier",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who processed the sale",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sales_processed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale",
                "verbose_name_plural": "Sales",
                "db_table": "sales",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["payment_method", "-created_at"], name="sale_payment_date_idx"
                    ),
                    models.Index(fields=["cashier", "-created_at"], name="sale_cashier_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("grand_total__gte", 0)), name="sale_grand_total_gte_0"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("change__gte", 0)), name="sale_change_gte_0"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the sale item",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "product_name",
                    models.CharField(help_text="Product name at time of sale", max_length=100),
                ),
                (
                    "quantity",
                    models.IntegerField(
                        help_text="Quantity sold",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price at time of sale (may differ from current product price)",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "subtotal",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Subtotal for this line item (quantity * unit_price)",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "line_number",
                    models.PositiveIntegerField(
                        default=0, help_text="Position of the line in the submitted basket"
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        db_constraint=False,
                        help_text="Product that was sold (kept even if the product is deleted)",
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="sale_items",
                        to="inventory.product",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        help_text="Sale that this item belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale Item",
                "verbose_name_plural": "Sale Items",
                "db_table": "sale_items",
                "ordering": ["sale", "line_number"],
                "indexes": [
                    models.Index(fields=["sale"], name="saleitem_sale_idx"),
                    models.Index(fields=["product"], name="saleitem_product_idx"),
                ],
            },
        ),
    ]
