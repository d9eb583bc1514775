"""
Django admin configuration for sales models.

Sales are recorded only by checkout, so the admin is read-only.
"""

from django.contrib import admin

from .models import Sale, SaleItem


class ReadOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class SaleItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    """Inline admin for sale items."""

    model = SaleItem
    extra = 0
    fields = ["line_number", "product", "product_name", "quantity", "unit_price", "subtotal"]
    readonly_fields = fields


@admin.register(Sale)
class SaleAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for Sale model."""

    list_display = [
        "sale_number",
        "cashier",
        "grand_total",
        "payment_method",
        "created_at",
    ]
    list_filter = ["payment_method", "created_at"]
    search_fields = ["sale_number"]
    readonly_fields = [
        "id",
        "sale_number",
        "cashier",
        "total_amount",
        "discount",
        "grand_total",
        "cash",
        "change",
        "payment_method",
        "created_at",
    ]
    inlines = [SaleItemInline]
    date_hierarchy = "created_at"
