"""
Django admin configuration for inventory models.
"""

from django.contrib import admin

from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for Category model."""

    list_display = ["name", "created_at", "updated_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["sku", "name", "category", "price", "stock", "updated_at"]
    list_filter = ["category", "created_at"]
    search_fields = ["sku", "name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": ["id", "sku", "name", "description", "category"],
            },
        ),
        (
            "Pricing",
            {
                "fields": ["price", "cost"],
            },
        ),
        (
            "Stock",
            {
                "fields": ["stock"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
            },
        ),
    ]
