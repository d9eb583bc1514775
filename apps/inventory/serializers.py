"""
Serializers for inventory models.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.core.exceptions import Conflict

from .models import Category, Product


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for Category model."""

    name = serializers.CharField(min_length=3, max_length=50)
    products_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "description",
            "products_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def get_products_count(self, obj):
        """Get count of products in this category."""
        return obj.products.count()

    def validate_name(self, value):
        """Category names are unique; duplicates are a conflict, not a bad request."""
        queryset = Category.objects.filter(name__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise Conflict(f"Category '{value}' already exists.")
        return value


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for product lists."""

    category_name = serializers.CharField(source="category.name", read_only=True)
    is_out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "category",
            "category_name",
            "price",
            "stock",
            "is_out_of_stock",
        ]


class ProductDetailSerializer(serializers.ModelSerializer):
    """Detailed serializer for a single product."""

    category_name = serializers.CharField(source="category.name", read_only=True)
    is_out_of_stock = serializers.BooleanField(read_only=True)
    total_value = serializers.DecimalField(
        source="calculate_total_value",
        max_digits=14,
        decimal_places=2,
        read_only=True,
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "category",
            "category_name",
            "price",
            "cost",
            "stock",
            "is_out_of_stock",
            "total_value",
            "created_at",
            "updated_at",
        ]


class ProductCreateUpdateSerializer(serializers.ModelSerializer):
    """Serializer for creating and updating products."""

    sku = serializers.CharField(max_length=100, required=False, allow_blank=True)
    name = serializers.CharField(min_length=3, max_length=100)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.00"))
    cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )
    stock = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "category",
            "price",
            "cost",
            "stock",
        ]
        read_only_fields = ["id"]

    def validate_sku(self, value):
        """SKUs are unique; a blank SKU is generated on save."""
        if not value:
            return value
        queryset = Product.objects.filter(sku=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise Conflict(f"SKU '{value}' is already in use.")
        return value
