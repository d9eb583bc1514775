"""
Serializers for checkout requests and sale records.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import Sale, SaleItem
from .pricing import LineItemRequest


class CheckoutItemSerializer(serializers.Serializer):
    """One basket line in a checkout request."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CheckoutSerializer(serializers.Serializer):
    """
    Shape validation for checkout and quote requests.

    Business rules (stock, discount, payment) are checked by the checkout
    service, not here. An empty ``items`` list is accepted so the service
    can report it as an empty basket.
    """

    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=False)
    cash = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.00"))
    discount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        default=Decimal("0.00"),
        required=False,
    )
    items = CheckoutItemSerializer(many=True, allow_empty=True)

    def get_basket(self):
        """Validated items as ``LineItemRequest`` objects, in submitted order."""
        return [
            LineItemRequest(product_id=item["product_id"], quantity=item["quantity"])
            for item in self.validated_data["items"]
        ]


class CheckoutCommitSerializer(CheckoutSerializer):
    """A committed checkout also needs the payment method."""

    payment_method = serializers.CharField(max_length=50, allow_blank=False)


class SaleItemSerializer(serializers.ModelSerializer):
    """Serializer for sale line items."""

    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "line_number",
            "product_id",
            "product_name",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class SaleDetailSerializer(serializers.ModelSerializer):
    """Serializer for sale details."""

    items = SaleItemSerializer(many=True, read_only=True)
    cashier_name = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "cashier",
            "cashier_name",
            "total_amount",
            "discount",
            "grand_total",
            "cash",
            "change",
            "payment_method",
            "items",
            "created_at",
        ]
        read_only_fields = fields

    def get_cashier_name(self, obj):
        return obj.cashier.get_display_name() if obj.cashier else None


class SaleListSerializer(serializers.ModelSerializer):
    """Serializer for sale list."""

    cashier_name = serializers.SerializerMethodField()
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "cashier_name",
            "grand_total",
            "payment_method",
            "items_count",
            "created_at",
        ]

    def get_cashier_name(self, obj):
        return obj.cashier.get_display_name() if obj.cashier else None

    def get_items_count(self, obj):
        """Get count of items in sale."""
        return len(obj.items.all())


class SaleLineQuoteSerializer(serializers.Serializer):
    line_number = serializers.IntegerField()
    product_id = serializers.UUIDField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)


class QuoteSerializer(serializers.Serializer):
    """Read-only rendering of a priced basket."""

    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    grand_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    cash = serializers.DecimalField(max_digits=12, decimal_places=2)
    change = serializers.DecimalField(max_digits=12, decimal_places=2)
    lines = SaleLineQuoteSerializer(many=True)
