"""
Views for checkout and sales history.

- Checkout: validates the request shape, then hands the basket to the
  checkout service, which either commits the sale or raises a typed error
- Quote: prices a basket without writing anything
- Sale list and detail for managers
"""

from django.utils.dateparse import parse_date

from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from apps.core.permissions import CanProcessSales, IsAdminOrManager

from .exceptions import CheckoutError, SaleNotFound
from .serializers import (
    CheckoutCommitSerializer,
    CheckoutSerializer,
    QuoteSerializer,
    SaleDetailSerializer,
    SaleListSerializer,
)
from .services import get_checkout_service


def checkout_error_response(exc):
    return Response(exc.as_dict(), status=exc.status_code)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, CanProcessSales])
def pos_checkout(request):
    """
    Commit a sale.

    Request body:
    {
        "payment_method": "Cash",
        "cash": "20.00",
        "discount": "0.00" (optional),
        "items": [
            {"product_id": "uuid", "quantity": 3}
        ]
    }

    Responds 201 with the recorded sale. Business failures answer with
    ``{"detail", "code", ...}`` and the status of the error kind.
    """
    serializer = CheckoutCommitSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    service = get_checkout_service()
    try:
        sale = service.process_sale(
            serializer.get_basket(),
            payment_method=serializer.validated_data["payment_method"],
            discount=serializer.validated_data["discount"],
            cash=serializer.validated_data["cash"],
            cashier=request.user,
        )
    except CheckoutError as exc:
        return checkout_error_response(exc)

    sale = service.get_sale(sale.id)
    return Response(SaleDetailSerializer(sale).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, CanProcessSales])
def pos_quote(request):
    """
    Calculate sale totals without creating a sale.

    Takes the same body as checkout (``payment_method`` optional) and returns
    the totals and priced lines a checkout would record right now.
    """
    serializer = CheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        priced = get_checkout_service().quote(
            serializer.get_basket(),
            discount=serializer.validated_data["discount"],
            cash=serializer.validated_data["cash"],
        )
    except CheckoutError as exc:
        return checkout_error_response(exc)

    return Response(QuoteSerializer(priced).data, status=status.HTTP_200_OK)


class SaleListView(generics.ListAPIView):
    """
    API endpoint for listing sales with filters.

    Query parameters:
    - search: Search by sale number
    - payment_method: Filter by payment method
    - date_from: Filter by date (YYYY-MM-DD)
    - date_to: Filter by date (YYYY-MM-DD)
    """

    serializer_class = SaleListSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["created_at", "grand_total", "sale_number"]
    ordering = ["-created_at"]

    def get_queryset(self):
        queryset = get_checkout_service().list_sales()

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(sale_number__icontains=search)

        payment_method = self.request.query_params.get("payment_method")
        if payment_method:
            queryset = queryset.filter(payment_method__iexact=payment_method)

        date_from = self._get_date_param("date_from")
        if date_from:
            queryset = queryset.filter(created_at__date__gte=date_from)

        date_to = self._get_date_param("date_to")
        if date_to:
            queryset = queryset.filter(created_at__date__lte=date_to)

        return queryset

    def _get_date_param(self, name):
        value = self.request.query_params.get(name)
        if not value:
            return None
        try:
            parsed = parse_date(value)
        except ValueError:
            parsed = None
        if parsed is None:
            raise ValidationError({name: "Use the YYYY-MM-DD format."})
        return parsed


class SaleDetailView(generics.RetrieveAPIView):
    """
    API endpoint for retrieving a single sale with its line items.

    Reads through the configured sale store, like the list and checkout.
    """

    serializer_class = SaleDetailSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    lookup_field = "id"

    def get_object(self):
        try:
            sale = get_checkout_service().get_sale(self.kwargs[self.lookup_field])
        except SaleNotFound as exc:
            raise NotFound(exc.detail) from exc
        self.check_object_permissions(self.request, sale)
        return sale
