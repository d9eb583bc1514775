"""
Views for catalog management.

- Product list view with search and filters
- Product detail, create, update and delete
- Category CRUD
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, Q

from rest_framework import filters, generics, permissions

from apps.core.exceptions import Conflict, ForeignKeyViolation
from apps.core.permissions import IsAdminOrManager

from .models import Category, Product
from .serializers import (
    CategorySerializer,
    ProductCreateUpdateSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
)

logger = logging.getLogger(__name__)


class ProductListView(generics.ListAPIView):
    """
    API endpoint for listing products with search and filters.

    Supports:
    - Search by SKU, name, description
    - Filter by category, out_of_stock
    - Ordering by various fields
    """

    serializer_class = ProductListSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["sku", "name", "price", "stock", "created_at", "updated_at"]
    ordering = ["-created_at"]

    def get_queryset(self):
        queryset = Product.objects.select_related("category")

        # Search functionality
        search = self.request.query_params.get("search", None)
        if search:
            queryset = queryset.filter(
                Q(sku__icontains=search)
                | Q(name__icontains=search)
                | Q(description__icontains=search)
            )

        # Filter by category
        category_id = self.request.query_params.get("category", None)
        if category_id:
            queryset = queryset.filter(category_id=category_id)

        # Filter by out of stock
        out_of_stock = self.request.query_params.get("out_of_stock", None)
        if out_of_stock and out_of_stock.lower() in ["true", "1", "yes"]:
            queryset = queryset.filter(stock=0)

        return queryset


class ProductDetailView(generics.RetrieveAPIView):
    """
    API endpoint for retrieving a single product.
    """

    queryset = Product.objects.select_related("category")
    serializer_class = ProductDetailSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    lookup_field = "id"


class ProductCreateView(generics.CreateAPIView):
    """
    API endpoint for creating a new product.
    """

    serializer_class = ProductCreateUpdateSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]

    def perform_create(self, serializer):
        try:
            with transaction.atomic():
                product = serializer.save()
        except IntegrityError as exc:
            raise Conflict("SKU is already in use.") from exc
        logger.info(f"Product created: {product.sku} ({product.id})")


class ProductUpdateView(generics.UpdateAPIView):
    """
    API endpoint for updating a product.

    The row is locked for the duration of the update so an edit cannot
    overwrite stock committed by a concurrent checkout.
    """

    serializer_class = ProductCreateUpdateSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    lookup_field = "id"

    def get_queryset(self):
        return Product.objects.select_for_update()

    @transaction.atomic
    def update(self, request, *args, **kwargs):
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError as exc:
            raise Conflict("SKU is already in use.") from exc


class ProductDeleteView(generics.DestroyAPIView):
    """
    API endpoint for deleting a product.

    Recorded sales keep the product id and name they captured at sale time,
    so deleting a product never alters sales history.
    """

    queryset = Product.objects.all()
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    lookup_field = "id"

    def perform_destroy(self, instance):
        logger.info(f"Product deleted: {instance.sku} ({instance.id})")
        instance.delete()


# Category Views


class CategoryListView(generics.ListAPIView):
    """
    API endpoint for listing categories.
    """

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["name", "created_at"]
    ordering = ["name"]


class CategoryDetailView(generics.RetrieveAPIView):
    """
    API endpoint for retrieving a single category.
    """

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    lookup_field = "id"


class CategoryCreateView(generics.CreateAPIView):
    """
    API endpoint for creating a new category.
    """

    serializer_class = CategorySerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]

    def perform_create(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError as exc:
            raise Conflict("Category already exists.") from exc


class CategoryUpdateView(generics.UpdateAPIView):
    """
    API endpoint for updating a category.
    """

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    lookup_field = "id"

    def perform_update(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError as exc:
            raise Conflict("Category already exists.") from exc


class CategoryDeleteView(generics.DestroyAPIView):
    """
    API endpoint for deleting a category that no product uses.
    """

    queryset = Category.objects.all()
    permission_classes = [permissions.IsAuthenticated, IsAdminOrManager]
    lookup_field = "id"

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError as exc:
            raise ForeignKeyViolation(
                f"Category '{instance.name}' is still used by "
                f"{instance.products.count()} product(s)."
            ) from exc
