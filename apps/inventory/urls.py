"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    # Product endpoints
    path("api/inventory/products/", views.ProductListView.as_view(), name="product_list"),
    path(
        "api/inventory/products/create/",
        views.ProductCreateView.as_view(),
        name="product_create",
    ),
    path(
        "api/inventory/products/<uuid:id>/",
        views.ProductDetailView.as_view(),
        name="product_detail",
    ),
    path(
        "api/inventory/products/<uuid:id>/update/",
        views.ProductUpdateView.as_view(),
        name="product_update",
    ),
    path(
        "api/inventory/products/<uuid:id>/delete/",
        views.ProductDeleteView.as_view(),
        name="product_delete",
    ),
    # Category endpoints
    path("api/inventory/categories/", views.CategoryListView.as_view(), name="category_list"),
    path(
        "api/inventory/categories/create/",
        views.CategoryCreateView.as_view(),
        name="category_create",
    ),
    path(
        "api/inventory/categories/<uuid:id>/",
        views.CategoryDetailView.as_view(),
        name="category_detail",
    ),
    path(
        "api/inventory/categories/<uuid:id>/update/",
        views.CategoryUpdateView.as_view(),
        name="category_update",
    ),
    path(
        "api/inventory/categories/<uuid:id>/delete/",
        views.CategoryDeleteView.as_view(),
        name="category_delete",
    ),
]
