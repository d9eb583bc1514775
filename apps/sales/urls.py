"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # Checkout API
    path("api/sales/checkout/", views.pos_checkout, name="pos_checkout"),
    path("api/sales/quote/", views.pos_quote, name="pos_quote"),
    # Sales history
    path("api/sales/", views.SaleListView.as_view(), name="sale_list"),
    path("api/sales/<uuid:id>/", views.SaleDetailView.as_view(), name="sale_detail"),
]
