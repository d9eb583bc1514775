"""
URL configuration for the POS back end.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("apps.core.urls")),
    path("", include("apps.inventory.urls")),
    path("", include("apps.sales.urls")),
    path("", include("django_prometheus.urls")),  # Prometheus metrics endpoint at /metrics
]
