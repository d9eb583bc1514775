"""
Tests for catalog CRUD operations.

- Product list with search, filters and pagination
- Product create/update/delete with typed conflicts
- Category CRUD, including delete of a category still in use
- Role restrictions on catalog endpoints
"""

import uuid
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.urls import reverse

import pytest
from rest_framework import status

from apps.inventory.models import Category, Product
from apps.inventory.services import get_product_snapshots


@pytest.mark.django_db
class TestProductCRUD:
    """Test product CRUD operations."""

    def test_list_products(self, manager_client, make_product):
        make_product(name="Iced Tea")
        make_product(name="Hot Coffee")

        response = manager_client.get(reverse("inventory:product_list"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2
        assert len(response.data["results"]) == 2

    def test_list_with_search(self, manager_client, make_product):
        make_product(name="Iced Tea")
        make_product(name="Hot Coffee")

        response = manager_client.get(reverse("inventory:product_list"), {"search": "coffee"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["name"] == "Hot Coffee"

    def test_list_filter_by_category(self, manager_client, make_product):
        snacks = Category.objects.create(name="Snacks")
        make_product(name="Iced Tea")
        make_product(name="Potato Chips", category=snacks)

        response = manager_client.get(
            reverse("inventory:product_list"), {"category": str(snacks.id)}
        )

        assert response.data["count"] == 1
        assert response.data["results"][0]["category_name"] == "Snacks"

    def test_list_out_of_stock(self, manager_client, make_product):
        make_product(name="Iced Tea", stock=3)
        make_product(name="Sold Out Soda", stock=0)

        response = manager_client.get(reverse("inventory:product_list"), {"out_of_stock": "true"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["is_out_of_stock"] is True

    def test_pagination_page_size(self, manager_client, make_product):
        for _ in range(5):
            make_product()

        response = manager_client.get(
            reverse("inventory:product_list"), {"page_size": 2, "page": 2}
        )

        assert response.data["count"] == 5
        assert len(response.data["results"]) == 2
        assert response.data["next"] is not None

    def test_create_product(self, manager_client, category):
        data = {
            "sku": "BEV-100",
            "name": "Lemonade",
            "category": str(category.id),
            "price": "4.50",
            "cost": "2.00",
            "stock": 12,
        }

        response = manager_client.post(reverse("inventory:product_create"), data, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        product = Product.objects.get(sku="BEV-100")
        assert product.price == Decimal("4.50")
        assert product.stock == 12

    def test_create_generates_sku(self, manager_client, category):
        data = {"name": "Lemonade", "category": str(category.id), "price": "4.50"}

        response = manager_client.post(reverse("inventory:product_create"), data, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        product = Product.objects.get(name="Lemonade")
        assert product.sku.startswith("SKU-")
        assert product.stock == 0

    def test_create_duplicate_sku_conflicts(self, manager_client, product, category):
        data = {"sku": product.sku, "name": "Other Tea", "category": str(category.id), "price": "1.00"}

        response = manager_client.post(reverse("inventory:product_create"), data, format="json")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["code"] == "conflict"

    @pytest.mark.parametrize(
        "override, field",
        [
            ({"name": "ab"}, "name"),
            ({"price": "-1.00"}, "price"),
            ({"stock": -3}, "stock"),
            ({"category": None}, "category"),
        ],
    )
    def test_create_validation(self, manager_client, category, override, field):
        data = {"name": "Lemonade", "category": str(category.id), "price": "4.50", "stock": 1}
        data.update(override)

        response = manager_client.post(reverse("inventory:product_create"), data, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data

    def test_retrieve_product(self, manager_client, product):
        response = manager_client.get(reverse("inventory:product_detail", args=[product.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["sku"] == "BEV-001"
        assert response.data["total_value"] == "30.00"

    def test_retrieve_unknown_product(self, manager_client):
        response = manager_client.get(
            reverse("inventory:product_detail", args=["00000000-0000-0000-0000-000000000000"])
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["code"] == "not_found"

    def test_update_product(self, manager_client, product):
        response = manager_client.patch(
            reverse("inventory:product_update", args=[product.id]),
            {"price": "6.25", "stock": 40},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        product.refresh_from_db()
        assert product.price == Decimal("6.25")
        assert product.stock == 40

    def test_update_to_existing_sku_conflicts(self, manager_client, product, make_product):
        other = make_product(sku="OTHER-1")

        response = manager_client.patch(
            reverse("inventory:product_update", args=[other.id]),
            {"sku": product.sku},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_delete_product(self, manager_client, product):
        response = manager_client.delete(reverse("inventory:product_delete", args=[product.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Product.objects.filter(id=product.id).exists()

    def test_negative_stock_rejected_by_database(self, product):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Product.objects.filter(id=product.id).update(stock=-1)


@pytest.mark.django_db
class TestCategoryCRUD:
    def test_create_category(self, manager_client):
        response = manager_client.post(
            reverse("inventory:category_create"), {"name": "Snacks"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Category.objects.filter(name="Snacks").exists()

    def test_duplicate_category_conflicts(self, manager_client, category):
        response = manager_client.post(
            reverse("inventory:category_create"), {"name": "beverages"}, format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["code"] == "conflict"

    def test_short_name_rejected(self, manager_client):
        response = manager_client.post(
            reverse("inventory:category_create"), {"name": "ab"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_categories_with_counts(self, manager_client, product):
        response = manager_client.get(reverse("inventory:category_list"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["results"][0]["products_count"] == 1

    def test_update_category(self, manager_client, category):
        response = manager_client.patch(
            reverse("inventory:category_update", args=[category.id]),
            {"description": "Cold drinks"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        category.refresh_from_db()
        assert category.description == "Cold drinks"

    def test_delete_unused_category(self, manager_client, category):
        response = manager_client.delete(reverse("inventory:category_delete", args=[category.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Category.objects.exists()

    def test_delete_category_in_use(self, manager_client, product, category):
        response = manager_client.delete(reverse("inventory:category_delete", args=[category.id]))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["code"] == "foreign_key_violation"
        assert Category.objects.filter(id=category.id).exists()

    def test_delete_unknown_category(self, manager_client):
        response = manager_client.delete(
            reverse("inventory:category_delete", args=["00000000-0000-0000-0000-000000000000"])
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCatalogPermissions:
    def test_cashier_cannot_manage_catalog(self, cashier_client, product):
        list_response = cashier_client.get(reverse("inventory:product_list"))
        delete_response = cashier_client.delete(
            reverse("inventory:product_delete", args=[product.id])
        )

        assert list_response.status_code == status.HTTP_403_FORBIDDEN
        assert delete_response.status_code == status.HTTP_403_FORBIDDEN
        assert Product.objects.filter(id=product.id).exists()

    def test_anonymous_gets_401(self, api_client):
        response = api_client.get(reverse("inventory:category_list"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_admin_manages_catalog(self, admin_client):
        response = admin_client.post(
            reverse("inventory:category_create"), {"name": "Frozen"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED


@pytest.mark.django_db
class TestProductSnapshots:
    def test_snapshots_for_known_ids(self, product, make_product):
        other = make_product(price="2.00", stock=3)

        snapshots = get_product_snapshots([product.id, other.id, product.id])

        assert set(snapshots) == {product.id, other.id}
        assert snapshots[product.id].price == Decimal("5.00")
        assert snapshots[product.id].stock == 10

    def test_missing_ids_are_absent(self, product):
        missing = uuid.uuid4()

        snapshots = get_product_snapshots([product.id, missing])

        assert missing not in snapshots
        assert product.id in snapshots

    def test_no_ids(self):
        assert get_product_snapshots([]) == {}

    def test_string_ids_are_keyed_as_given(self, product):
        snapshots = get_product_snapshots([str(product.id), "not-a-uuid"])

        assert set(snapshots) == {str(product.id)}
        assert snapshots[str(product.id)].product_id == product.id
