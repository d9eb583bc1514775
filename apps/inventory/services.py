"""
Inventory read services.

Provides point-in-time product snapshots for the checkout core. A snapshot is
a copy: nothing guarantees it is still accurate once it has been read.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Hashable, Iterable

from django.core.exceptions import ValidationError

from .models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    """Price and stock of one product as read at a single moment."""

    product_id: Hashable
    name: str
    price: Decimal
    stock: int


def get_product_snapshots(product_ids: Iterable[Hashable]) -> Dict[Hashable, ProductSnapshot]:
    """
    Read one snapshot per distinct product id.

    The result is keyed by the ids exactly as passed in, so a product asked
    for by its string form is found under that string. Each snapshot carries
    the canonical UUID. Ids that do not exist, or are not valid UUIDs, are
    absent from the result; the caller decides how to report them.
    """
    to_pk = Product._meta.pk.to_python
    requested = {}
    for product_id in dict.fromkeys(product_ids):
        try:
            requested[product_id] = to_pk(product_id)
        except ValidationError:
            continue
    if not requested:
        return {}

    rows = Product.objects.filter(id__in=set(requested.values())).values(
        "id", "name", "price", "stock"
    )
    by_pk = {
        row["id"]: ProductSnapshot(
            product_id=row["id"],
            name=row["name"],
            price=row["price"],
            stock=row["stock"],
        )
        for row in rows
    }
    snapshots = {
        product_id: by_pk[pk] for product_id, pk in requested.items() if pk in by_pk
    }
    logger.debug(
        f"Read {len(by_pk)} product snapshot(s) for {len(requested)} requested id(s)"
    )
    return snapshots
