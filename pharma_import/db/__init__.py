"""Product store contracts and their in-memory / PostgreSQL implementations."""

from .product_store import (
    CategorySource,
    InMemoryCategorySource,
    InMemoryProductStore,
    ProductStore,
    StoreError,
)

__all__ = [
    "CategorySource",
    "InMemoryCategorySource",
    "InMemoryProductStore",
    "ProductStore",
    "StoreError",
]
