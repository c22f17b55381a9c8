"""Repository layer for the Monitoring Lab API"""

from .product_repository import ProductRepository, ProductStore

__all__ = [
    "ProductRepository",
    "ProductStore",
]
