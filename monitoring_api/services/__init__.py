"""Service layer for the Monitoring Lab API"""

from .product_service import ProductService

__all__ = ["ProductService"]
