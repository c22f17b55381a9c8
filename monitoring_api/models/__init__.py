"""Monitoring Lab API Models"""

from .base import MonitoringApiBase, MonitoringApiBaseModel
from .product import Product

__all__ = [
    "MonitoringApiBase",
    "MonitoringApiBaseModel",
    "Product",
]
