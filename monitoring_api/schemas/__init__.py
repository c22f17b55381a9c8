from .product import ProductBase, ProductCreate, ProductResponse

__all__ = ["ProductBase", "ProductCreate", "ProductResponse"]
