"""Product repository for database operations"""

from typing import Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.product import Product
from ..schemas.product import ProductCreate

# Ids are stored as signed 64-bit integers
MIN_PRODUCT_ID = -(2**63)
MAX_PRODUCT_ID = 2**63 - 1


class ProductStore(Protocol):
    """Capabilities the request handler needs from product persistence."""

    async def find_all(self) -> Sequence[Product]: ...

    async def find_by_id(self, product_id: int) -> Optional[Product]: ...

    async def save(self, product_data: ProductCreate) -> Product: ...


class ProductRepository:
    """Repository for product database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self) -> Sequence[Product]:
        """Get all products ordered by id"""
        query = select(Product).order_by(Product.id)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID, None for ids the id column cannot hold"""
        if not MIN_PRODUCT_ID <= product_id <= MAX_PRODUCT_ID:
            return None
        query = select(Product).where(Product.id == product_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def save(self, product_data: ProductCreate) -> Product:
        """Persist a new product and return it with its assigned id"""
        product = Product(
            name=product_data.name,
            description=product_data.description,
            price=product_data.price,
        )

        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return product
