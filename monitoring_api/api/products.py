"""Product API endpoints"""

from typing import List

from fastapi import APIRouter, Response, status

from ..events.schemas import TelemetryBatch
from ..schemas.product import ProductCreate, ProductResponse
from ..services.product_service import ProductService
from .dependencies import ProductServiceDep, TelemetryDep

router = APIRouter(prefix="/products")


@router.get("", response_model=List[ProductResponse])
async def list_products(
    service: ProductService = ProductServiceDep,
    telemetry: TelemetryBatch = TelemetryDep,
):
    """List all products"""
    return await service.list_products(telemetry)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Product not found"}},
)
async def get_product(
    product_id: int,
    service: ProductService = ProductServiceDep,
    telemetry: TelemetryBatch = TelemetryDep,
):
    """Get product details by ID"""
    product = await service.get_product(product_id, telemetry)
    if product is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return product


@router.post("", response_model=ProductResponse)
async def create_product(
    product_data: ProductCreate,
    service: ProductService = ProductServiceDep,
    telemetry: TelemetryBatch = TelemetryDep,
):
    """Create a new product"""
    return await service.create_product(product_data, telemetry)
