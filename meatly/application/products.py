import logging
from decimal import Decimal
from typing import ClassVar, Optional, List
from pydantic import BaseModel

from meatly.domain.models import Product, ProductCategory
from meatly.domain.money import to_money
from meatly.domain.exceptions import ProductNotFoundError

logger = logging.getLogger(__name__)


class CreateProductDTO(BaseModel):
    name: str
    description: Optional[str] = None
    category: ProductCategory
    price: Decimal
    unit: str
    stock_quantity: int
    image_url: Optional[str] = None
    is_available: bool = True


class UpdateProductDTO(BaseModel):
    NULLABLE: ClassVar[frozenset] = frozenset({"description", "image_url"})

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[ProductCategory] = None
    price: Optional[Decimal] = None
    unit: Optional[str] = None
    stock_quantity: Optional[int] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None

    def changes(self) -> dict:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in self.NULLABLE
        }


class CreateProductUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, dto: CreateProductDTO) -> Product:
        values = dto.model_dump()
        values["price"] = to_money(dto.price)
        async with self._uow() as uow:
            product = await uow.products.create(values)
            await uow.commit()
        logger.info(f"Product {product.id} created: {product.name} ({product.category.value})")
        return product


class ListProductsUseCase:
    """Read-only catalog listing, optionally narrowed to one category."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, category: Optional[ProductCategory] = None) -> List[Product]:
        async with self._uow() as uow:
            return await uow.products.list(category=category)


class GetProductUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, product_id: int) -> Product:
        async with self._uow() as uow:
            product = await uow.products.get_by_id(product_id)
            if not product:
                raise ProductNotFoundError(f"Product {product_id} not found")
            return product


class UpdateProductUseCase:
    """Price changes here never touch order_items: placed orders keep their snapshot."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, product_id: int, dto: UpdateProductDTO) -> Product:
        values = dto.changes()
        if "price" in values:
            values["price"] = to_money(values["price"])

        async with self._uow() as uow:
            if not await uow.products.get_by_id(product_id):
                raise ProductNotFoundError(f"Product {product_id} not found")
            product = await uow.products.update(product_id, values)
            await uow.commit()
        logger.info(f"Product {product_id} updated: {sorted(values)}")
        return product
