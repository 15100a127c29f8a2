from abc import ABC, abstractmethod
from typing import Optional, List
from meatly.domain.models import (
    User, Product, ProductCategory, CartItem, CartItemWithProduct,
    Order, OrderItem, OrderWithItems, OrderLineDraft, OrderStatus, Delivery
)


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, values: dict) -> User:
        pass

    @abstractmethod
    async def update(self, user_id: int, values: dict) -> Optional[User]:
        pass


class ProductRepository(ABC):
    @abstractmethod
    async def get_by_id(self, product_id: int) -> Optional[Product]:
        pass

    @abstractmethod
    async def list(self, category: Optional[ProductCategory] = None) -> List[Product]:
        pass

    @abstractmethod
    async def create(self, values: dict) -> Product:
        pass

    @abstractmethod
    async def update(self, product_id: int, values: dict) -> Optional[Product]:
        pass


class CartRepository(ABC):
    @abstractmethod
    async def list_lines(self, user_id: int) -> List[CartItemWithProduct]:
        pass

    @abstractmethod
    async def get_by_id(self, item_id: int) -> Optional[CartItem]:
        pass

    @abstractmethod
    async def find_line(self, user_id: int, product_id: int) -> Optional[CartItem]:
        pass

    @abstractmethod
    async def add(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        pass

    @abstractmethod
    async def update_quantity(self, item_id: int, quantity: int) -> Optional[CartItem]:
        pass

    @abstractmethod
    async def delete(self, item_id: int) -> None:
        pass

    @abstractmethod
    async def clear(self, user_id: int) -> None:
        pass


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_with_items(self, order_id: int) -> Optional[OrderWithItems]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[OrderWithItems]:
        pass

    @abstractmethod
    async def create(
        self, user_id: int, total_amount, delivery_address: str, delivery_phone: str, notes: Optional[str]
    ) -> Order:
        pass

    @abstractmethod
    async def add_items(self, order_id: int, lines: List[OrderLineDraft]) -> List[OrderItem]:
        pass

    @abstractmethod
    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        pass


class DeliveryRepository(ABC):
    @abstractmethod
    async def get_by_id(self, delivery_id: int) -> Optional[Delivery]:
        pass

    @abstractmethod
    async def get_by_order(self, order_id: int) -> Optional[Delivery]:
        pass

    @abstractmethod
    async def create(self, values: dict) -> Delivery:
        pass

    @abstractmethod
    async def update(self, delivery_id: int, values: dict) -> Optional[Delivery]:
        pass


class UnitOfWork(ABC):
    @property
    @abstractmethod
    def users(self) -> UserRepository:
        pass

    @property
    @abstractmethod
    def products(self) -> ProductRepository:
        pass

    @property
    @abstractmethod
    def cart(self) -> CartRepository:
        pass

    @property
    @abstractmethod
    def orders(self) -> OrderRepository:
        pass

    @property
    @abstractmethod
    def deliveries(self) -> DeliveryRepository:
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
