import logging
from datetime import datetime, timezone
from typing import ClassVar, Optional
from pydantic import BaseModel

from meatly.domain.models import Delivery, DeliveryStatus
from meatly.domain.exceptions import (
    OrderNotFoundError, DeliveryNotFoundError, InvalidStatusTransitionError
)

logger = logging.getLogger(__name__)


class CreateDeliveryDTO(BaseModel):
    order_id: int
    estimated_delivery_time: Optional[datetime] = None
    delivery_person_name: Optional[str] = None
    delivery_person_phone: Optional[str] = None


class UpdateDeliveryDTO(BaseModel):
    NULLABLE: ClassVar[frozenset] = frozenset({
        "estimated_delivery_time",
        "actual_delivery_time",
        "delivery_person_name",
        "delivery_person_phone",
        "tracking_notes",
    })

    status: Optional[DeliveryStatus] = None
    estimated_delivery_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    delivery_person_name: Optional[str] = None
    delivery_person_phone: Optional[str] = None
    tracking_notes: Optional[str] = None

    def changes(self) -> dict:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in self.NULLABLE
        }


class CreateDeliveryUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, dto: CreateDeliveryDTO) -> Delivery:
        async with self._uow() as uow:
            if not await uow.orders.get_by_id(dto.order_id):
                raise OrderNotFoundError(f"Order {dto.order_id} not found")
            delivery = await uow.deliveries.create(
                {**dto.model_dump(), "status": DeliveryStatus.PENDING}
            )
            await uow.commit()
        logger.info(f"Delivery {delivery.id} created for order {delivery.order_id}")
        return delivery


class UpdateDeliveryUseCase:
    """Partial update of a delivery.

    The status only moves forward along pending → assigned → picked_up →
    in_transit → delivered. Reaching `delivered` stamps actual_delivery_time
    with the current time unless the caller supplies one.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, delivery_id: int, dto: UpdateDeliveryDTO) -> Delivery:
        values = dto.changes()

        async with self._uow() as uow:
            delivery = await uow.deliveries.get_by_id(delivery_id)
            if not delivery:
                raise DeliveryNotFoundError(f"Delivery {delivery_id} not found")

            status = values.get("status")
            if status is not None:
                if not delivery.can_move_to(status):
                    raise InvalidStatusTransitionError(delivery.status.value, status.value)
                if (
                    status == DeliveryStatus.DELIVERED
                    and "actual_delivery_time" not in values
                    and delivery.actual_delivery_time is None
                ):
                    values["actual_delivery_time"] = datetime.now(timezone.utc)

            delivery = await uow.deliveries.update(delivery_id, values)
            await uow.commit()

        logger.info(f"Delivery {delivery_id} updated: {sorted(values)}")
        return delivery


class GetDeliveryByOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: int) -> Delivery:
        async with self._uow() as uow:
            delivery = await uow.deliveries.get_by_order(order_id)
            if not delivery:
                raise DeliveryNotFoundError(f"No delivery for order {order_id}")
            return delivery
