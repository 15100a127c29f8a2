import logging
from typing import ClassVar, Optional
from pydantic import BaseModel

from meatly.domain.models import User
from meatly.domain.exceptions import UserNotFoundError, DuplicateEmailError

logger = logging.getLogger(__name__)


class CreateUserDTO(BaseModel):
    email: str
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None


class UpdateUserDTO(BaseModel):
    NULLABLE: ClassVar[frozenset] = frozenset({"phone", "address"})

    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    def changes(self) -> dict:
        """Fields the caller sent; null only counts for nullable columns"""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in self.NULLABLE
        }


class CreateUserUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, dto: CreateUserDTO) -> User:
        async with self._uow() as uow:
            if await uow.users.get_by_email(dto.email):
                raise DuplicateEmailError(dto.email)
            user = await uow.users.create(dto.model_dump())
            await uow.commit()
        logger.info(f"User {user.id} created")
        return user


class GetUserUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: int) -> User:
        async with self._uow() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user:
                raise UserNotFoundError(f"User {user_id} not found")
            return user


class UpdateUserUseCase:
    """Partial update: only fields present in the DTO are written, explicit nulls clear them."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: int, dto: UpdateUserDTO) -> User:
        values = dto.changes()

        async with self._uow() as uow:
            if not await uow.users.get_by_id(user_id):
                raise UserNotFoundError(f"User {user_id} not found")

            if values.get("email"):
                owner = await uow.users.get_by_email(values["email"])
                if owner and owner.id != user_id:
                    raise DuplicateEmailError(values["email"])

            user = await uow.users.update(user_id, values)
            await uow.commit()
        logger.info(f"User {user_id} updated: {sorted(values)}")
        return user
