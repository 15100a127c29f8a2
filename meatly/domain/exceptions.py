class DomainException(Exception):
    pass


class UserNotFoundError(DomainException):
    pass


class DuplicateEmailError(DomainException):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User with email {email} already exists")


class ProductNotFoundError(DomainException):
    pass


class ProductUnavailableError(DomainException):
    pass


class CartItemNotFoundError(DomainException):
    pass


class EmptyCartError(DomainException):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("Cart is empty")


class OrderNotFoundError(DomainException):
    pass


class DeliveryNotFoundError(DomainException):
    pass


class InvalidStatusTransitionError(DomainException):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from {current} to {requested}")
