# app/domain/errors.py


class OrderServiceError(Exception):
    """Bazowy blad domeny zamowien, niesie status HTTP i komunikat dla klienta."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class OrderValidationError(OrderServiceError):
    status_code = 400
    default_message = "Invalid order request"


class InvalidProductsError(OrderServiceError):
    # przyczyna idzie tylko do logow
    status_code = 400
    default_message = "One or more products not found, check logs"


class OrderNotFoundError(OrderServiceError):
    status_code = 404

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class ServiceUnavailableError(OrderServiceError):
    status_code = 503
    default_message = "Service temporarily unavailable"
