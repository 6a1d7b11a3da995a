"""Domain errors raised by the order lifecycle services.

Each error carries the HTTP status it surfaces as; ``app.main`` registers a
single handler that renders them as ``{"detail": message, **extra}``.
"""

from typing import Any, Dict, Optional


class DeliveryError(Exception):
    """Base class for order lifecycle failures"""

    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, **self.extra}


class NotAuthorized(DeliveryError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(DeliveryError):
    status_code = 404
    default_message = "Not found"


class OrderNotFound(NotFound):
    default_message = "Order not found"


class OrderNotFoundOrNotAssigned(NotFound):
    default_message = "Order not found or not assigned to you"


class RestaurantNotFound(NotFound):
    default_message = "Restaurant not found"


class NoActiveDelivery(NotFound):
    default_message = "No active delivery found"


class InvalidStatus(DeliveryError):
    default_message = "Invalid status"


class InvalidTransition(DeliveryError):
    default_message = "Invalid status transition"


class PreconditionFailed(DeliveryError):
    default_message = "Precondition failed"


class RiderNotAvailable(PreconditionFailed):
    default_message = "Rider is not available"


class RiderBusy(PreconditionFailed):
    default_message = "Cannot change status during an active delivery"


class OrderNotReady(PreconditionFailed):
    default_message = "Order is not ready for pickup"


class NotCancellable(PreconditionFailed):
    default_message = "This order cannot be cancelled"


class EmptyOrder(PreconditionFailed):
    default_message = "Order must contain at least one item"


class ReviewNotAllowed(PreconditionFailed):
    default_message = "Order cannot be reviewed"


class OrderAlreadyTaken(DeliveryError):
    """Lost the race for an order; re-list and pick another one"""
    default_message = "This order has already been taken by another rider"


class StorageFailure(DeliveryError):
    status_code = 500
    default_message = "Storage failure"
