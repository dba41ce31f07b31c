"""Email delivery module for Current Affairs Digest."""

from affairs_digest.delivery.email import DeliveryResult, EmailDelivery

__all__ = [
    "DeliveryResult",
    "EmailDelivery",
]
