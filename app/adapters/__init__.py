"""Adapter layer package for external notification boundaries."""

from .interfaces import NotificationRelayPort
from .notification_relay import HttpNotificationRelay
from .notify_errors import (
	NotificationDeliveryError,
	NotificationRejectedError,
	NotificationSerializationError,
	NotificationTransportError,
)

__all__ = [
	"HttpNotificationRelay",
	"NotificationDeliveryError",
	"NotificationRejectedError",
	"NotificationRelayPort",
	"NotificationSerializationError",
	"NotificationTransportError",
]
