from enum import Enum


class EquipmentAvailability(str, Enum):
    IN_STOCK = "In Stock"
    OUT_OF_STOCK = "Out of Stock"
    PRE_ORDER = "Pre-order"  # Orderable regardless of current stock


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
