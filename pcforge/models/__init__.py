from .catalog import Component, ExtraStorageItem
from .customers import CustomerProfile
from .orders import Order, OrderItem, OrderUpdate
from .vendors import VendorProfile, VendorQuotation, ComponentQuotation, VendorStats, VendorOrder
from .events import Event, TrackingFile

__all__ = [
    "Component",
    "ExtraStorageItem",
    "CustomerProfile",
    "Order",
    "OrderItem",
    "OrderUpdate",
    "VendorProfile",
    "VendorQuotation",
    "ComponentQuotation",
    "VendorStats",
    "VendorOrder",
    "Event",
    "TrackingFile",
]
