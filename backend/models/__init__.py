from backend.models.material import Material
from backend.models.vendor import Vendor
from backend.models.site import Site
from backend.models.inventory import InventoryItem
from backend.models.purchase_order import PurchaseOrder, OrderLineItem, OrderStatus, OrderPriority
from backend.models.purchase_intent import PurchaseIntent, PurchaseIntentLineItem, IntentStatus
from backend.models.issuance import MaterialIssuance
from backend.models.notification import Notification, NotificationKind

__all__ = [
    "Material",
    "Vendor",
    "Site",
    "InventoryItem",
    "PurchaseOrder",
    "OrderLineItem",
    "OrderStatus",
    "OrderPriority",
    "PurchaseIntent",
    "PurchaseIntentLineItem",
    "IntentStatus",
    "MaterialIssuance",
    "Notification",
    "NotificationKind",
]
