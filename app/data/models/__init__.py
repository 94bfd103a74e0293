#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.order import OrderModel, OrderStatus
from app.data.models.order_item import OrderItemModel
from app.data.models.order_receipt import OrderReceiptModel

__all__ = ["OrderModel", "OrderStatus", "OrderItemModel", "OrderReceiptModel"]
