import logging
from typing import Dict, Any

from snackhub.core.config import settings
from snackhub.modules.notifications.tasks import send_order_webhook_task
from snackhub.modules.orders.models import Order

logger = logging.getLogger(__name__)


def feedback_link(order_id: int) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/feedback/{order_id}"


def build_order_payload(order: Order) -> Dict[str, Any]:
    """Order summary sent to the confirmation webhook."""
    return {
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "order_id": order.order_id,
        "total_amount": str(order.total_amount),
        "order_items": [
            {
                "product_name": item.product_name,
                "quantity": item.quantity,
                "price": str(item.price),
                "subtotal": str(item.subtotal),
            }
            for item in order.order_items
        ],
        "feedback_link": feedback_link(order.order_id),
    }


def notify_order_placed(order: Order) -> bool:
    """
    Queue the order confirmation webhook.

    Never raises: the order is already committed, so enqueue failures are
    only logged.
    """
    if not settings.ORDER_WEBHOOK_URL:
        logger.debug(f"Order webhook URL not configured; order {order.order_id} not announced")
        return False

    try:
        send_order_webhook_task.delay(build_order_payload(order))
        return True
    except Exception as e:
        logger.error(f"Failed to queue order webhook for order {order.order_id}: {e}")
        return False
