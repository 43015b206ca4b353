"""
Celery tasks that deliver order notifications to the configured webhook.
"""
import logging
from typing import Dict, Any

import requests

from snackhub.core.celery import celery_app
from snackhub.core.config import settings

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_order_webhook_task(self, payload: Dict[str, Any]):
    """
    POST an order summary (with its feedback link) to ORDER_WEBHOOK_URL.
    """
    webhook_url = settings.ORDER_WEBHOOK_URL
    if not webhook_url:
        logger.warning("Order webhook URL not configured; skipping notification")
        return {"status": "skipped", "order_id": payload.get("order_id")}

    try:
        response = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json", "User-Agent": "SnackHub-Webhook/1.0"},
            timeout=settings.WEBHOOK_TIMEOUT,
        )
        response.raise_for_status()

        logger.info(f"Order webhook delivered for order {payload.get('order_id')} ({response.status_code})")
        return {"status": "success", "order_id": payload.get("order_id"), "status_code": response.status_code}

    except requests.RequestException as exc:
        logger.error(f"Order webhook failed for order {payload.get('order_id')}: {str(exc)}")

        # Retry with exponential backoff
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

        return {"status": "failed", "order_id": payload.get("order_id"), "error": str(exc)}
