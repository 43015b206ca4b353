from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
from typing import Dict, Any
import logging

from snackhub.core.config import settings
from snackhub.modules.feedback.models import Feedback
from snackhub.modules.feedback.schemas import FeedbackCreate
from snackhub.modules.orders.models import Order

logger = logging.getLogger(__name__)


class FeedbackService:
    """Public customer feedback attached to orders"""

    def __init__(self, db: Session):
        self.db = db

    def _check_submission_limit(self, order_id: int):
        limit = settings.FEEDBACK_MAX_PER_ORDER
        if limit is None:
            return
        submitted = self.db.query(Feedback).filter(Feedback.order_id == order_id).count()
        if submitted >= limit:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Feedback has already been submitted for this order"
            )

    def submit_feedback(self, feedback_data: FeedbackCreate) -> Dict[str, str]:
        """
        Store feedback for an existing order.

        The order row is locked before the per-order count so concurrent
        submissions cannot exceed the configured limit.

        Raises:
            HTTPException: 422 when the order does not exist, 429 when the
            per-order limit is configured and reached
        """
        try:
            order = (
                self.db.query(Order)
                .filter(Order.order_id == feedback_data.order_id)
                .with_for_update()
                .first()
            )
            if not order:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="The selected order id is invalid."
                )
            self._check_submission_limit(order.order_id)

            feedback = Feedback(
                order_id=order.order_id,
                rating=feedback_data.rating,
                comment=feedback_data.comment,
                email=feedback_data.email
            )
            self.db.add(feedback)
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error submitting feedback for order {feedback_data.order_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error submitting feedback"
            )

        logger.info(f"Feedback received for order {feedback_data.order_id}")
        return {"message": "Feedback submitted successfully"}

    def get_all_feedbacks(self) -> Dict[str, Any]:
        feedbacks = (
            self.db.query(Feedback)
            .options(joinedload(Feedback.order))
            .order_by(Feedback.created_at.desc(), Feedback.feedback_id.desc())
            .all()
        )
        return {"feedbacks": feedbacks}
