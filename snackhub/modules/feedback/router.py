from fastapi import APIRouter, Depends

from snackhub.dependencies.dbDependecies import db_dependency
from snackhub.modules.access.permissions import FEEDBACK_VIEW_ROLES
from snackhub.modules.auth.dependencies import require_role
from snackhub.modules.feedback.service import FeedbackService
from snackhub.modules.feedback.schemas import FeedbackCreate, FeedbackList
from snackhub.modules.users.schemas import MessageResponse

feedback_router = APIRouter(tags=["Feedback"])


@feedback_router.post("/feedback", response_model=MessageResponse)
def submit_feedback(feedback_data: FeedbackCreate, db: db_dependency):
    """Public endpoint behind the feedback link sent with each order."""
    return FeedbackService(db).submit_feedback(feedback_data)


@feedback_router.get(
    "/loadFeedbacks",
    response_model=FeedbackList,
    dependencies=[Depends(require_role(FEEDBACK_VIEW_ROLES))]
)
def load_feedbacks(db: db_dependency):
    return FeedbackService(db).get_all_feedbacks()
