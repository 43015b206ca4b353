from fastapi import APIRouter, Depends

from snackhub.dependencies.dbDependecies import db_dependency
from snackhub.modules.auth.utils import get_current_user
from snackhub.modules.dashboard.service import DashboardService
from snackhub.modules.dashboard.schemas import DashboardSummary

dashboard_router = APIRouter(tags=["Dashboard"])


@dashboard_router.get("/dashboard", response_model=DashboardSummary, dependencies=[Depends(get_current_user)])
def dashboard_summary(db: db_dependency):
    return DashboardService(db).get_summary()
