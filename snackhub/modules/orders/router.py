from fastapi import APIRouter, Depends, status

from snackhub.dependencies.dbDependecies import db_dependency
from snackhub.dependencies.userDependencies import user_dependency
from snackhub.modules.auth.utils import get_current_user
from snackhub.modules.orders.service import OrderService
from snackhub.modules.orders.schemas import OrderCreate, OrderOut, OrderList, OrderResponse

order_router = APIRouter(tags=["Orders"])


@order_router.get("/loadOrders", response_model=OrderList)
def load_orders(db: db_dependency):
    """Order history, newest first."""
    return OrderService(db).get_all_orders()


@order_router.get(
    "/getOrder/{order_id}",
    response_model=OrderOut,
    dependencies=[Depends(get_current_user)]
)
def get_order(order_id: int, db: db_dependency):
    """Single order with its lines, used for receipts."""
    return OrderService(db).get_order(order_id)


@order_router.post("/storeOrder", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def store_order(order_data: OrderCreate, db: db_dependency, current_user: user_dependency):
    """
    Place an order. Prices and totals are always computed from the current
    product rows; any client-sent price or total is ignored.
    """
    order = OrderService(db).place_order(order_data, cashier=current_user)
    return {"message": "Order placed successfully", "order": order}


@order_router.put(
    "/cancelOrder/{order_id}",
    response_model=OrderResponse,
    dependencies=[Depends(get_current_user)]
)
def cancel_order(order_id: int, db: db_dependency):
    order = OrderService(db).cancel_order(order_id)
    return {"message": "Order cancelled successfully", "order": order}
