from sqlalchemy.orm import Session, selectinload, joinedload
from fastapi import HTTPException, status
from typing import Dict, Any, List, Optional
import logging

from snackhub.modules.notifications.service import notify_order_placed
from snackhub.modules.orders.calculator import compute_totals, line_subtotal, to_money
from snackhub.modules.orders.models import Order, OrderItem, OrderStatus
from snackhub.modules.orders.schemas import OrderCreate, OrderItemIn
from snackhub.modules.products.models import Product
from snackhub.modules.users.models import User

logger = logging.getLogger(__name__)


def merge_lines(items: List[OrderItemIn]) -> Dict[int, int]:
    """Collapse repeated products into one line each, keeping cart order."""
    merged: Dict[int, int] = {}
    for item in items:
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    return merged


class OrderService:
    """Checkout, cancellation and order history"""

    def __init__(self, db: Session):
        self.db = db

    def _insufficient_stock(self, product: Product, requested: int) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"Insufficient stock for {product.product_name}. "
                f"Available: {product.quantity}, requested: {requested}"
            )
        )

    def _lock_products(self, product_ids: List[int]) -> Dict[int, Product]:
        # Ascending id order so concurrent checkouts lock rows in the same sequence
        products = (
            self.db.query(Product)
            .filter(Product.product_id.in_(product_ids))
            .order_by(Product.product_id)
            .with_for_update()
            .all()
        )
        found = {p.product_id: p for p in products}
        for product_id in product_ids:
            if product_id not in found:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Product {product_id} not found"
                )
        return found

    def _decrement_stock(self, product: Product, quantity: int):
        updated = (
            self.db.query(Product)
            .filter(Product.product_id == product.product_id, Product.quantity >= quantity)
            .update({Product.quantity: Product.quantity - quantity}, synchronize_session=False)
        )
        if updated == 0:
            self.db.refresh(product)
            raise self._insufficient_stock(product, quantity)

    def place_order(self, order_data: OrderCreate, cashier: Optional[User] = None) -> Order:
        """
        Place an order using current product prices.

        Stock is checked and decremented inside the same transaction as the
        order insert; any failure leaves products and orders untouched.

        Raises:
            HTTPException: 404 for an unknown product, 422 for insufficient
            stock or an amount paid below the total
        """
        lines = merge_lines(order_data.items)
        try:
            products = self._lock_products(sorted(lines))

            for product_id, quantity in lines.items():
                product = products[product_id]
                if product.quantity < quantity:
                    raise self._insufficient_stock(product, quantity)

            totals = compute_totals(
                [(products[pid].price, qty) for pid, qty in lines.items()],
                order_data.discount
            )
            change = totals.change_for(order_data.amount_paid)
            if change < 0:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"The amount paid must be at least the order total of {totals.total_amount}."
                )

            order = Order(
                user_id=cashier.user_id if cashier else None,
                customer_name=order_data.customer_name,
                customer_email=order_data.customer_email,
                payment_method=order_data.payment_method,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                discount=order_data.discount,
                discount_amount=totals.discount_amount,
                total_amount=totals.total_amount,
                amount_paid=to_money(order_data.amount_paid),
                change_amount=change,
                status=OrderStatus.COMPLETED
            )
            self.db.add(order)
            self.db.flush()

            for product_id, quantity in lines.items():
                product = products[product_id]
                self.db.add(OrderItem(
                    order_id=order.order_id,
                    product_id=product_id,
                    quantity=quantity,
                    price=to_money(product.price),
                    subtotal=line_subtotal(product.price, quantity)
                ))
                self._decrement_stock(product, quantity)

            self.db.commit()
            self.db.refresh(order)

        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error placing order")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error placing order"
            )

        logger.info(f"Order {order.order_id} placed: total {order.total_amount}")
        notify_order_placed(order)
        return order

    def cancel_order(self, order_id: int) -> Order:
        """Cancel a completed order and put its quantities back on the shelf."""
        try:
            order = (
                self.db.query(Order)
                .filter(Order.order_id == order_id)
                .with_for_update()
                .first()
            )
            if not order:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Order not found"
                )
            if order.status != OrderStatus.COMPLETED:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Only completed orders can be cancelled"
                )

            for item in order.order_items:
                self.db.query(Product).filter(Product.product_id == item.product_id).update(
                    {Product.quantity: Product.quantity + item.quantity},
                    synchronize_session=False
                )

            order.status = OrderStatus.CANCELLED
            self.db.commit()
            self.db.refresh(order)

        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error cancelling order {order_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error cancelling order"
            )

        logger.info(f"Order {order_id} cancelled")
        return order

    def get_all_orders(self) -> Dict[str, Any]:
        orders = (
            self.db.query(Order)
            .options(joinedload(Order.user), selectinload(Order.order_items))
            .order_by(Order.created_at.desc(), Order.order_id.desc())
            .all()
        )
        return {"orders": orders}

    def get_order(self, order_id: int) -> Order:
        order = (
            self.db.query(Order)
            .options(joinedload(Order.user), selectinload(Order.order_items))
            .filter(Order.order_id == order_id)
            .first()
        )
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found"
            )
        return order
