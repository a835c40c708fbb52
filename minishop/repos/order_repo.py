# minishop/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from minishop.data.models.order import OrderModel, OrderLineModel
from minishop.data.models.payment import PaymentModel, PaymentStatus


def _populated():
    return (
        selectinload(OrderModel.order_lines).selectinload(OrderLineModel.product),
        selectinload(OrderModel.payment),
    )


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_line(self, line: OrderLineModel) -> OrderLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def add_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(*_populated())
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_order_by_reference(self, reference: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.reference == reference).options(*_populated())
        ).scalar_one_or_none()

    def get_payment_by_reference(self, reference: str) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.reference == reference)
        ).scalar_one_or_none()

    def update_payment_status(self, payment: PaymentModel, status: PaymentStatus) -> PaymentModel:
        if payment.status != status:
            payment.status = status
            self.db.flush()
        return payment

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
