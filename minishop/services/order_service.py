# minishop/services/order_service.py
import secrets
from datetime import datetime, timezone

from redis import RedisError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from minishop.data.models.cart_item import CartItemModel
from minishop.data.models.order import OrderModel, OrderLineModel
from minishop.data.models.payment import PaymentModel, PaymentStatus
from minishop.data.models.user import UserModel
from minishop.domain.errors import ConflictError, InvalidStateError, NotFoundError
from minishop.domain.schemas import (
    CheckoutOut,
    CheckoutRequest,
    LineItem,
    OrderLineOut,
    OrderOut,
    PaymentOut,
    PriceData,
    ProductData,
)
from minishop.repos.cart_repo import CartRepo
from minishop.repos.order_repo import OrderRepo
from minishop.repos.product_repo import ProductRepo
from minishop.services.cart_service import calculate_sub_total
from minishop.services.payment_gateway import StripeGateway
from minishop.services.session_ledger import SessionLedger
from minishop.utils.settings import (
    APP_URL,
    MINOR_UNITS_PER_MAJOR,
    ORDER_REF_LENGTH,
    ORDER_REF_PREFIX,
    PAYMENT_CURRENCY,
)
from minishop.utils.logging import get_logger

logger = get_logger(__name__)


def generate_order_reference(length: int = ORDER_REF_LENGTH) -> str:
    """Human readable order code, e.g. ORD-3f9a1c07be."""
    if length <= 0:
        raise ValueError("Length must be a positive integer.")
    return ORDER_REF_PREFIX + secrets.token_hex((length + 1) // 2)[:length]


def to_order_out(order: OrderModel) -> OrderOut:
    return OrderOut(
        public_id=order.public_id,
        reference=order.reference,
        order_date=order.order_date,
        order_lines=[
            OrderLineOut(
                product_id=line.product.public_id,
                product_name=line.product.name,
                price=line.product.price,
                quantity=line.quantity,
            )
            for line in order.order_lines
        ],
        payment=PaymentOut.model_validate(order.payment) if order.payment else None,
    )


class OrderService:
    """
    Order use cases: checkout of a cart into an order, public lookup by
    reference and confirmation of the payment once the gateway reports it.
    """

    def __init__(
        self,
        db: Session,
        gateway: StripeGateway,
        ledger: SessionLedger | None = None,
    ):
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.gateway = gateway
        self.ledger = ledger

    def checkout(self, user_id: int, cart_id: str) -> CheckoutOut:
        """
        Turn the caller's cart into an order.

        1. Load the cart with its products, it must exist and hold items
        2. Create the hosted checkout session at the gateway
        3. In one transaction: order, order lines with a stock re-check and
           decrement per line, a PENDING payment, cart removal
        4. Return the redirect url and the populated order

        The gateway session is created outside the transaction. If the
        transaction rolls back the session is left behind at the gateway;
        the optional ledger lets the reconcile task expire it later.
        """
        cart = self.carts.get_user_cart(cart_id, user_id)
        if not cart or not cart.items:
            raise InvalidStateError("Cart is empty")

        items = list(cart.items)
        sub_total = calculate_sub_total(items)
        reference = generate_order_reference()

        request = self.build_checkout_request(items, cart.user, reference)
        session = self.gateway.create_checkout_session(request)
        logger.info(f"Checkout session {session.id} created for order {reference}")

        self._ledger_call("record", session.id)

        try:
            order = self.repo.add_order(
                OrderModel(
                    user_id=user_id,
                    reference=reference,
                    order_date=datetime.now(timezone.utc),
                )
            )

            for item in items:
                self._reserve_line(order, item)

            self.repo.add_payment(
                PaymentModel(
                    order_id=order.id,
                    amount=sub_total,
                    status=PaymentStatus.PENDING,
                    reference=session.id,
                )
            )

            self.carts.delete_cart(cart)
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            logger.error(f"Checkout of cart {cart_id} failed, session {session.id} orphaned: {e.orig}")
            raise ConflictError("Order could not be stored") from e
        except Exception:
            self.repo.rollback()
            logger.error(f"Checkout of cart {cart_id} rolled back, session {session.id} orphaned")
            raise

        self._ledger_call("clear", session.id)

        logger.info(f"Order {reference} created from cart {cart_id} ({len(items)} lines, total {sub_total})")
        return CheckoutOut(
            checkout_url=session.url,
            order=to_order_out(self.repo.get_order(order.id)),
        )

    def _ledger_call(self, op: str, session_id: str) -> None:
        # the ledger is bookkeeping for the reconcile task, an outage must not fail checkout
        if not self.ledger:
            return
        try:
            getattr(self.ledger, op)(session_id)
        except RedisError as e:
            logger.error(f"Ledger {op} failed for session {session_id}: {e}")

    def _reserve_line(self, order: OrderModel, item: CartItemModel) -> None:
        product = self.products.reload_product(item.product_id)
        if not product or product.available_quantity < item.quantity:
            name = product.name if product else item.product_id
            raise InvalidStateError(f"Not enough stock for product: {name}")

        self.repo.add_order_line(
            OrderLineModel(order_id=order.id, product_id=product.id, quantity=item.quantity)
        )

        # conditional update, zero rows means someone else took the stock
        if self.products.decrement_stock(product.id, item.quantity) == 0:
            raise InvalidStateError(f"Not enough stock for product: {product.name}")

    def build_checkout_request(self, items, user: UserModel, reference: str) -> CheckoutRequest:
        status_url = f"{APP_URL}/api/v1/orders/{reference}"
        return CheckoutRequest(
            success_url=status_url,
            cancel_url=status_url,
            customer_email=user.email,
            client_reference_id=user.public_id,
            line_items=[
                LineItem(
                    quantity=item.quantity,
                    price_data=PriceData(
                        currency=PAYMENT_CURRENCY,
                        unit_amount=item.product.price * MINOR_UNITS_PER_MAJOR,
                        product_data=ProductData(name=item.product.name),
                    ),
                )
                for item in items
            ],
        )

    def get_order_by_ref(self, reference: str) -> OrderOut:
        order = self.repo.get_order_by_reference(reference)
        if not order:
            raise NotFoundError("No order found for this reference")
        return to_order_out(order)

    def confirm_payment(self, session_id: str) -> OrderOut | PaymentOut | None:
        """
        Ask the gateway for the session status. A paid session marks the
        matching payment PAID and returns its order. Anything else returns
        the payment as stored (or None when no payment matches), without
        telling pending and failed sessions apart.
        """
        session = self.gateway.confirm_payment(session_id)
        payment = self.repo.get_payment_by_reference(session_id)

        if session.payment_status == "paid":
            if not payment:
                raise NotFoundError("No payment found for this session")
            if payment.status != PaymentStatus.PAID:
                logger.info(f"Payment {session_id} {payment.status.value} -> PAID")
            self.repo.update_payment_status(payment, PaymentStatus.PAID)
            self.repo.commit()
            return to_order_out(self.repo.get_order(payment.order_id))

        logger.info(f"Payment {session_id} not paid yet (gateway status: {session.payment_status})")
        return PaymentOut.model_validate(payment) if payment else None
