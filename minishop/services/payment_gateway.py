# minishop/services/payment_gateway.py
import stripe

from minishop.domain.errors import UpstreamError
from minishop.domain.schemas import CheckoutRequest, CheckoutSession
from minishop.utils.settings import STRIPE_API_KEY
from minishop.utils.logging import get_logger

logger = get_logger(__name__)


class StripeGateway:
    """
    Hosted checkout on top of the stripe SDK.

    Retries and timeouts are left to the SDK. Every SDK failure is re-raised
    as UpstreamError so callers never depend on stripe's exception tree.
    """

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key or STRIPE_API_KEY

    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        logger.info(
            f"Creating checkout session for {request.client_reference_id} "
            f"with {len(request.line_items)} line items"
        )
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="payment",
                success_url=request.success_url,
                cancel_url=request.cancel_url,
                customer_email=request.customer_email,
                client_reference_id=request.client_reference_id,
                line_items=[item.model_dump() for item in request.line_items],
            )
        except stripe.StripeError as e:
            logger.error(f"Checkout session creation failed: {e}")
            raise UpstreamError("Payment gateway rejected the checkout session") from e
        return CheckoutSession(id=session.id, url=session.url, payment_status=session.payment_status)

    def confirm_payment(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error(f"Checkout session {session_id} lookup failed: {e}")
            raise UpstreamError("Payment gateway lookup failed") from e
        return CheckoutSession(id=session.id, url=session.url, payment_status=session.payment_status)

    def refund_payment(self, payment_intent_id: str, amount: int | None = None):
        params = {"payment_intent": payment_intent_id}
        if amount is not None:
            params["amount"] = amount
        try:
            return stripe.Refund.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.error(f"Refund for {payment_intent_id} failed: {e}")
            raise UpstreamError("Payment gateway refund failed") from e

    def expire_session(self, session_id: str) -> None:
        try:
            stripe.checkout.Session.expire(session_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error(f"Expiring checkout session {session_id} failed: {e}")
            raise UpstreamError("Payment gateway could not expire the session") from e
