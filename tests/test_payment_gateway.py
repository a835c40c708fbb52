from types import SimpleNamespace

import pytest
import stripe

from minishop.domain.errors import UpstreamError
from minishop.domain.schemas import CheckoutRequest, LineItem, PriceData, ProductData
from minishop.services.payment_gateway import StripeGateway


def checkout_request():
    return CheckoutRequest(
        success_url="http://shop/api/v1/orders/ORD-1",
        cancel_url="http://shop/api/v1/orders/ORD-1",
        customer_email="buyer@minishop.io",
        client_reference_id="user-1",
        line_items=[
            LineItem(
                quantity=2,
                price_data=PriceData(currency="ngn", unit_amount=100000, product_data=ProductData(name="A")),
            )
        ],
    )


def test_create_checkout_session_sends_payment_mode(monkeypatch):
    calls = {}

    def fake_create(**kwargs):
        calls.update(kwargs)
        return SimpleNamespace(id="cs_1", url="https://pay/cs_1", payment_status="unpaid")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    session = StripeGateway(api_key="sk_test").create_checkout_session(checkout_request())

    assert session.id == "cs_1"
    assert session.url == "https://pay/cs_1"
    assert calls["mode"] == "payment"
    assert calls["api_key"] == "sk_test"
    assert calls["client_reference_id"] == "user-1"
    assert calls["line_items"] == [
        {
            "quantity": 2,
            "price_data": {"currency": "ngn", "unit_amount": 100000, "product_data": {"name": "A"}},
        }
    ]


def test_confirm_payment_reads_status(monkeypatch):
    monkeypatch.setattr(
        stripe.checkout.Session,
        "retrieve",
        lambda session_id, **kwargs: SimpleNamespace(id=session_id, url=None, payment_status="paid"),
    )

    assert StripeGateway(api_key="sk_test").confirm_payment("cs_1").payment_status == "paid"


def test_sdk_errors_become_upstream_errors(monkeypatch):
    def boom(*args, **kwargs):
        raise stripe.StripeError("network down")

    monkeypatch.setattr(stripe.checkout.Session, "create", boom)
    monkeypatch.setattr(stripe.checkout.Session, "expire", boom)
    gateway = StripeGateway(api_key="sk_test")

    with pytest.raises(UpstreamError):
        gateway.create_checkout_session(checkout_request())
    with pytest.raises(UpstreamError):
        gateway.expire_session("cs_1")
