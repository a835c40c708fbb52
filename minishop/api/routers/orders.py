# minishop/api/routers/orders.py
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from minishop.api.deps import get_gateway, get_session_ledger
from minishop.api.security import require_roles
from minishop.data.database import get_db
from minishop.data.models.user import UserModel
from minishop.domain import roles
from minishop.domain.errors import ConflictError, InvalidStateError, NotFoundError, UpstreamError
from minishop.domain.schemas import ApiResponse, CheckoutOut, OrderOut, PaymentOut
from minishop.services.order_service import OrderService
from minishop.services.payment_gateway import StripeGateway
from minishop.services.session_ledger import SessionLedger

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])

shopper = require_roles(roles.USER)
payment_confirmers = require_roles(roles.ADMIN, roles.SALES_MANAGER, roles.MANAGER)


def get_service(
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
    ledger: SessionLedger | None = Depends(get_session_ledger),
):
    return OrderService(db, gateway, ledger)


@router.post("/purchase/{cart_id}", response_model=ApiResponse[CheckoutOut], status_code=201)
def checkout(
    cart_id: str,
    user: UserModel = Depends(shopper),
    svc: OrderService = Depends(get_service),
):
    """
    Creates the order from the caller's cart and returns the hosted
    payment page the client must be redirected to.
    """
    try:
        return ApiResponse(data=svc.checkout(user.id, cart_id))
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/{order_ref}", response_model=ApiResponse[OrderOut])
def get_order_by_ref(order_ref: str, svc: OrderService = Depends(get_service)):
    try:
        return ApiResponse(data=svc.get_order_by_ref(order_ref))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch(
    "/{session_id}",
    response_model=ApiResponse[Optional[Union[OrderOut, PaymentOut]]],
    dependencies=[Depends(payment_confirmers)],
)
def confirm_payment(session_id: str, svc: OrderService = Depends(get_service)):
    """
    Pulls the session status from the gateway. Paid sessions return the
    order, anything else returns the stored payment as is.
    """
    try:
        return ApiResponse(data=svc.confirm_payment(session_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))
