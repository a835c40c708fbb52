# minishop/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from minishop.api.security import require_roles
from minishop.data.database import get_db
from minishop.data.models.user import UserModel
from minishop.domain import roles
from minishop.domain.errors import InvalidStateError, NotFoundError
from minishop.domain.schemas import AddToCartIn, ApiResponse, CartOut
from minishop.services.cart_service import CartService

router = APIRouter(prefix="/api/v1/carts", tags=["carts"])

shopper = require_roles(roles.USER)


def get_service(db: Session):
    return CartService(db)


@router.post("/add", response_model=ApiResponse[CartOut], status_code=201)
def add_to_cart(
    payload: AddToCartIn,
    user: UserModel = Depends(shopper),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return ApiResponse(data=svc.add_to_cart(user.id, payload.product_id, payload.quantity))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/remove/{cart_item_id}", response_model=ApiResponse[CartOut])
def remove_from_cart(
    cart_item_id: str,
    user: UserModel = Depends(shopper),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return ApiResponse(data=svc.remove_from_cart(user.id, cart_item_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=ApiResponse[CartOut])
def get_user_cart(user: UserModel = Depends(shopper), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return ApiResponse(data=svc.get_user_cart(user.id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
