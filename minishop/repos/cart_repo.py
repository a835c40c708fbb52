# minishop/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from minishop.data.models.cart import CartModel
from minishop.data.models.cart_item import CartItemModel


def _with_items():
    return selectinload(CartModel.items).selectinload(CartItemModel.product)


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .options(_with_items())
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_user_cart(self, public_id: str, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.public_id == public_id, CartModel.user_id == user_id)
            .options(_with_items(), selectinload(CartModel.user))
        ).scalar_one_or_none()

    def get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.get_cart_by_user(user_id)
        if cart:
            return cart
        cart = CartModel(user_id=user_id)
        self.db.add(cart)
        try:
            self.db.flush()
        except IntegrityError:
            # another request created it first, nothing else is pending here
            self.db.rollback()
            return self.get_cart_by_user(user_id)
        return cart

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_cart_item_by_public_id(self, public_id: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(CartItemModel.public_id == public_id)
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_cart(self, cart: CartModel) -> None:
        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart.id))
        # the loaded collection still lists the deleted rows
        self.db.expire(cart, ["items"])
        self.db.delete(cart)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
