# minishop/services/cart_service.py
from sqlalchemy.orm import Session

from minishop.data.models.cart import CartModel
from minishop.data.models.cart_item import CartItemModel
from minishop.domain.errors import InvalidStateError, NotFoundError
from minishop.domain.schemas import CartOut, CartItemOut
from minishop.repos.cart_repo import CartRepo
from minishop.repos.product_repo import ProductRepo
from minishop.utils.logging import get_logger

logger = get_logger(__name__)


def calculate_sub_total(items) -> int:
    """Sum of price * quantity using the products' current prices."""
    return sum(item.product.price * item.quantity for item in items)


def to_cart_out(cart: CartModel) -> CartOut:
    return CartOut(
        id=cart.public_id,
        items=[
            CartItemOut(
                id=item.public_id,
                product_id=item.product.public_id,
                product_name=item.product.name,
                amount=item.product.price,
                quantity=item.quantity,
            )
            for item in cart.items
        ],
        sub_total=calculate_sub_total(cart.items),
    )


class CartService:
    """
    Use cases of the cart domain.
    Commands (add, remove) change state and return the refreshed cart,
    the query (get) only reads.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # query
    def get_user_cart(self, user_id: int) -> CartOut:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("User cart is empty")
        return to_cart_out(cart)

    # commands
    def add_to_cart(self, user_id: int, product_id: str, quantity: int) -> CartOut:
        if quantity < 1:
            raise InvalidStateError("Quantity must be at least 1")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        if product.available_quantity < quantity:
            raise InvalidStateError("Product currently out of stock")

        cart = self.repo.get_or_create_cart(user_id)

        existing_item = self.repo.get_cart_item(cart.id, product.id)
        if existing_item:
            # the combined quantity is not checked against stock here,
            # checkout re-validates every line
            logger.info(
                f"Product {product_id} already in cart {cart.public_id}, quantity "
                f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
        else:
            logger.info(f"Adding product {product_id} to cart {cart.public_id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, product_id=product.id, quantity=quantity)
            )

        self.repo.commit()
        return self.get_user_cart(user_id)

    def remove_from_cart(self, user_id: int, cart_item_id: str) -> CartOut:
        item = self.repo.get_cart_item_by_public_id(cart_item_id)
        if not item:
            raise NotFoundError("Product not found in cart")

        # TODO: reject items that belong to another user's cart
        logger.info(f"Removing cart item {cart_item_id} from cart {item.cart_id}")
        self.repo.delete_cart_item(item)
        self.repo.commit()

        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return to_cart_out(cart)
