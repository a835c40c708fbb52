# every model imported here so SQLAlchemy registers it on Base.metadata
from minishop.data.models.user import UserModel, RoleModel, UserRoleModel
from minishop.data.models.category import CategoryModel
from minishop.data.models.product import ProductModel
from minishop.data.models.cart import CartModel
from minishop.data.models.cart_item import CartItemModel
from minishop.data.models.order import OrderModel, OrderLineModel
from minishop.data.models.payment import PaymentModel, PaymentStatus

__all__ = [
    "UserModel",
    "RoleModel",
    "UserRoleModel",
    "CategoryModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderLineModel",
    "PaymentModel",
    "PaymentStatus",
]
