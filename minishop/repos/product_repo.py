# minishop/repos/product_repo.py
from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session, selectinload

from minishop.data.models.cart_item import CartItemModel
from minishop.data.models.category import CategoryModel
from minishop.data.models.order import OrderLineModel
from minishop.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, public_id: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.public_id == public_id)
            .options(selectinload(ProductModel.category))
        ).scalar_one_or_none()

    def get_category(self, public_id: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.public_id == public_id)
        ).scalar_one_or_none()

    def _filtered(self, stmt, search: str | None, category: str | None):
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(ProductModel.name.ilike(pattern), ProductModel.description.ilike(pattern))
            )
        if category:
            stmt = stmt.join(ProductModel.category).where(CategoryModel.name.ilike(f"%{category}%"))
        return stmt

    def list_products(
        self,
        offset: int,
        limit: int,
        search: str | None = None,
        category: str | None = None,
    ) -> list[ProductModel]:
        stmt = self._filtered(select(ProductModel), search, category)
        stmt = (
            stmt.options(selectinload(ProductModel.category))
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars())

    def count_products(self, search: str | None = None, category: str | None = None) -> int:
        stmt = self._filtered(select(func.count(ProductModel.id)).select_from(ProductModel), search, category)
        return self.db.execute(stmt).scalar_one()

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def is_referenced(self, product_id: int) -> bool:
        in_carts = select(CartItemModel.id).where(CartItemModel.product_id == product_id)
        in_orders = select(OrderLineModel.id).where(OrderLineModel.product_id == product_id)
        return self.db.execute(select(or_(in_carts.exists(), in_orders.exists()))).scalar_one()

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.flush()

    def reload_product(self, product_id: int) -> ProductModel | None:
        # bypass the identity map, stock may have moved since the cart was read
        return self.db.get(ProductModel, product_id, populate_existing=True)

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        # UPDATE products SET available_quantity = available_quantity - q
        # WHERE id = :id AND available_quantity >= q
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.available_quantity >= quantity,
            )
            .values(available_quantity=ProductModel.available_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
