# minishop/services/product_service.py
import math

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from minishop.data.models.product import ProductModel
from minishop.domain.errors import ConflictError, NotFoundError
from minishop.domain.schemas import PaginationOut, ProductCreate, ProductOut, ProductUpdate
from minishop.repos.product_repo import ProductRepo
from minishop.utils.logging import get_logger

logger = get_logger(__name__)

NULLABLE_FIELDS = {"description"}


def to_product_out(product: ProductModel) -> ProductOut:
    return ProductOut(
        public_id=product.public_id,
        name=product.name,
        description=product.description,
        price=product.price,
        available_quantity=product.available_quantity,
        category_name=product.category.name if product.category else None,
    )


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        category: str | None = None,
    ) -> tuple[list[ProductOut], PaginationOut]:
        if page < 1 or limit < 1:
            raise ValueError("Page and limit must be greater than 0")

        total = self.repo.count_products(search, category)
        products = self.repo.list_products((page - 1) * limit, limit, search, category)
        responses = [to_product_out(p) for p in products]

        pagination = PaginationOut(
            total_page=math.ceil(total / limit),
            element_per_page=limit,
            total_elements=total,
            current_page_size=len(responses),
        )
        return responses, pagination

    def get_product(self, product_id: str) -> ProductOut:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("No product found")
        return to_product_out(product)

    def create_product(self, payload: ProductCreate) -> ProductOut:
        category = self.repo.get_category(payload.category_id)
        if not category:
            raise NotFoundError("Category not found")

        product = ProductModel(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            available_quantity=payload.available_quantity,
            category_id=category.id,
        )
        try:
            self.repo.add_product(product)
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            logger.error(f"Failed to create product {payload.name}: {e.orig}")
            raise ConflictError("Product with this name already exists!") from e

        logger.info(f"Created product {product.public_id} ({product.name})")
        return self.get_product(product.public_id)

    def update_product(self, product_id: str, payload: ProductUpdate) -> ProductOut:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        changes = payload.model_dump(exclude_unset=True)
        # description may be cleared, the other columns are NOT NULL
        changes = {k: v for k, v in changes.items() if v is not None or k in NULLABLE_FIELDS}
        category_public_id = changes.pop("category_id", None)
        if category_public_id:
            category = self.repo.get_category(category_public_id)
            if not category:
                raise NotFoundError("Category not found")
            product.category_id = category.id

        for field, value in changes.items():
            setattr(product, field, value)

        try:
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            logger.error(f"Failed to update product {product_id}: {e.orig}")
            raise ConflictError("Product with this name already exists!") from e

        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return self.get_product(product_id)

    def delete_product(self, product_id: str) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if self.repo.is_referenced(product.id):
            raise ConflictError("Product is referenced by a cart or an order")

        try:
            self.repo.delete_product(product)
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            logger.error(f"Failed to delete product {product_id}: {e.orig}")
            raise ConflictError("Product is referenced by a cart or an order") from e

        logger.info(f"Deleted product {product_id} ({product.name})")
