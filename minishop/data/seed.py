# minishop/data/seed.py
import os

from sqlalchemy import select

from minishop.data.database import SessionLocal, init_db
from minishop.data.models import CategoryModel, ProductModel, UserModel
from minishop.domain import roles
from minishop.repos.user_repo import UserRepo
from minishop.utils.logging import get_logger

logger = get_logger(__name__)

ROLES = [
    (roles.ADMIN, "System administrator with full access"),
    (roles.USER, "Standard user with limited access"),
    (roles.MANAGER, "Moderates user content"),
    ("store-keeper", "Manages product stocks"),
    ("sales manager", "Confirms payments"),
    ("product-manager", "Manages the catalog"),
]

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@minishop.io")

PRODUCTS = [
    ("Keyboard", "Mechanical keyboard", 200, 25),
    ("Mouse", "Wireless mouse", 50, 100),
    ("Monitor", "27 inch IPS monitor", 900, 10),
]


def seed(db):
    repo = UserRepo(db)

    for name, description in ROLES:
        role = repo.get_role(name)
        if role:
            role.description = description
        else:
            repo.create_role(name, description)

    admin = db.execute(select(UserModel).where(UserModel.email == ADMIN_EMAIL)).scalar_one_or_none()
    if not admin:
        admin = repo.create_user(UserModel(email=ADMIN_EMAIL))
    repo.assign_role(admin, repo.get_role(roles.ADMIN))

    # only seed the catalog if it is empty
    if not db.execute(select(CategoryModel)).first():
        category = CategoryModel(name="General", description="Everything else")
        db.add(category)
        db.flush()
        for name, description, price, stock in PRODUCTS:
            db.add(
                ProductModel(
                    name=name,
                    description=description,
                    price=price,
                    available_quantity=stock,
                    category_id=category.id,
                )
            )

    db.commit()
    logger.info(f"Roles & admin user {ADMIN_EMAIL} seeded")


def main():
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
