import pytest

from minishop.domain.errors import ConflictError, NotFoundError
from minishop.domain.schemas import ProductCreate, ProductUpdate
from minishop.services.product_service import ProductService


def test_create_and_get_product(db, category):
    svc = ProductService(db)

    created = svc.create_product(
        ProductCreate(
            name="Headset",
            description="USB headset",
            price=300,
            available_quantity=4,
            category_id=category.public_id,
        )
    )

    assert created.category_name == "Peripherals"
    assert svc.get_product(created.public_id) == created


def test_create_product_duplicate_name(db, category, make_product):
    make_product("Headset", 300, 4)

    with pytest.raises(ConflictError):
        ProductService(db).create_product(
            ProductCreate(name="Headset", price=1, available_quantity=1, category_id=category.public_id)
        )


def test_create_product_unknown_category(db):
    with pytest.raises(NotFoundError):
        ProductService(db).create_product(
            ProductCreate(name="Headset", price=1, available_quantity=1, category_id="missing")
        )


def test_update_product_is_partial(db, make_product):
    mouse = make_product("Mouse", 500, 3)

    updated = ProductService(db).update_product(mouse.public_id, ProductUpdate(available_quantity=12))

    assert updated.available_quantity == 12
    assert updated.price == 500
    assert updated.name == "Mouse"


def test_update_unknown_product(db):
    with pytest.raises(NotFoundError):
        ProductService(db).update_product("missing", ProductUpdate(price=1))


def test_list_products_paginates_and_searches(db, make_product):
    make_product("Mouse", 500, 3)
    make_product("Gaming Mouse", 900, 3)
    make_product("Keyboard", 1000, 3)
    svc = ProductService(db)

    page, pagination = svc.list_products(page=1, limit=2)
    assert len(page) == 2
    assert pagination.total_elements == 3
    assert pagination.total_page == 2
    assert pagination.current_page_size == 2

    found, pagination = svc.list_products(search="mouse")
    assert {p.name for p in found} == {"Mouse", "Gaming Mouse"}
    assert pagination.total_elements == 2

    by_category, _ = svc.list_products(category="periph")
    assert len(by_category) == 3


def test_update_product_clears_description(db, make_product):
    mouse = make_product("Mouse", 500, 3)
    svc = ProductService(db)
    svc.update_product(mouse.public_id, ProductUpdate(description="Wireless"))

    updated = svc.update_product(mouse.public_id, ProductUpdate(description=None, price=None))

    assert updated.description is None
    assert updated.price == 500


def test_delete_product(db, make_product):
    mouse = make_product("Mouse", 500, 3)
    svc = ProductService(db)

    svc.delete_product(mouse.public_id)

    with pytest.raises(NotFoundError):
        svc.get_product(mouse.public_id)


def test_delete_unknown_product(db):
    with pytest.raises(NotFoundError):
        ProductService(db).delete_product("missing")


def test_delete_product_in_a_cart(db, make_user, make_product):
    from minishop.services.cart_service import CartService

    mouse = make_product("Mouse", 500, 3)
    CartService(db).add_to_cart(make_user().id, mouse.public_id, 1)

    with pytest.raises(ConflictError):
        ProductService(db).delete_product(mouse.public_id)

    assert ProductService(db).get_product(mouse.public_id).name == "Mouse"
