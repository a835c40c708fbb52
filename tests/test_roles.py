import pytest

from minishop.domain.roles import is_authorized, normalize_role_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("admin", "ADMIN"),
        (" store-keeper ", "STORE_KEEPER"),
        ("sales  manager", "SALES_MANAGER"),
        ("PRODUCT_MANAGER", "PRODUCT_MANAGER"),
    ],
)
def test_normalize_role_name(raw, expected):
    assert normalize_role_name(raw) == expected


def test_normalize_role_name_rejects_blank():
    with pytest.raises(ValueError):
        normalize_role_name("   ")


def test_is_authorized_needs_one_matching_role():
    assert is_authorized({"USER"}, {"USER"})
    assert is_authorized({"USER", "MANAGER"}, {"ADMIN", "MANAGER"})
    assert not is_authorized({"USER"}, {"ADMIN", "MANAGER"})
    assert not is_authorized(set(), {"USER"})


def test_is_authorized_without_requirements():
    assert is_authorized(set(), [])


def test_role_repo_stores_normalized_names(db):
    from minishop.repos.user_repo import UserRepo

    repo = UserRepo(db)
    role = repo.create_role("store-keeper", "Manages product stocks")
    db.commit()

    assert role.name == "STORE_KEEPER"
    assert repo.get_role("Store Keeper").id == role.id
