import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-secret")

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import minishop.data.models  # noqa: F401
from minishop.api.deps import get_gateway, get_session_ledger
from minishop.data.database import Base, get_db
from minishop.data.models import CategoryModel, ProductModel, UserModel
from minishop.domain.errors import UpstreamError
from minishop.domain.schemas import CheckoutSession
from minishop.repos.user_repo import UserRepo
from minishop.utils.settings import ACCESS_TOKEN_SECRET, JWT_ALGORITHM

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False)


class FakeGateway:
    """Records every call; session status is driven by the test through ``statuses``."""

    def __init__(self):
        self.requests = []
        self.statuses = {}
        self.expired = []
        self.fail_create = False
        self.fail_expire = set()

    def create_checkout_session(self, request):
        if self.fail_create:
            raise UpstreamError("gateway down")
        self.requests.append(request)
        session_id = f"cs_test_{len(self.requests)}"
        self.statuses[session_id] = "unpaid"
        return CheckoutSession(
            id=session_id,
            url=f"https://checkout.test/pay/{session_id}",
            payment_status="unpaid",
        )

    def confirm_payment(self, session_id):
        return CheckoutSession(id=session_id, payment_status=self.statuses.get(session_id, "unpaid"))

    def expire_session(self, session_id):
        if session_id in self.fail_expire:
            raise UpstreamError("cannot expire")
        self.expired.append(session_id)


class FakeLedger:
    def __init__(self):
        self.entries = {}

    def record(self, session_id, created_at=None):
        self.entries[session_id] = created_at if created_at is not None else 0.0

    def clear(self, session_id):
        self.entries.pop(session_id, None)

    def pending(self):
        return dict(self.entries)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(*role_names, email=None):
        counter["n"] += 1
        repo = UserRepo(db)
        user = repo.create_user(UserModel(email=email or f"user{counter['n']}@minishop.io"))
        for name in role_names or ("USER",):
            role = repo.get_role(name) or repo.create_role(name)
            repo.assign_role(user, role)
        db.commit()
        return user

    return _make


@pytest.fixture
def category(db):
    cat = CategoryModel(name="Peripherals")
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def make_product(db, category):
    def _make(name, price, stock):
        product = ProductModel(
            name=name,
            price=price,
            available_quantity=stock,
            category_id=category.id,
        )
        db.add(product)
        db.commit()
        return product

    return _make


def auth_header(user, expires_in=timedelta(minutes=5)):
    token = jwt.encode(
        {"sub": user.public_id, "exp": datetime.now(timezone.utc) + expires_in},
        ACCESS_TOKEN_SECRET,
        algorithm=JWT_ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db, gateway):
    from minishop.api import create_app

    app = create_app()

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_session_ledger] = lambda: None

    return TestClient(app)
