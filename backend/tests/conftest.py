from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from marketplace.db import get_db, init_db, make_engine
from marketplace.main import app
from marketplace.models.address import Address
from marketplace.models.product import Product
from marketplace.models.store import Store
from marketplace.models.user import ClientProfile, User, UserRole


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(reset=True, bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def seed(session_factory):
    """
    Two stores with products, a client with an address, a client without one,
    and a user that has no client profile at all.
    """
    s = session_factory()
    try:
        client = User(name="Ana Client", email="ana@example.com", role=UserRole.CLIENT)
        homeless = User(name="Bruno NoAddress", email="bruno@example.com", role=UserRole.CLIENT)
        producer_a = User(name="Farm A", email="farm-a@example.com", role=UserRole.PRODUCER)
        producer_b = User(name="Dairy B", email="dairy-b@example.com", role=UserRole.PRODUCER)
        admin = User(name="Admin", email="admin@example.com", role=UserRole.ADMIN)
        s.add_all([client, homeless, producer_a, producer_b, admin])
        s.flush()

        client_profile = ClientProfile(user_id=client.id)
        homeless_profile = ClientProfile(user_id=homeless.id)
        s.add_all([client_profile, homeless_profile])
        s.flush()

        s.add(
            Address(
                client_profile_id=client_profile.id,
                street="Rua das Flores",
                number="42",
                city="Recife",
                state="PE",
                postal_code="50000-000",
            )
        )

        store_a = Store(name="Farm A Store", description="Vegetables", owner_user_id=producer_a.id)
        store_b = Store(name="Dairy B Store", description="Cheese", owner_user_id=producer_b.id)
        s.add_all([store_a, store_b])
        s.flush()

        tomatoes = Product(store_id=store_a.id, name="Tomatoes", description="1kg box", price_cents=1000)
        honey = Product(store_id=store_a.id, name="Honey", description="500g jar", price_cents=1000)
        cheese = Product(store_id=store_b.id, name="Cheese", description="Fresh cheese", price_cents=750)
        retired = Product(store_id=store_a.id, name="Old Jam", price_cents=300, active=False)
        s.add_all([tomatoes, honey, cheese, retired])
        s.commit()

        return SimpleNamespace(
            client_user_id=client.id,
            client_profile_id=client_profile.id,
            homeless_user_id=homeless.id,
            producer_a_user_id=producer_a.id,
            producer_b_user_id=producer_b.id,
            admin_user_id=admin.id,
            store_a_id=store_a.id,
            store_b_id=store_b.id,
            tomatoes_id=tomatoes.id,
            honey_id=honey.id,
            cheese_id=cheese.id,
            retired_id=retired.id,
        )
    finally:
        s.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
