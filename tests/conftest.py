"""
Shared fixtures: in-memory SQLite per test, mocked remote services.
"""
import pytest
from fastapi.testclient import TestClient

from app.data.database import build_engine, build_session_factory, init_db
from app.services.order_service import OrderService

from tests.mocks import INTERNAL_SECRET, MockPaymentClient, MockProductClient


def pytest_configure(config):
    config.addinivalue_line("markers", "component: service tests against SQLite and mocked peers")
    config.addinivalue_line("markers", "api: HTTP tests through TestClient")


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def product_client():
    """Catalog with the prices used across the tests"""
    client = MockProductClient()
    client.set_product(1, "Keyboard", 10.00)
    client.set_product(2, "Mouse", 5.00)
    client.set_product(3, "Monitor", 899.00)
    return client


@pytest.fixture
def payment_client():
    return MockPaymentClient()


@pytest.fixture
def service(db, product_client, payment_client):
    return OrderService(db, product_client=product_client, payment_client=payment_client)


@pytest.fixture
def client(product_client, payment_client):
    from app.main import create_app

    app = create_app(
        database_url="sqlite://",
        product_client=product_client,
        payment_client=payment_client,
        internal_secret=INTERNAL_SECRET,
    )
    with TestClient(app) as c:
        yield c
