import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from pcforge.database import create_db_and_tables, get_session
from pcforge.main import app
from pcforge.models.vendors import VendorProfile
from pcforge.seed_data import seed_catalog
from pcforge.services import notifications, storage
from pcforge.services.checkout import CheckoutRequest, place_order
from pcforge.services.session import hub

CUSTOMER = {"X-User-Id": "cust-1", "X-User-Role": "customer", "X-User-Email": "asha@example.com"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}


def vendor_headers(vendor_id: str) -> dict:
    return {"X-User-Id": vendor_id, "X-User-Role": "vendor"}


CHECKOUT = {
    "components": {
        "processor": "cpu-4",     # 9699
        "graphics": "gpu-2",      # 19099
        "memory": "ram-1",        # 3500
        "storage": "storage-1",   # 3150
        "power": "psu-1",         # 7500
        "motherboard": "mobo-2",  # 5999
    },
    "extra_storage": [],
    "build_type": "gaming",
    "contact": {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210"},
    "shipping": {"address": "12 MG Road", "city": "Bengaluru", "state": "KA", "zipcode": "560001"},
}


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        seed_catalog(session)
        yield session


@pytest.fixture(autouse=True)
def collaborators(tmp_path):
    """Local invoice storage and a mailer with no endpoint (log only)."""
    storage.set_storage(storage.FileStorage(str(tmp_path / "files"), "http://testserver/files"))
    notifications.set_mailer(notifications.MailClient(endpoint=None))
    hub.clear()
    yield
    storage.set_storage(None)
    notifications.set_mailer(None)
    hub.clear()


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="vendors")
def vendors_fixture(session):
    rows = [
        VendorProfile(vendor_id="ven-1", vendor_name="Ravi", store_name="Ravi Computers", email="ravi@example.com"),
        VendorProfile(vendor_id="ven-2", vendor_name="Meera", store_name="Meera Tech"),
    ]
    session.add_all(rows)
    session.commit()
    return rows


@pytest.fixture(name="order")
def order_fixture(session):
    return place_order(session, "cust-1", CheckoutRequest(**CHECKOUT))
