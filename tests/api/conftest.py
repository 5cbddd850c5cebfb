"""
API test fixtures - the app against a private in-memory SQLite database.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ledgerbook.infrastructure.database import get_db, init_db
from ledgerbook.main import app


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # no context manager: lifespan would open the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def ledgers(client) -> dict[str, str]:
    """Cash (1000 Dr), Sales and Purchases; name -> id."""
    created = {}
    for name, ledger_type, opening in [
        ("Cash", "Cash", "1000"),
        ("Sales", "Sales A/c", "0"),
        ("Purchases", "Purchases A/c", "0"),
    ]:
        response = client.post("/api/v1/ledgers", json={
            "name": name, "ledger_type": ledger_type, "opening_balance": opening,
        })
        assert response.status_code == 201
        created[name] = response.json()["id"]
    return created


def voucher_payload(voucher_type, day, *lines, **extra):
    """Voucher JSON from (ledger_id, debit, credit) lines."""
    return {
        "voucher_type": voucher_type,
        "voucher_date": day,
        "entries": [
            {"ledger_id": ledger_id, "debit_amount": debit, "credit_amount": credit}
            for ledger_id, debit, credit in lines
        ],
        **extra,
    }


@pytest.fixture
def posted(client, ledgers) -> dict[str, str]:
    """The cash sale / cash purchase pair of April 2024."""
    for payload in [
        voucher_payload("Receipt", "2024-04-01", (ledgers["Cash"], "500", "0"), (ledgers["Sales"], "0", "500"),
                        narration="Cash sale"),
        voucher_payload("Payment", "2024-04-05", (ledgers["Purchases"], "200", "0"), (ledgers["Cash"], "0", "200"),
                        narration="Cash purchase"),
    ]:
        assert client.post("/api/v1/vouchers", json=payload).status_code == 201
    return ledgers


@pytest.fixture
def make_voucher():
    return voucher_payload
