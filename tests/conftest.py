"""Shared fixtures: every test gets its own in-memory SQLite database."""

import pytest
from httpx import ASGITransport, AsyncClient

from expense_tracker.core.config import Settings
from expense_tracker.core.database import Database
from expense_tracker.domain.categories.repository import CategoryRepository
from expense_tracker.domain.transactions.repository import TransactionRepository


@pytest.fixture
async def database():
    db = Database("sqlite+aiosqlite://")
    await db.connect()
    await db.init_schema()
    yield db
    await db.close()


@pytest.fixture
def transactions(database):
    return TransactionRepository(database)


@pytest.fixture
def categories(database):
    return CategoryRepository(database)


@pytest.fixture
def make_transaction(transactions):
    """Insert a transaction, filling unspecified fields with defaults."""

    async def _make(**overrides):
        data = {
            "kind": "expense",
            "amount": 10,
            "description": "Test",
            "category": "Alimentación",
            "date": "2024-01-15",
        }
        data.update(overrides)
        return await transactions.create(data)

    return _make


@pytest.fixture
async def client(database):
    from main import create_app

    app = create_app(Settings(ENV="test", SEED_DEFAULT_CATEGORIES=False))
    app.state.database = database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http:
        yield http
