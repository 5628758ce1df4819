import io
import os
from uuid import uuid4

# Settings are read at import time; point the app engine at SQLite before importing it.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")

import pytest
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ledger_import.db.session import get_db
from ledger_import.main import app
from ledger_import.models import Base
from ledger_import.models.category import ExpenseCategory


def build_workbook(sheets: dict[str, list[list]]) -> bytes:
    """Build an .xlsx workbook in memory, one entry per sheet."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        worksheet = workbook.create_sheet(title=name)
        for row in rows:
            worksheet.append(row)
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture
def xlsx():
    """Factory fixture: ``xlsx({"Sheet": rows})`` -> workbook bytes."""
    return build_workbook


@pytest.fixture
async def test_engine(tmp_path):
    """Per-test database.

    Uses a throwaway SQLite file by default; set TEST_DATABASE_URL to run the
    suite against Postgres instead.
    """
    url = os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = create_async_engine(url, echo=False)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def family_id():
    return uuid4()


@pytest.fixture
async def categories(db_session: AsyncSession, family_id):
    """Two expense categories for the test family, keyed by name."""
    cafe = ExpenseCategory(family_id=family_id, name="카페")
    mart = ExpenseCategory(family_id=family_id, name="마트")
    db_session.add_all([cafe, mart])
    await db_session.commit()
    return {"카페": cafe, "마트": mart}


@pytest.fixture
async def client(db_session: AsyncSession):
    """Provide test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def family_headers(family_id):
    return {"X-Family-ID": str(family_id)}
