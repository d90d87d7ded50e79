"""Pytest configuration and shared fixtures."""

import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pharmatrack.config import Settings
from pharmatrack.models import Base, Product, ProductUrl, Retailer


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SCRAPER_API_KEY="",
        PROXY_DOMAINS="drmax.ro",
        RETRY_ATTEMPTS=3,
        RETRY_BASE_DELAY_SECONDS=2.0,
        REQUEST_DELAY_MIN_SECONDS=2.0,
        REQUEST_DELAY_MAX_SECONDS=5.0,
        FAILURE_THRESHOLD=3,
    )


class SleepRecorder:
    """Stands in for asyncio.sleep and remembers every requested delay."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest_asyncio.fixture
async def session_factory():
    """Session factory bound to an in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()


@pytest.fixture
def add_target(session_factory):
    """Insert a monitored URL (with its product and retailer) and return its id."""

    async def _add(url: str, error_count: int = 0, is_active: bool = True) -> uuid.UUID:
        async with session_factory() as db:
            product = Product(name=f"Product for {url}")
            retailer = Retailer(name=f"Retailer {uuid.uuid4().hex[:8]}")
            db.add_all([product, retailer])
            await db.flush()

            product_url = ProductUrl(
                product_id=product.id,
                retailer_id=retailer.id,
                url=url,
                error_count=error_count,
                is_active=is_active,
            )
            db.add(product_url)
            await db.commit()
            return product_url.id

    return _add
