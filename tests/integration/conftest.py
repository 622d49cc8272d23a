import itertools
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.adapter.repositories import SqlAlchemyLedgerEntryRepository, SqlAlchemyUserBalanceRepository
from economy.adapter.services import LoggingNotificationService, SqlAlchemyUnitOfWork
from economy.app.services import LedgerWriter
from economy.app.services.payment_gateway import PaymentGateway, PaymentGatewayError, PaymentIntent
from economy.config import ApplicationConfig
from economy.depends import get_notification_service, get_payment_gateway, get_session
from economy.domain.ledger_entry import EventType, LedgerEntry, LedgerEntryKind

WEBHOOK_SECRET = "whsec_test"


class FakePaymentGateway(PaymentGateway):
    """In-memory processor; tests flip intent statuses directly"""

    def __init__(self):
        self.intents: dict[str, PaymentIntent] = {}
        self.unavailable = False
        self._ids = itertools.count(1)

    async def create_intent(self, amount_cents, currency, metadata):
        if self.unavailable:
            raise PaymentGatewayError("processor offline")
        intent_id = f"pi_test_{next(self._ids)}"
        intent = PaymentIntent(
            id=intent_id,
            status="requires_payment_method",
            client_secret=f"{intent_id}_secret",
            amount_cents=amount_cents,
            metadata=metadata,
        )
        self.intents[intent_id] = intent
        return intent

    async def retrieve_intent(self, intent_id):
        if self.unavailable:
            raise PaymentGatewayError("processor offline")
        return self.intents[intent_id]

    def set_status(self, intent_id: str, status: str):
        self.intents[intent_id] = self.intents[intent_id].model_copy(update={"status": status})


class IntegrationConfig(ApplicationConfig):
    AUTH_DISABLED = True
    ENABLE_SENTRY = 0
    ENABLE_LOGGING_MIDDLEWARE = False
    PAYMENT_WEBHOOK_SECRET = WEBHOOK_SECRET


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """File-backed SQLite so separate sessions really use separate connections"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'economy_test.db'}",
        echo=False,
        future=True,
        connect_args={"timeout": 30},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def notification_service():
    return LoggingNotificationService()


@pytest.fixture
def grant(session_factory):
    """Seed a user's balance through the ledger writer, committed"""

    async def _grant(user_id: str, credits: int = 0, points: int = 0):
        async with session_factory() as session:
            writer = LedgerWriter(
                SqlAlchemyLedgerEntryRepository(session),
                SqlAlchemyUserBalanceRepository(session),
            )
            if credits:
                await writer.post(
                    LedgerEntry.create(
                        user_id=user_id,
                        kind=LedgerEntryKind.CREDIT_PURCHASE,
                        amount=credits,
                        event_type=EventType.CREDITS_PURCHASED,
                    )
                )
            if points:
                await writer.post(
                    LedgerEntry.create(
                        user_id=user_id,
                        kind=LedgerEntryKind.POINT_AWARD,
                        amount=points,
                        event_type=EventType.ADMIN_ADJUSTMENT,
                    )
                )
            await SqlAlchemyUnitOfWork(session).commit()

    return _grant


@pytest_asyncio.fixture
async def client(session_factory, payment_gateway, notification_service):
    """Create test client with header auth and in-memory collaborators"""
    from economy.api.app import create_app

    app = create_app(IntegrationConfig)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    app.dependency_overrides[get_notification_service] = lambda: notification_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
