from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.config import ApplicationConfig
from economy.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from economy.adapter.services.notification_service import create_notification_service
from economy.adapter.services.payment_gateway import HttpPaymentGateway
from economy.app.services.notification_service import NotificationService
from economy.app.services.payment_gateway import PaymentGateway

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

notification_service = create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK_URL)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_payment_gateway() -> PaymentGateway:
    return HttpPaymentGateway(
        base_url=ApplicationConfig.PAYMENT_API_URL,
        api_key=ApplicationConfig.PAYMENT_API_KEY,
        timeout=ApplicationConfig.PAYMENT_TIMEOUT_SECONDS,
    )


def get_notification_service() -> NotificationService:
    return notification_service
