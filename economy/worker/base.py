import argparse
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.config import ApplicationConfig

logger = logging.getLogger(__name__)


class PeriodicWorker(ABC):
    """
    Shared lifecycle for the background workers

    Subclasses implement ``run_once`` and may override ``describe``. The worker owns its
    engine unless a session factory is injected, in which case ``shutdown``
    leaves the caller's engine alone.
    """

    name = "worker"
    enabled_setting: Optional[str] = None
    default_interval = 3600

    def __init__(self, db_uri: Optional[str] = None, session_factory=None):
        if session_factory is not None:
            self.engine = None
            self.async_session_factory = session_factory
        else:
            self.engine = create_async_engine(db_uri or ApplicationConfig.DB_URI, echo=False, future=True)
            self.async_session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )

        logger.info(f"{self.name} initialized")

    @property
    def enabled(self) -> bool:
        if self.enabled_setting is None:
            return True
        return bool(getattr(ApplicationConfig, self.enabled_setting, True))

    @abstractmethod
    async def run_once(self) -> Any:
        """Run one cycle and return its summary, or None when disabled"""
        pass

    def describe(self, result: Any) -> str:
        return str(result)

    async def run_forever(self, interval_seconds: Optional[int] = None):
        interval_seconds = interval_seconds or self.default_interval
        logger.info(f"Starting {self.name} with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                if result is not None:
                    logger.info(f"{self.name} cycle complete: {self.describe(result)}")
            except Exception as e:
                logger.error(f"{self.name} cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        if self.engine is not None:
            await self.engine.dispose()
        logger.info(f"{self.name} shutdown complete")


async def run_cli(worker_cls, description: str):
    """Parse ``--once`` / ``--interval`` and drive a worker until interrupted"""
    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=worker_cls.default_interval,
        help=f"Interval between runs in seconds (default: {worker_cls.default_interval})"
    )
    args = parser.parse_args()

    worker = worker_cls()
    try:
        if args.once:
            result = await worker.run_once()
            print(worker.describe(result) if result is not None else f"{worker.name} is disabled")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()
