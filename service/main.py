"""Entry point: wire storage, engine and scheduler, run until signalled."""

import asyncio
import signal

import structlog

from config.logging_config import setup_logging
from config.settings import settings
from notifications.engine import NotificationEngine
from scheduler.scheduler import GenerationScheduler
from storage.database import close_pool, get_pool, run_migrations
from storage.local_store import ArchiveBackup, LocalReadStateStore, LocalStore, SettingsStore
from storage.repositories.entity_repo import EntityRepository
from storage.repositories.notification_repo import NotificationRepository

log = structlog.get_logger(__name__)


async def build_engine() -> NotificationEngine:
    """Create the engine against the configured database and local store."""
    pool = await get_pool()
    await run_migrations(pool)

    local = LocalStore(settings.local_store_path)
    remote = NotificationRepository(pool) if settings.remote_sync_enabled else None
    engine = NotificationEngine(
        provider=EntityRepository(pool),
        read_state=LocalReadStateStore(local),
        remote=remote,
        employee_id=settings.employee_id,
        settings_store=SettingsStore(local),
        archive_backup=ArchiveBackup(local),
    )
    await engine.load_from_remote()
    return engine


async def run_service() -> None:
    setup_logging()
    log.info("starting_notification_service", employee_id=settings.employee_id)

    engine = await build_engine()
    scheduler = GenerationScheduler(engine, interval=settings.generation_interval_seconds)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            pass

    scheduler.start()
    try:
        await stop.wait()
    finally:
        await scheduler.stop()
        await engine.drain()
        await engine.close()
        await close_pool()
        log.info("notification_service_stopped")


def main() -> None:
    asyncio.run(run_service())


if __name__ == "__main__":
    main()
