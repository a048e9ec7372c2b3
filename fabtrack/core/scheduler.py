from apscheduler.schedulers.asyncio import AsyncIOScheduler

from fabtrack.core.config import ORDER_SYNC_INTERVAL_SECONDS
from fabtrack.core.exceptions import BackingServiceFailure
from fabtrack.services.orders.order_store import OrderStore
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)


def create_scheduler() -> AsyncIOScheduler:
    return AsyncIOScheduler()


async def sync_orders_job(store: OrderStore):
    try:
        await store.poll_changes()
    except BackingServiceFailure:
        # already logged by the store, next run retries
        logger.warning("Order sync skipped, order store unavailable")


def register_jobs(scheduler: AsyncIOScheduler, store: OrderStore) -> None:
    scheduler.add_job(
        sync_orders_job,
        "interval",
        seconds=ORDER_SYNC_INTERVAL_SECONDS,
        args=[store],
        id="sync_orders",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
