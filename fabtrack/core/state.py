# fabtrack/core/state.py

from typing import List, Optional

from fastapi import Depends, Request

from fabtrack.core.config import (
    DIRECTORY_SPREADSHEET_ID,
    DIRECTORY_RANGE,
    DIRECTORY_CACHE_SECONDS,
    MIRROR_SPREADSHEET_ID,
    MIRROR_RANGE,
)
from fabtrack.core.db import AsyncSessionLocal
from fabtrack.schemas.orders.order_schemas import Order
from fabtrack.services.directory.google_sheets import can_write
from fabtrack.services.directory.sheet_mirror import SheetMirror
from fabtrack.services.directory.user_directory import UserDirectory
from fabtrack.services.orders.order_store import OrderStore
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)


class AppState:
    """Long-lived collaborators shared by every request.

    Created in the application lifespan: ``startup`` loads the order cache,
    ``shutdown`` drops it together with every subscription.
    """

    def __init__(
        self,
        store: OrderStore,
        directory: UserDirectory,
        mirror: Optional[SheetMirror] = None,
    ):
        self.store = store
        self.directory = directory
        self.mirror = mirror
        self._unsubscribe = None

    async def startup(self) -> None:
        self._unsubscribe = self.store.subscribe(self._log_cache_size)
        await self.store.refresh()

    async def shutdown(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
        self.store.clear()
        self.directory.invalidate()

    @staticmethod
    def _log_cache_size(orders: List[Order]) -> None:
        logger.debug("Order cache now holds %d orders", len(orders))


def build_app_state() -> AppState:
    mirror = None
    if MIRROR_SPREADSHEET_ID and can_write():
        mirror = SheetMirror(MIRROR_SPREADSHEET_ID, MIRROR_RANGE)
    elif MIRROR_SPREADSHEET_ID:
        logger.warning("MIRROR_SPREADSHEET_ID set without GCP_CREDENTIALS, mirror disabled")

    directory = UserDirectory(
        DIRECTORY_SPREADSHEET_ID,
        DIRECTORY_RANGE,
        cache_seconds=DIRECTORY_CACHE_SECONDS,
    )
    store = OrderStore(AsyncSessionLocal, mirror=mirror)
    return AppState(store=store, directory=directory, mirror=mirror)


# =====================================================
# DEPENDENCIES
# =====================================================
def get_app_state(request: Request) -> AppState:
    return request.app.state.fabtrack


def get_order_store(state: AppState = Depends(get_app_state)) -> OrderStore:
    return state.store


def get_user_directory(state: AppState = Depends(get_app_state)) -> UserDirectory:
    return state.directory
