"""
Order Store

Persists orders in the flat ``orders`` collection and keeps an in-memory
copy of every order it has seen. Other writers (a second instance, a manual
fix in the database) are picked up by ``poll_changes``, which the scheduler
runs on an interval: any change to the collection fingerprint triggers a full
re-fetch that replaces the cache.
"""

import inspect
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fabtrack.core.exceptions import BackingServiceFailure, OrderNotFound
from fabtrack.models.enums.order_stage import OrderStage
from fabtrack.models.enums.user_role import UserRole
from fabtrack.models.orders.order_models import OrderDocument
from fabtrack.schemas.orders.order_schemas import Order
from fabtrack.services.orders import stage_engine
from fabtrack.services.orders.order_codec import (
    decode_order,
    diff_documents,
    document_from_row,
    encode_order,
)
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)

# called inside the write transaction, before commit
AuditHook = Callable[[AsyncSession, Optional[Order], Optional[Order]], Awaitable[None]]
Listener = Callable[[List[Order]], Any]


class OrderStore:
    def __init__(
        self,
        session_factory: async_sessionmaker,
        mirror=None,
    ):
        self._session_factory = session_factory
        self._mirror = mirror
        self._cache: Dict[str, Order] = {}
        self._listeners: List[Listener] = []
        self._fingerprint: Optional[Tuple[int, Optional[datetime]]] = None

    # =====================================================
    # BOUNDARY
    # =====================================================
    @asynccontextmanager
    async def _session(self, operation: str):
        try:
            async with self._session_factory() as db:
                yield db
        except SQLAlchemyError as exc:
            logger.exception("Order store %s failed", operation)
            raise BackingServiceFailure("Order store") from exc

    # =====================================================
    # CACHE / SUBSCRIPTIONS
    # =====================================================
    def cached_orders(self) -> List[Order]:
        return sorted(self._cache.values(), key=lambda o: o.created_at, reverse=True)

    def cached(self, order_id: str) -> Optional[Order]:
        return self._cache.get(order_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self) -> None:
        snapshot = self.cached_orders()
        for listener in list(self._listeners):
            try:
                result = listener(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # a broken subscriber must not undo a committed write
                logger.exception("Order change listener failed")

    def clear(self) -> None:
        self._cache.clear()
        self._listeners.clear()
        self._fingerprint = None

    # =====================================================
    # READ
    # =====================================================
    async def fetch_all(self, role: UserRole, identity: str) -> List[Order]:
        query = select(OrderDocument).order_by(OrderDocument.created_at.desc())
        if role is not UserRole.admin:
            query = query.where(OrderDocument.client_email == identity.strip().lower())

        async with self._session("fetch") as db:
            rows = (await db.execute(query)).scalars().all()

        orders = [decode_order(row.id, document_from_row(row)) for row in rows]

        if role is UserRole.admin:
            self._cache = {o.id: o for o in orders}
            await self._notify()
        else:
            self._cache.update({o.id: o for o in orders})

        return orders

    @property
    def synced(self) -> bool:
        """True once ``refresh`` has loaded the whole collection."""
        return self._fingerprint is not None

    async def list_orders(self, role: UserRole, identity: str) -> List[Order]:
        """Orders visible to ``identity``, served from the cache once it is synced.

        The cache follows every write made through this store and is
        refreshed by ``poll_changes`` when another writer touches the table.
        """
        if not self.synced:
            return await self.fetch_all(role, identity)

        orders = self.cached_orders()
        if role is not UserRole.admin:
            wanted = identity.strip().lower()
            orders = [o for o in orders if o.client_id == wanted]
        return orders

    async def get(self, order_id: str) -> Order:
        async with self._session("get") as db:
            row = await db.get(OrderDocument, order_id)
            if row is None:
                raise OrderNotFound(order_id)
            order = decode_order(row.id, document_from_row(row))

        self._cache[order.id] = order
        return order

    # =====================================================
    # WRITE
    # =====================================================
    async def create(
        self,
        client_id: str,
        client_name: Optional[str] = None,
        audit: Optional[AuditHook] = None,
    ) -> Order:
        now = datetime.now(timezone.utc)
        order = Order(
            id=uuid.uuid4().hex,
            client_id=client_id.strip().lower(),
            created_at=now,
        )

        async with self._session("create") as db:
            db.add(OrderDocument(id=order.id, updated_at=now, **encode_order(order)))
            if audit:
                await audit(db, None, order)
            await db.commit()

        logger.info("Order created", extra={"order_id": order.id, "client": order.client_id})

        self._cache[order.id] = order
        await self._mirror_created(order, client_name)
        await self._notify()
        return order

    async def commit(
        self,
        order_id: str,
        mutate: Callable[[Order], Order],
        audit: Optional[AuditHook] = None,
    ) -> Order:
        """Load ``order_id`` fresh, apply ``mutate`` and persist the field delta.

        ``mutate`` runs against the stored state, so every precondition is
        checked at the moment of the write. If it raises, nothing is written.
        """
        async with self._session("update") as db:
            row = await db.get(OrderDocument, order_id)
            if row is None:
                raise OrderNotFound(order_id)

            before = decode_order(row.id, document_from_row(row))
            after = mutate(before)
            delta = diff_documents(encode_order(before), encode_order(after))

            if delta:
                for key, value in delta.items():
                    setattr(row, key, value)
                row.updated_at = datetime.now(timezone.utc)

            if audit:
                await audit(db, before, after)
            await db.commit()

        logger.debug(
            "Order updated",
            extra={"order_id": order_id, "fields": sorted(delta)},
        )

        self._cache[order_id] = after
        if delta:
            await self._notify()
        return after

    async def apply_field_update(
        self,
        order_id: str,
        stage: OrderStage,
        fields: Dict[str, Any],
        audit: Optional[AuditHook] = None,
    ) -> Order:
        return await self.commit(
            order_id,
            lambda order: stage_engine.update_block(order, stage, fields),
            audit,
        )

    async def delete(self, order_id: str, audit: Optional[AuditHook] = None) -> Order:
        async with self._session("delete") as db:
            row = await db.get(OrderDocument, order_id)
            if row is None:
                raise OrderNotFound(order_id)

            order = decode_order(row.id, document_from_row(row))
            await db.delete(row)
            if audit:
                await audit(db, order, None)
            await db.commit()

        logger.info("Order deleted", extra={"order_id": order_id})

        self._cache.pop(order_id, None)
        await self._notify()
        return order

    # =====================================================
    # CHANGE PROPAGATION
    # =====================================================
    async def _read_fingerprint(self, db: AsyncSession) -> Tuple[int, Optional[datetime]]:
        count, last_update = (
            await db.execute(
                select(func.count(OrderDocument.id), func.max(OrderDocument.updated_at))
            )
        ).one()
        return int(count or 0), last_update

    async def refresh(self) -> List[Order]:
        async with self._session("refresh") as db:
            rows = (
                await db.execute(select(OrderDocument).order_by(OrderDocument.created_at.desc()))
            ).scalars().all()
            fingerprint = await self._read_fingerprint(db)

        self._cache = {row.id: decode_order(row.id, document_from_row(row)) for row in rows}
        self._fingerprint = fingerprint

        logger.debug("Order cache refreshed", extra={"orders": len(self._cache)})

        await self._notify()
        return self.cached_orders()

    async def poll_changes(self) -> bool:
        async with self._session("poll") as db:
            fingerprint = await self._read_fingerprint(db)

        if fingerprint == self._fingerprint:
            return False

        logger.info("Order collection changed, refreshing cache")
        await self.refresh()
        return True

    # =====================================================
    # SPREADSHEET MIRROR (best effort)
    # =====================================================
    async def _mirror_created(self, order: Order, client_name: Optional[str]) -> None:
        if self._mirror is None:
            return
        try:
            await self._mirror.append_order(order, client_name)
        except Exception as e:
            logger.warning(
                f"Failed to mirror order {order.id} to spreadsheet: {str(e)} - order kept"
            )
