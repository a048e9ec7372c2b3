from collections import Counter
from typing import Dict, Optional

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fabtrack.constants.activity_codes import ActivityCode
from fabtrack.constants.error_codes import ErrorCode
from fabtrack.core.exceptions import AppException, AuthorizationFailure, BackingServiceFailure
from fabtrack.models.enums.decision_kind import DecisionKind, DecisionOrigin
from fabtrack.models.enums.order_stage import OrderStage
from fabtrack.models.enums.order_status import OrderStatus
from fabtrack.models.enums.user_role import UserRole
from fabtrack.models.users.user_models import UserSession
from fabtrack.schemas.orders.order_schemas import (
    Order,
    OrderCreate,
    OrderFilters,
    OrderListData,
    OrderOut,
    OrderSummary,
)
from fabtrack.services.directory.user_directory import UserDirectory
from fabtrack.services.orders import stage_engine
from fabtrack.services.orders.order_store import OrderStore
from fabtrack.utils.activity_helpers import emit_activity
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# HELPERS
# =====================================================
def _is_admin(user: UserSession) -> bool:
    return user.role == UserRole.admin.value


def _ensure_access(order: Order, user: UserSession) -> None:
    if _is_admin(user):
        return
    if order.client_id != user.email.lower():
        logger.warning(
            "Client tried to reach another client's order",
            extra={"order_id": order.id, "email": user.email},
        )
        raise AuthorizationFailure(
            "You do not have access to this order",
            ErrorCode.ORDER_ACCESS_DENIED,
        )


async def _client_names(directory: UserDirectory) -> Dict[str, str]:
    # names are cosmetic, a directory outage must not hide orders
    try:
        return await directory.client_names()
    except BackingServiceFailure:
        logger.warning("Client names unavailable, listing orders without them")
        return {}


def _map_order(order: Order, names: Optional[Dict[str, str]] = None) -> OrderOut:
    return OrderOut(
        **order.model_dump(),
        client_name=(names or {}).get(order.client_id),
    )


def _stage_change(before: Order, after: Order) -> str:
    if before.current_stage is after.current_stage:
        return f"stage stays {after.current_stage.value}"
    return f"moved to {after.current_stage.value}"


# =====================================================
# READ
# =====================================================
async def list_orders(
    store: OrderStore,
    directory: UserDirectory,
    user: UserSession,
    filters: OrderFilters,
) -> OrderListData:
    role = UserRole(user.role)
    orders = await store.list_orders(role, user.email)

    if filters.stage:
        orders = [o for o in orders if o.current_stage is filters.stage]
    if filters.status:
        orders = [o for o in orders if o.status is filters.status]

    names = await _client_names(directory) if role is UserRole.admin else {}

    return OrderListData(
        total=len(orders),
        items=[_map_order(o, names) for o in orders],
    )


async def order_summary(store: OrderStore, user: UserSession) -> OrderSummary:
    orders = await store.list_orders(UserRole(user.role), user.email)
    by_status = Counter(o.status for o in orders)
    by_stage = Counter(o.current_stage for o in orders)

    return OrderSummary(
        total=len(orders),
        by_status={s: by_status.get(s, 0) for s in OrderStatus},
        by_stage={s: by_stage.get(s, 0) for s in OrderStage},
    )


async def get_order(
    store: OrderStore,
    directory: UserDirectory,
    user: UserSession,
    order_id: str,
) -> OrderOut:
    order = await store.get(order_id)
    _ensure_access(order, user)

    names = await _client_names(directory) if _is_admin(user) else {}
    return _map_order(order, names)


# =====================================================
# CREATE / DELETE
# =====================================================
async def create_order(
    store: OrderStore,
    directory: UserDirectory,
    payload: OrderCreate,
    user: UserSession,
) -> OrderOut:
    client = await directory.find_client(payload.client_email)
    if not client:
        raise AppException(
            404,
            "Client not found in the directory",
            ErrorCode.CLIENT_NOT_FOUND,
            {"client_email": payload.client_email},
        )

    async def audit(db: AsyncSession, _before, order: Order):
        await emit_activity(
            db=db,
            actor_email=user.email,
            actor_role=user.role,
            code=ActivityCode.CREATE_ORDER,
            order_id=order.id,
            client_email=order.client_id,
        )

    order = await store.create(client.email, client.name, audit=audit)
    return _map_order(order, {order.client_id: client.name})


async def delete_order(store: OrderStore, order_id: str, user: UserSession) -> OrderOut:
    async def audit(db: AsyncSession, order: Order, _after):
        await emit_activity(
            db=db,
            actor_email=user.email,
            actor_role=user.role,
            code=ActivityCode.DELETE_ORDER,
            order_id=order.id,
        )

    order = await store.delete(order_id, audit=audit)
    return _map_order(order)


# =====================================================
# ADMIN STAGE DATA
# =====================================================
async def update_stage_data(
    store: OrderStore,
    order_id: str,
    stage: OrderStage,
    payload: BaseModel,
    user: UserSession,
) -> OrderOut:
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise AppException(400, "No fields to update", ErrorCode.VALIDATION_ERROR)

    async def audit(db: AsyncSession, before: Order, after: Order):
        await emit_activity(
            db=db,
            actor_email=user.email,
            actor_role=user.role,
            code=ActivityCode.UPDATE_STAGE_DATA,
            order_id=after.id,
            stage=stage.value,
            changes=", ".join(sorted(fields)),
        )

    order = await store.apply_field_update(order_id, stage, fields, audit=audit)
    return _map_order(order)


async def advance_order(store: OrderStore, order_id: str, user: UserSession) -> OrderOut:
    async def audit(db: AsyncSession, before: Order, after: Order):
        await emit_activity(
            db=db,
            actor_email=user.email,
            actor_role=user.role,
            code=ActivityCode.ADVANCE_STAGE,
            order_id=after.id,
            from_stage=before.current_stage.value,
            to_stage=after.current_stage.value,
        )

    order = await store.commit(order_id, stage_engine.advance, audit=audit)

    logger.info(
        "Order advanced",
        extra={"order_id": order_id, "stage": order.current_stage.value},
    )
    return _map_order(order)


# =====================================================
# CLIENT DECISIONS / ADMIN OVERRIDES
# =====================================================
async def record_decision(
    store: OrderStore,
    order_id: str,
    kind: DecisionKind,
    user: UserSession,
    origin: DecisionOrigin,
    value: Optional[bool] = None,
) -> OrderOut:
    """Apply a client decision, either from the client or forced by the admin.

    An override always answers with the value that lets the order proceed
    and is written to the audit trail flagged as such.
    """
    if origin is DecisionOrigin.admin_override:
        if not _is_admin(user):
            raise AuthorizationFailure("Only the administrator can override client decisions")
        value = stage_engine.proceed_value(kind)
    elif _is_admin(user):
        raise AuthorizationFailure(
            "Client decisions must be made by the client. Use an override instead."
        )

    if value is None:
        raise AppException(400, "Decision value is required", ErrorCode.VALIDATION_ERROR)

    def mutate(order: Order) -> Order:
        _ensure_access(order, user)
        return stage_engine.apply_decision(order, kind, value)

    is_override = origin is DecisionOrigin.admin_override

    async def audit(db: AsyncSession, before: Order, after: Order):
        await emit_activity(
            db=db,
            actor_email=user.email,
            actor_role=user.role,
            code=ActivityCode.ADMIN_OVERRIDE if is_override else ActivityCode.CLIENT_DECISION,
            order_id=after.id,
            is_override=is_override,
            decision=kind.value,
            value=str(value).lower(),
            stage_change=_stage_change(before, after),
        )

    order = await store.commit(order_id, mutate, audit=audit)

    logger.info(
        "Decision recorded",
        extra={
            "order_id": order_id,
            "decision": kind.value,
            "value": value,
            "origin": origin.value,
        },
    )
    return _map_order(order)
