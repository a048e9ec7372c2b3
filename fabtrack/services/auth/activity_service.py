# fabtrack/services/auth/activity_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc, asc

from fabtrack.models.support.activity_models import OrderActivity
from fabtrack.schemas.auth.activity_schemas import (
    OrderActivityOut,
    OrderActivityFilters,
    OrderActivityListData,
)
from fabtrack.core.exceptions import AppException
from fabtrack.constants.error_codes import ErrorCode
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)

ALLOWED_SORT_FIELDS = {
    "created_at": OrderActivity.created_at,
    "actor_email": OrderActivity.actor_email,
}


async def list_order_activities(
    *,
    db: AsyncSession,
    filters: OrderActivityFilters,
) -> OrderActivityListData:
    sort_column = ALLOWED_SORT_FIELDS.get(filters.sort_by)
    if sort_column is None:
        raise AppException(
            400,
            "Invalid sort field",
            ErrorCode.VALIDATION_ERROR,
        )

    # -------------------------
    # Filters
    # -------------------------
    conditions = []
    if filters.order_id:
        conditions.append(OrderActivity.order_id == filters.order_id)
    if filters.actor_email:
        conditions.append(OrderActivity.actor_email.ilike(f"%{filters.actor_email}%"))
    if filters.overrides_only:
        conditions.append(OrderActivity.is_override.is_(True))

    query = select(OrderActivity).where(*conditions)
    count_query = select(func.count(OrderActivity.id)).where(*conditions)

    # -------------------------
    # Sorting + pagination
    # -------------------------
    order_fn = desc if filters.sort_order == "desc" else asc
    query = (
        query.order_by(order_fn(sort_column), order_fn(OrderActivity.id))
        .limit(filters.page_size)
        .offset((filters.page - 1) * filters.page_size)
    )

    total = await db.scalar(count_query)
    activities = (await db.execute(query)).scalars().all()

    logger.info(
        "Order activities fetched",
        extra={
            "total": total,
            "page": filters.page,
            "page_size": filters.page_size,
        },
    )

    return OrderActivityListData(
        total=total or 0,
        items=[OrderActivityOut.model_validate(a) for a in activities],
    )
