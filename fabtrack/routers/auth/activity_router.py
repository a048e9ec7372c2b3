from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fabtrack.core.db import get_db
from fabtrack.schemas.auth.activity_schemas import (
    OrderActivityFilters,
    OrderActivityListData,
)
from fabtrack.services.auth.activity_service import list_order_activities
from fabtrack.utils.check_roles import require_role
from fabtrack.utils.response import APIResponse, success_response
from fabtrack.utils.logger import get_logger

router = APIRouter(prefix="/activities", tags=["Order Activities"])
logger = get_logger(__name__)


@router.get("", response_model=APIResponse[OrderActivityListData])
async def list_order_activities_api(
    filters: OrderActivityFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),
):
    logger.info(
        "List order activities requested",
        extra=filters.model_dump(exclude_none=True),
    )

    result = await list_order_activities(db=db, filters=filters)

    return success_response(
        "Order activities fetched successfully",
        result,
    )
