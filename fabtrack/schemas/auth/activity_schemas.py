# fabtrack/schemas/auth/activity_schemas.py

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from fastapi import Query


class OrderActivityFilters(BaseModel):
    order_id: Optional[str] = Query(None)
    actor_email: Optional[str] = Query(None)
    overrides_only: bool = Query(False)

    page: int = Query(1, ge=1)
    page_size: int = Query(20, ge=1, le=100)

    sort_by: str = Query("created_at")
    sort_order: str = Query("desc")


class OrderActivityOut(BaseModel):
    id: int
    actor_email: str
    actor_role: str
    order_id: Optional[str]
    code: str
    message: str
    is_override: bool
    created_at: datetime

    class Config:
        from_attributes = True


class OrderActivityListData(BaseModel):
    total: int
    items: List[OrderActivityOut]
