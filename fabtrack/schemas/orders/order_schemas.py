import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from fabtrack.models.enums.decision import Decision
from fabtrack.models.enums.order_stage import OrderStage
from fabtrack.models.enums.order_status import OrderStatus

# =====================================================
# STAGE DATA BLOCKS
# =====================================================

class QuotationBlock(BaseModel):
    link: str = ""
    approved: Decision = Decision.unset
    timestamp: Optional[dt.datetime] = None


class MaterialBlock(BaseModel):
    estimation: str = ""
    purchase_bill: str = ""
    loading: str = ""
    arrival: str = ""
    timestamp: Optional[dt.datetime] = None


class Production1Block(BaseModel):
    marking: str = ""
    cutting: str = ""
    edge_preparation: str = ""
    joint_welding: str = ""
    design: str = ""
    design_approved: Decision = Decision.unset
    timestamp: Optional[dt.datetime] = None


class Production2Block(BaseModel):
    full_welding: str = ""
    surface_finishing: str = ""
    inspection_needed: Decision = Decision.unset
    timestamp: Optional[dt.datetime] = None


class PaintingBlock(BaseModel):
    primer: str = ""
    painting: str = ""
    inspection_needed: Decision = Decision.unset
    timestamp: Optional[dt.datetime] = None


class DeliveryBlock(BaseModel):
    date: Optional[dt.date] = None
    confirmed: Decision = Decision.unset
    loading: str = ""
    vehicle_number: str = ""
    driver_number: str = ""
    successful: Decision = Decision.unset
    timestamp: Optional[dt.datetime] = None


STAGE_BLOCKS = {
    OrderStage.quotation: QuotationBlock,
    OrderStage.material: MaterialBlock,
    OrderStage.production1: Production1Block,
    OrderStage.production2: Production2Block,
    OrderStage.painting: PaintingBlock,
    OrderStage.delivery: DeliveryBlock,
}

# =====================================================
# ORDER ENTITY
# =====================================================

class Order(BaseModel):
    id: str
    client_id: str
    created_at: dt.datetime
    current_stage: OrderStage = OrderStage.quotation
    status: OrderStatus = OrderStatus.pending

    quotation: Optional[QuotationBlock] = None
    material: Optional[MaterialBlock] = None
    production1: Optional[Production1Block] = None
    production2: Optional[Production2Block] = None
    painting: Optional[PaintingBlock] = None
    delivery: Optional[DeliveryBlock] = None

    def block(self, stage: OrderStage) -> Optional[BaseModel]:
        if stage not in STAGE_BLOCKS:
            return None
        return getattr(self, stage.value)


class OrderOut(Order):
    client_name: Optional[str] = None


class OrderListData(BaseModel):
    total: int
    items: List[OrderOut]


class OrderSummary(BaseModel):
    total: int
    by_status: Dict[OrderStatus, int]
    by_stage: Dict[OrderStage, int]

# =====================================================
# ADMIN PAYLOADS (stage block edits)
# =====================================================

class OrderCreate(BaseModel):
    client_email: str = Field(..., min_length=3)


class QuotationUpdate(BaseModel):
    link: str = Field(..., min_length=1)


class MaterialUpdate(BaseModel):
    estimation: Optional[str] = None
    purchase_bill: Optional[str] = None
    loading: Optional[str] = None
    arrival: Optional[str] = None


class Production1Update(BaseModel):
    marking: Optional[str] = None
    cutting: Optional[str] = None
    edge_preparation: Optional[str] = None
    joint_welding: Optional[str] = None
    design: Optional[str] = None


class Production2Update(BaseModel):
    full_welding: Optional[str] = None
    surface_finishing: Optional[str] = None


class PaintingUpdate(BaseModel):
    primer: Optional[str] = None
    painting: Optional[str] = None


class DeliveryDateUpdate(BaseModel):
    date: dt.date


class DeliveryDetailsUpdate(BaseModel):
    loading: Optional[str] = None
    vehicle_number: Optional[str] = None
    driver_number: Optional[str] = None

# =====================================================
# CLIENT PAYLOADS
# =====================================================

class DecisionRequest(BaseModel):
    # value of the underlying field: true = approve / inspection needed / confirmed
    value: bool


class OrderFilters(BaseModel):
    stage: Optional[OrderStage] = None
    status: Optional[OrderStatus] = None
