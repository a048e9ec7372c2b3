from fastapi import APIRouter, Depends

from fabtrack.core.state import get_order_store, get_user_directory
from fabtrack.models.enums.decision_kind import DecisionKind, DecisionOrigin
from fabtrack.models.enums.order_stage import OrderStage
from fabtrack.schemas.orders.order_schemas import (
    DecisionRequest,
    DeliveryDateUpdate,
    DeliveryDetailsUpdate,
    MaterialUpdate,
    OrderCreate,
    OrderFilters,
    OrderListData,
    OrderOut,
    OrderSummary,
    PaintingUpdate,
    Production1Update,
    Production2Update,
    QuotationUpdate,
)
from fabtrack.services.directory.user_directory import UserDirectory
from fabtrack.services.orders.order_service import (
    advance_order,
    create_order,
    delete_order,
    get_order,
    list_orders,
    order_summary,
    record_decision,
    update_stage_data,
)
from fabtrack.services.orders.order_store import OrderStore
from fabtrack.utils.check_roles import require_role
from fabtrack.utils.response import APIResponse, ERROR_RESPONSES, success_response

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    responses=ERROR_RESPONSES,
)

DECISION_MESSAGES = {
    (DecisionKind.quotation_approval, True): "Quotation approved",
    (DecisionKind.quotation_approval, False): "Quotation rejected",
    (DecisionKind.design_approval, True): "Design approved",
    (DecisionKind.design_approval, False): "Design rejected",
    (DecisionKind.production_inspection, True): "Inspection requested",
    (DecisionKind.production_inspection, False): "Proceeding without inspection",
    (DecisionKind.painting_inspection, True): "Painting inspection requested",
    (DecisionKind.painting_inspection, False): "Proceeding without painting inspection",
    (DecisionKind.delivery_date_confirmation, True): "Delivery date confirmed",
    (DecisionKind.delivery_date_confirmation, False): "Delivery date rejected",
    (DecisionKind.delivery_receipt, True): "Order received successfully",
    (DecisionKind.delivery_receipt, False): "Order receipt issues reported",
}


# =====================================================
# READ
# =====================================================
@router.get(
    "",
    response_model=APIResponse[OrderListData],
)
async def list_orders_api(
    filters: OrderFilters = Depends(),
    store: OrderStore = Depends(get_order_store),
    directory: UserDirectory = Depends(get_user_directory),
    user=Depends(require_role(["admin", "client"])),
):
    data = await list_orders(store, directory, user, filters)
    return success_response("Orders retrieved successfully", data)


@router.get(
    "/summary",
    response_model=APIResponse[OrderSummary],
)
async def order_summary_api(
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin", "client"])),
):
    data = await order_summary(store, user)
    return success_response("Order summary retrieved successfully", data)


@router.get(
    "/{order_id}",
    response_model=APIResponse[OrderOut],
)
async def get_order_api(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    directory: UserDirectory = Depends(get_user_directory),
    user=Depends(require_role(["admin", "client"])),
):
    order = await get_order(store, directory, user, order_id)
    return success_response("Order retrieved successfully", order)


# =====================================================
# CREATE / DELETE (admin)
# =====================================================
@router.post(
    "",
    response_model=APIResponse[OrderOut],
    status_code=201,
)
async def create_order_api(
    payload: OrderCreate,
    store: OrderStore = Depends(get_order_store),
    directory: UserDirectory = Depends(get_user_directory),
    user=Depends(require_role(["admin"])),
):
    order = await create_order(store, directory, payload, user)
    return success_response("Order created successfully", order)


@router.delete(
    "/{order_id}",
    response_model=APIResponse[OrderOut],
)
async def delete_order_api(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await delete_order(store, order_id, user)
    return success_response("Order deleted successfully", order)


# =====================================================
# STAGE DATA (admin)
# =====================================================
@router.put("/{order_id}/quotation", response_model=APIResponse[OrderOut])
async def update_quotation_api(
    order_id: str,
    payload: QuotationUpdate,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await update_stage_data(store, order_id, OrderStage.quotation, payload, user)
    return success_response("Quotation updated", order)


@router.put("/{order_id}/material", response_model=APIResponse[OrderOut])
async def update_material_api(
    order_id: str,
    payload: MaterialUpdate,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await update_stage_data(store, order_id, OrderStage.material, payload, user)
    return success_response("Material information updated", order)


@router.put("/{order_id}/production1", response_model=APIResponse[OrderOut])
async def update_production1_api(
    order_id: str,
    payload: Production1Update,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await update_stage_data(store, order_id, OrderStage.production1, payload, user)
    return success_response("Production information updated", order)


@router.put("/{order_id}/production2", response_model=APIResponse[OrderOut])
async def update_production2_api(
    order_id: str,
    payload: Production2Update,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await update_stage_data(store, order_id, OrderStage.production2, payload, user)
    return success_response("Production information updated", order)


@router.put("/{order_id}/painting", response_model=APIResponse[OrderOut])
async def update_painting_api(
    order_id: str,
    payload: PaintingUpdate,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await update_stage_data(store, order_id, OrderStage.painting, payload, user)
    return success_response("Painting information updated", order)


@router.put("/{order_id}/delivery/date", response_model=APIResponse[OrderOut])
async def update_delivery_date_api(
    order_id: str,
    payload: DeliveryDateUpdate,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await update_stage_data(store, order_id, OrderStage.delivery, payload, user)
    return success_response("Delivery date updated", order)


@router.put("/{order_id}/delivery/details", response_model=APIResponse[OrderOut])
async def update_delivery_details_api(
    order_id: str,
    payload: DeliveryDetailsUpdate,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await update_stage_data(store, order_id, OrderStage.delivery, payload, user)
    return success_response("Delivery details updated", order)


@router.post("/{order_id}/advance", response_model=APIResponse[OrderOut])
async def advance_order_api(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await advance_order(store, order_id, user)
    return success_response(f"Moved to {order.current_stage.value} stage", order)


# =====================================================
# DECISIONS (client) / OVERRIDES (admin)
# =====================================================
@router.post("/{order_id}/decisions/{kind}", response_model=APIResponse[OrderOut])
async def record_decision_api(
    order_id: str,
    kind: DecisionKind,
    payload: DecisionRequest,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["client"])),
):
    order = await record_decision(
        store,
        order_id,
        kind,
        user,
        DecisionOrigin.client,
        payload.value,
    )
    return success_response(DECISION_MESSAGES[(kind, payload.value)], order)


@router.post("/{order_id}/overrides/{kind}", response_model=APIResponse[OrderOut])
async def override_decision_api(
    order_id: str,
    kind: DecisionKind,
    store: OrderStore = Depends(get_order_store),
    user=Depends(require_role(["admin"])),
):
    order = await record_decision(
        store,
        order_id,
        kind,
        user,
        DecisionOrigin.admin_override,
    )
    return success_response(f"Admin override: {kind.value.replace('_', ' ')} recorded", order)
