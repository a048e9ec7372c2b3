"""
Stage-transition rules for fabrication orders.

Every function here is pure: it takes an ``Order`` and returns a new
``Order`` (or a verdict) without touching storage. The order store applies
the result and persists the field delta.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fabtrack.constants.error_codes import ErrorCode
from fabtrack.core.exceptions import AppException, PreconditionNotMet
from fabtrack.models.enums.decision import Decision
from fabtrack.models.enums.decision_kind import DecisionKind
from fabtrack.models.enums.order_stage import OrderStage, STAGE_SEQUENCE
from fabtrack.models.enums.order_status import OrderStatus
from fabtrack.schemas.orders.order_schemas import Order, STAGE_BLOCKS


# =====================================================
# SEQUENCE
# =====================================================
def next_stage(stage: OrderStage) -> OrderStage:
    if stage is OrderStage.completed:
        raise PreconditionNotMet("Order is already completed")
    return STAGE_SEQUENCE[stage.position + 1]


# =====================================================
# ADVANCE PRECONDITIONS
# =====================================================
def _quotation_ready(order: Order) -> bool:
    return order.quotation is not None and order.quotation.approved is Decision.approved


def _material_ready(order: Order) -> bool:
    m = order.material
    return m is not None and all(
        (value or "").strip()
        for value in (m.estimation, m.purchase_bill, m.loading, m.arrival)
    )


def _design_ready(order: Order) -> bool:
    return (
        order.production1 is not None
        and order.production1.design_approved is Decision.approved
    )


# unset is not enough: the client has to decline the inspection explicitly
def _production2_ready(order: Order) -> bool:
    return (
        order.production2 is not None
        and order.production2.inspection_needed is Decision.rejected
    )


def _painting_ready(order: Order) -> bool:
    return (
        order.painting is not None
        and order.painting.inspection_needed is Decision.rejected
    )


def _delivery_ready(order: Order) -> bool:
    return order.delivery is not None and order.delivery.successful is Decision.approved


ADVANCE_RULES: Dict[OrderStage, Callable[[Order], bool]] = {
    OrderStage.quotation: _quotation_ready,
    OrderStage.material: _material_ready,
    OrderStage.production1: _design_ready,
    OrderStage.production2: _production2_ready,
    OrderStage.painting: _painting_ready,
    OrderStage.delivery: _delivery_ready,
}

WAITING_FOR = {
    OrderStage.quotation: "client approval of the quotation",
    OrderStage.material: "all material details",
    OrderStage.production1: "client approval of the design",
    OrderStage.production2: "client decision to skip inspection",
    OrderStage.painting: "client decision to skip painting inspection",
    OrderStage.delivery: "client confirmation of a successful delivery",
}


def can_advance(order: Order, stage: Optional[OrderStage] = None) -> bool:
    """Whether ``order`` may leave ``stage`` (defaults to its current stage)."""
    stage = stage or order.current_stage
    rule = ADVANCE_RULES.get(stage)
    return bool(rule and rule(order))


def advance(order: Order) -> Order:
    stage = order.current_stage

    if stage is OrderStage.completed:
        raise PreconditionNotMet("Order is already completed")

    if not can_advance(order, stage):
        raise PreconditionNotMet(
            f"Cannot proceed - waiting for {WAITING_FOR[stage]}",
            {"stage": stage.value},
        )

    target = next_stage(stage)
    status = (
        OrderStatus.completed
        if target is OrderStage.completed
        else OrderStatus.in_progress
    )
    return order.model_copy(update={"current_stage": target, "status": status})


# =====================================================
# ADMIN BLOCK EDITS
# =====================================================
def fresh_timestamp(previous: Optional[datetime], now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _ensure_reached(order: Order, stage: OrderStage) -> None:
    if stage not in STAGE_BLOCKS:
        raise PreconditionNotMet(f"Stage {stage.value} has no editable data")
    if stage.position > order.current_stage.position:
        raise PreconditionNotMet(
            f"Order has not reached the {stage.value} stage yet",
            {"stage": order.current_stage.value, "requested": stage.value},
        )


# changing the subject of a client question clears its answer
ANSWER_RESETS = {
    OrderStage.quotation: ("link", "approved"),
    OrderStage.delivery: ("date", "confirmed"),
}


def update_block(
    order: Order,
    stage: OrderStage,
    fields: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Order:
    """Merge admin-supplied ``fields`` into the block of ``stage``.

    ``None`` values are ignored so a partial payload keeps the other fields.
    The block timestamp always moves forward.
    """
    _ensure_reached(order, stage)

    block_cls = STAGE_BLOCKS[stage]
    current = order.block(stage) or block_cls()
    changes = {k: v for k, v in fields.items() if v is not None}

    unknown = set(changes) - set(block_cls.model_fields)
    if unknown:
        raise AppException(
            400,
            f"Unknown {stage.value} fields: {', '.join(sorted(unknown))}",
            ErrorCode.VALIDATION_ERROR,
            {"fields": sorted(unknown)},
        )

    reset = ANSWER_RESETS.get(stage)
    if reset:
        field, answer = reset
        if field in changes and changes[field] != getattr(current, field):
            # the answer can only be given again while the order sits in this stage
            if stage is not order.current_stage:
                raise PreconditionNotMet(
                    f"Cannot change the {stage.value} {field} - the order has moved past that stage",
                    {"stage": order.current_stage.value, "requested": stage.value},
                )
            changes[answer] = Decision.unset

    if stage is OrderStage.delivery:
        details = {"loading", "vehicle_number", "driver_number"} & set(changes)
        confirmed = changes.get("confirmed", current.confirmed)
        if details and confirmed is not Decision.approved:
            raise PreconditionNotMet(
                "Cannot add delivery details - waiting for client to confirm the delivery date",
                {"stage": stage.value},
            )

    changes["timestamp"] = fresh_timestamp(current.timestamp, now)
    return order.model_copy(update={stage.value: current.model_copy(update=changes)})


# =====================================================
# CLIENT DECISIONS
# =====================================================
DECISION_TARGETS = {
    DecisionKind.quotation_approval: (OrderStage.quotation, "approved"),
    DecisionKind.design_approval: (OrderStage.production1, "design_approved"),
    DecisionKind.production_inspection: (OrderStage.production2, "inspection_needed"),
    DecisionKind.painting_inspection: (OrderStage.painting, "inspection_needed"),
    DecisionKind.delivery_date_confirmation: (OrderStage.delivery, "confirmed"),
    DecisionKind.delivery_receipt: (OrderStage.delivery, "successful"),
}

# the field value that lets the workflow move on
PROCEED_VALUES = {
    DecisionKind.quotation_approval: True,
    DecisionKind.design_approval: True,
    DecisionKind.production_inspection: False,
    DecisionKind.painting_inspection: False,
    DecisionKind.delivery_date_confirmation: True,
    DecisionKind.delivery_receipt: True,
}

AUTO_ADVANCE = {
    DecisionKind.quotation_approval,
    DecisionKind.design_approval,
    DecisionKind.production_inspection,
    DecisionKind.painting_inspection,
}


def proceed_value(kind: DecisionKind) -> bool:
    return PROCEED_VALUES[kind]


def decision_stage(kind: DecisionKind) -> OrderStage:
    return DECISION_TARGETS[kind][0]


def apply_decision(order: Order, kind: DecisionKind, value: bool) -> Order:
    """Record a client answer and auto-advance when it lets the order proceed."""
    stage, field = DECISION_TARGETS[kind]

    if order.current_stage is not stage:
        raise PreconditionNotMet(
            f"Order is in the {order.current_stage.value} stage, not {stage.value}",
            {"stage": order.current_stage.value, "decision": kind.value},
        )

    block = order.block(stage)
    if block is None:
        raise PreconditionNotMet(
            f"Nothing to decide yet - {stage.value} details have not been provided",
            {"stage": stage.value, "decision": kind.value},
        )

    if kind is DecisionKind.delivery_date_confirmation and block.date is None:
        raise PreconditionNotMet("Delivery date has not been scheduled yet")

    if kind is DecisionKind.delivery_receipt and block.confirmed is not Decision.approved:
        raise PreconditionNotMet("Delivery date has not been confirmed yet")

    updated = order.model_copy(
        update={stage.value: block.model_copy(update={field: Decision.from_bool(value)})}
    )

    if kind in AUTO_ADVANCE and value == PROCEED_VALUES[kind]:
        updated = advance(updated)

    return updated
