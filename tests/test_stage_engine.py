from datetime import date, datetime, timedelta, timezone

import pytest

from fabtrack.constants.error_codes import ErrorCode
from fabtrack.core.exceptions import AppException, PreconditionNotMet
from fabtrack.models.enums.decision import Decision
from fabtrack.models.enums.decision_kind import DecisionKind
from fabtrack.models.enums.order_stage import OrderStage
from fabtrack.models.enums.order_status import OrderStatus
from fabtrack.schemas.orders.order_schemas import (
    DeliveryBlock,
    MaterialBlock,
    Order,
    PaintingBlock,
    Production1Block,
    Production2Block,
    QuotationBlock,
)
from fabtrack.services.orders import stage_engine

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_order(stage=OrderStage.quotation, **blocks):
    return Order(
        id="o1",
        client_id="alice@example.com",
        created_at=T0,
        current_stage=stage,
        status=OrderStatus.pending if stage is OrderStage.quotation else OrderStatus.in_progress,
        **blocks,
    )


def full_material():
    return MaterialBlock(
        estimation="2t steel",
        purchase_bill="PB-7",
        loading="truck 1",
        arrival="2024-03-04",
        timestamp=T0,
    )


# --------------------
# Sequence
# --------------------


def test_next_stage_follows_fixed_sequence():
    assert stage_engine.next_stage(OrderStage.quotation) is OrderStage.material
    assert stage_engine.next_stage(OrderStage.painting) is OrderStage.delivery
    assert stage_engine.next_stage(OrderStage.delivery) is OrderStage.completed


def test_next_stage_of_completed_is_rejected():
    with pytest.raises(PreconditionNotMet):
        stage_engine.next_stage(OrderStage.completed)


# --------------------
# Advance
# --------------------


def test_quotation_requires_approval():
    order = make_order(quotation=QuotationBlock(link="https://q/1", timestamp=T0))
    assert not stage_engine.can_advance(order)

    with pytest.raises(PreconditionNotMet) as exc:
        stage_engine.advance(order)
    assert "Cannot proceed - waiting for" in exc.value.detail
    assert exc.value.status_code == 409


def test_quotation_rejection_blocks_advance():
    order = make_order(
        quotation=QuotationBlock(link="https://q/1", approved=Decision.rejected, timestamp=T0)
    )
    assert not stage_engine.can_advance(order)


def test_advance_moves_one_stage_and_starts_progress():
    order = make_order(
        quotation=QuotationBlock(link="https://q/1", approved=Decision.approved, timestamp=T0)
    )
    advanced = stage_engine.advance(order)

    assert advanced.current_stage is OrderStage.material
    assert advanced.status is OrderStatus.in_progress
    assert order.current_stage is OrderStage.quotation


def test_material_needs_all_four_fields():
    partial = full_material().model_copy(update={"arrival": "  "})
    assert not stage_engine.can_advance(make_order(OrderStage.material, material=partial))
    assert stage_engine.can_advance(make_order(OrderStage.material, material=full_material()))


def test_inspection_stages_need_explicit_no():
    unset = make_order(
        OrderStage.production2,
        production2=Production2Block(full_welding="done", timestamp=T0),
    )
    needed = make_order(
        OrderStage.production2,
        production2=Production2Block(inspection_needed=Decision.approved, timestamp=T0),
    )
    declined = make_order(
        OrderStage.production2,
        production2=Production2Block(inspection_needed=Decision.rejected, timestamp=T0),
    )

    assert not stage_engine.can_advance(unset)
    assert not stage_engine.can_advance(needed)
    assert stage_engine.can_advance(declined)


def test_delivery_advance_completes_order():
    order = make_order(
        OrderStage.delivery,
        delivery=DeliveryBlock(
            date=date(2024, 4, 1),
            confirmed=Decision.approved,
            successful=Decision.approved,
            timestamp=T0,
        ),
    )
    done = stage_engine.advance(order)

    assert done.current_stage is OrderStage.completed
    assert done.status is OrderStatus.completed

    with pytest.raises(PreconditionNotMet):
        stage_engine.advance(done)


# --------------------
# Block edits
# --------------------


def test_update_block_creates_block_and_stamps_it():
    order = stage_engine.update_block(make_order(), OrderStage.quotation, {"link": "https://q/1"}, now=T0)

    assert order.quotation.link == "https://q/1"
    assert order.quotation.approved is Decision.unset
    assert order.quotation.timestamp == T0


def test_update_block_ignores_none_values():
    order = make_order(OrderStage.material, material=full_material())
    updated = stage_engine.update_block(
        order, OrderStage.material, {"loading": "truck 2", "arrival": None}
    )

    assert updated.material.loading == "truck 2"
    assert updated.material.arrival == "2024-03-04"


def test_update_block_timestamp_strictly_increases():
    order = make_order(OrderStage.material, material=full_material())
    earlier = T0 - timedelta(hours=1)

    updated = stage_engine.update_block(order, OrderStage.material, {"loading": "x"}, now=earlier)

    assert updated.material.timestamp > T0


def test_changing_quotation_link_clears_previous_answer():
    order = make_order(
        quotation=QuotationBlock(link="https://q/1", approved=Decision.rejected, timestamp=T0)
    )

    same = stage_engine.update_block(order, OrderStage.quotation, {"link": "https://q/1"})
    changed = stage_engine.update_block(order, OrderStage.quotation, {"link": "https://q/2"})

    assert same.quotation.approved is Decision.rejected
    assert changed.quotation.approved is Decision.unset


def test_future_stage_cannot_be_edited():
    with pytest.raises(PreconditionNotMet):
        stage_engine.update_block(make_order(), OrderStage.painting, {"primer": "zinc"})


def test_unknown_field_is_rejected():
    with pytest.raises(AppException) as exc:
        stage_engine.update_block(make_order(), OrderStage.quotation, {"colour": "red"})
    assert exc.value.status_code == 400
    assert exc.value.error_code is ErrorCode.VALIDATION_ERROR


def test_delivery_details_wait_for_confirmed_date():
    order = make_order(
        OrderStage.delivery,
        delivery=DeliveryBlock(date=date(2024, 4, 1), timestamp=T0),
    )
    with pytest.raises(PreconditionNotMet):
        stage_engine.update_block(order, OrderStage.delivery, {"vehicle_number": "KA-01"})

    confirmed = stage_engine.apply_decision(order, DecisionKind.delivery_date_confirmation, True)
    updated = stage_engine.update_block(confirmed, OrderStage.delivery, {"vehicle_number": "KA-01"})
    assert updated.delivery.vehicle_number == "KA-01"


def test_rescheduling_delivery_resets_confirmation():
    order = make_order(
        OrderStage.delivery,
        delivery=DeliveryBlock(date=date(2024, 4, 1), confirmed=Decision.approved, timestamp=T0),
    )
    moved = stage_engine.update_block(order, OrderStage.delivery, {"date": date(2024, 4, 8)})

    assert moved.delivery.confirmed is Decision.unset


# --------------------
# Decisions
# --------------------


def test_quotation_approval_auto_advances():
    order = make_order(quotation=QuotationBlock(link="https://q/1", timestamp=T0))
    approved = stage_engine.apply_decision(order, DecisionKind.quotation_approval, True)

    assert approved.quotation.approved is Decision.approved
    assert approved.current_stage is OrderStage.material
    assert approved.status is OrderStatus.in_progress


def test_quotation_rejection_stays_in_stage():
    order = make_order(quotation=QuotationBlock(link="https://q/1", timestamp=T0))
    rejected = stage_engine.apply_decision(order, DecisionKind.quotation_approval, False)

    assert rejected.quotation.approved is Decision.rejected
    assert rejected.current_stage is OrderStage.quotation


def test_declining_inspection_auto_advances():
    order = make_order(
        OrderStage.painting,
        painting=PaintingBlock(primer="zinc", painting="grey", timestamp=T0),
    )
    declined = stage_engine.apply_decision(order, DecisionKind.painting_inspection, False)
    requested = stage_engine.apply_decision(order, DecisionKind.painting_inspection, True)

    assert declined.current_stage is OrderStage.delivery
    assert requested.current_stage is OrderStage.painting
    assert requested.painting.inspection_needed is Decision.approved


def test_design_approval_needs_production1_stage():
    order = make_order(
        OrderStage.material,
        material=full_material(),
        production1=Production1Block(design="https://d/1", timestamp=T0),
    )
    with pytest.raises(PreconditionNotMet):
        stage_engine.apply_decision(order, DecisionKind.design_approval, True)


def test_decision_without_block_is_rejected():
    with pytest.raises(PreconditionNotMet):
        stage_engine.apply_decision(make_order(), DecisionKind.quotation_approval, True)


def test_delivery_receipt_does_not_auto_complete():
    order = make_order(
        OrderStage.delivery,
        delivery=DeliveryBlock(date=date(2024, 4, 1), confirmed=Decision.approved, timestamp=T0),
    )
    received = stage_engine.apply_decision(order, DecisionKind.delivery_receipt, True)

    assert received.delivery.successful is Decision.approved
    assert received.current_stage is OrderStage.delivery
    assert stage_engine.can_advance(received)


def test_receipt_before_confirmation_is_rejected():
    order = make_order(
        OrderStage.delivery,
        delivery=DeliveryBlock(date=date(2024, 4, 1), timestamp=T0),
    )
    with pytest.raises(PreconditionNotMet):
        stage_engine.apply_decision(order, DecisionKind.delivery_receipt, True)


def test_proceed_values():
    assert stage_engine.proceed_value(DecisionKind.quotation_approval) is True
    assert stage_engine.proceed_value(DecisionKind.production_inspection) is False
    assert stage_engine.proceed_value(DecisionKind.painting_inspection) is False
    assert stage_engine.decision_stage(DecisionKind.delivery_receipt) is OrderStage.delivery


def test_delivery_success_after_reported_problem():
    order = make_order(
        OrderStage.delivery,
        delivery=DeliveryBlock(date=date(2024, 4, 1), confirmed=Decision.approved, timestamp=T0),
    )
    problem = stage_engine.apply_decision(order, DecisionKind.delivery_receipt, False)
    assert not stage_engine.can_advance(problem)

    fixed = stage_engine.apply_decision(problem, DecisionKind.delivery_receipt, True)
    assert stage_engine.advance(fixed).status is OrderStatus.completed


def test_passed_quotation_link_is_locked():
    order = stage_engine.update_block(make_order(), OrderStage.quotation, {"link": "https://q/1"})
    approved = stage_engine.apply_decision(order, DecisionKind.quotation_approval, True)
    assert approved.current_stage is OrderStage.material

    with pytest.raises(PreconditionNotMet):
        stage_engine.update_block(approved, OrderStage.quotation, {"link": "https://q/2"})

    same_link = stage_engine.update_block(approved, OrderStage.quotation, {"link": "https://q/1"})
    assert same_link.quotation.approved is Decision.approved


def test_passed_stage_text_fields_stay_editable():
    order = make_order(OrderStage.production1, material=full_material())

    updated = stage_engine.update_block(order, OrderStage.material, {"loading": "truck 2"})

    assert updated.material.loading == "truck 2"
    assert updated.current_stage is OrderStage.production1


def test_completed_order_keeps_confirmed_delivery_date():
    order = make_order(
        OrderStage.completed,
        delivery=DeliveryBlock(
            date=date(2024, 4, 1),
            confirmed=Decision.approved,
            successful=Decision.approved,
            timestamp=T0,
        ),
    )

    with pytest.raises(PreconditionNotMet):
        stage_engine.update_block(order, OrderStage.delivery, {"date": date(2024, 5, 1)})
    assert order.delivery.confirmed is Decision.approved
