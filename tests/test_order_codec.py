from datetime import date, datetime, timezone

from fabtrack.models.enums.decision import Decision
from fabtrack.models.enums.order_stage import OrderStage
from fabtrack.models.enums.order_status import OrderStatus
from fabtrack.schemas.orders.order_schemas import DeliveryBlock, Order, QuotationBlock
from fabtrack.services.orders.order_codec import (
    DOCUMENT_KEYS,
    decode_order,
    diff_documents,
    encode_order,
)

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def test_new_order_document_has_only_header_values():
    order = Order(id="o1", client_id="alice@example.com", created_at=T0)
    doc = encode_order(order)

    assert set(doc) == set(DOCUMENT_KEYS)
    assert doc["client_email"] == "alice@example.com"
    assert doc["current_stage"] == "quotation"
    assert doc["status"] == "pending"
    assert doc["quotation_link"] is None
    assert doc["delivery_successful"] is None


def test_decisions_are_stored_as_nullable_booleans():
    order = Order(
        id="o1",
        client_id="alice@example.com",
        created_at=T0,
        quotation=QuotationBlock(link="https://q/1", approved=Decision.rejected, timestamp=T0),
    )
    doc = encode_order(order)

    assert doc["quotation_link"] == "https://q/1"
    assert doc["quotation_approved"] is False
    assert doc["quotation_timestamp"] == T0


def test_block_without_timestamp_decodes_as_absent():
    doc = encode_order(Order(id="o1", client_id="alice@example.com", created_at=T0))
    doc["material_loading"] = "stray value"

    order = decode_order("o1", doc)

    assert order.material is None
    assert order.quotation is None


def test_decode_restores_blocks_and_naive_datetimes():
    doc = encode_order(
        Order(
            id="o9",
            client_id="bob@example.com",
            created_at=T0,
            current_stage=OrderStage.delivery,
            status=OrderStatus.in_progress,
            delivery=DeliveryBlock(date=date(2024, 4, 1), confirmed=Decision.approved, timestamp=T0),
        )
    )
    doc["created_at"] = T0.replace(tzinfo=None)
    doc["delivery_timestamp"] = T0.replace(tzinfo=None)

    order = decode_order("o9", doc)

    assert order.id == "o9"
    assert order.created_at == T0
    assert order.delivery.timestamp == T0
    assert order.delivery.date == date(2024, 4, 1)
    assert order.delivery.confirmed is Decision.approved
    assert order.delivery.successful is Decision.unset
    assert order.delivery.vehicle_number == ""


def test_diff_keeps_only_changed_keys():
    before = {"a": 1, "b": None, "c": "x"}
    after = {"a": 1, "b": True, "c": "y"}

    assert diff_documents(before, after) == {"b": True, "c": "y"}
    assert diff_documents(before, dict(before)) == {}
