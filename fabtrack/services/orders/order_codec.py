"""
Mapping between the ``Order`` entity and its flat stored document.

The stored document uses one key per field, prefixed with the stage name
(``quotation_link``, ``material_purchase_bill``, ...). A stage block is
considered present when its ``<stage>_timestamp`` key is set.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from fabtrack.models.enums.decision import Decision
from fabtrack.models.enums.order_stage import OrderStage
from fabtrack.models.enums.order_status import OrderStatus
from fabtrack.schemas.orders.order_schemas import Order, STAGE_BLOCKS

# entity field -> document key, per stage
FIELD_KEYS: Dict[OrderStage, Dict[str, str]] = {
    OrderStage.quotation: {
        "link": "quotation_link",
        "approved": "quotation_approved",
        "timestamp": "quotation_timestamp",
    },
    OrderStage.material: {
        "estimation": "material_estimation",
        "purchase_bill": "material_purchase_bill",
        "loading": "material_loading",
        "arrival": "material_arrival",
        "timestamp": "material_timestamp",
    },
    OrderStage.production1: {
        "marking": "production1_marking",
        "cutting": "production1_cutting",
        "edge_preparation": "production1_edge_preparation",
        "joint_welding": "production1_joint_welding",
        "design": "production1_design",
        "design_approved": "production1_design_approved",
        "timestamp": "production1_timestamp",
    },
    OrderStage.production2: {
        "full_welding": "production2_full_welding",
        "surface_finishing": "production2_surface_finishing",
        "inspection_needed": "production2_inspection_needed",
        "timestamp": "production2_timestamp",
    },
    OrderStage.painting: {
        "primer": "painting_primer",
        "painting": "painting_painting",
        "inspection_needed": "painting_inspection_needed",
        "timestamp": "painting_timestamp",
    },
    OrderStage.delivery: {
        "date": "delivery_date",
        "confirmed": "delivery_confirmed",
        "loading": "delivery_loading",
        "vehicle_number": "delivery_vehicle_number",
        "driver_number": "delivery_driver_number",
        "successful": "delivery_successful",
        "timestamp": "delivery_timestamp",
    },
}

HEADER_KEYS = ("client_email", "created_at", "current_stage", "status")

DOCUMENT_KEYS = HEADER_KEYS + tuple(
    key for keys in FIELD_KEYS.values() for key in keys.values()
)


def _encode_value(value: Any) -> Any:
    if isinstance(value, Decision):
        return value.to_bool()
    if value == "":
        return None
    return value


def _as_utc(value: Any) -> Any:
    # sqlite drops tzinfo on the way back
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _decode_value(block_cls, field: str, value: Any) -> Any:
    annotation = block_cls.model_fields[field].annotation
    if annotation is Decision:
        return Decision.from_bool(value)
    if annotation is str:
        return value or ""
    return _as_utc(value)


def encode_order(order: Order) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "client_email": order.client_id,
        "created_at": order.created_at,
        "current_stage": order.current_stage.value,
        "status": order.status.value,
    }

    for stage, keys in FIELD_KEYS.items():
        block = order.block(stage)
        for field, key in keys.items():
            doc[key] = _encode_value(getattr(block, field)) if block is not None else None

    return doc


def decode_order(order_id: str, doc: Mapping[str, Any]) -> Order:
    blocks = {}
    for stage, keys in FIELD_KEYS.items():
        if doc.get(keys["timestamp"]) is None:
            continue
        block_cls = STAGE_BLOCKS[stage]
        blocks[stage.value] = block_cls(
            **{
                field: _decode_value(block_cls, field, doc.get(key))
                for field, key in keys.items()
            }
        )

    return Order(
        id=order_id,
        client_id=doc["client_email"],
        created_at=_as_utc(doc["created_at"]),
        current_stage=OrderStage(doc["current_stage"]),
        status=OrderStatus(doc["status"]),
        **blocks,
    )


def diff_documents(before: Mapping[str, Any], after: Mapping[str, Any]) -> Dict[str, Any]:
    """Keys of ``after`` whose values differ from ``before``."""
    return {k: v for k, v in after.items() if before.get(k) != v}


def document_from_row(row) -> Dict[str, Any]:
    return {key: getattr(row, key) for key in DOCUMENT_KEYS}
