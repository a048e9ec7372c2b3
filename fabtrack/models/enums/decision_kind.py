# fabtrack/models/enums/decision_kind.py
import enum


class DecisionKind(str, enum.Enum):
    quotation_approval = "quotation_approval"
    design_approval = "design_approval"
    production_inspection = "production_inspection"
    painting_inspection = "painting_inspection"
    delivery_date_confirmation = "delivery_date_confirmation"
    delivery_receipt = "delivery_receipt"


class DecisionOrigin(str, enum.Enum):
    client = "client"
    admin_override = "admin_override"
