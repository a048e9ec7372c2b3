# fabtrack/models/enums/order_stage.py
import enum


class OrderStage(str, enum.Enum):
    quotation = "quotation"
    material = "material"
    production1 = "production1"
    production2 = "production2"
    painting = "painting"
    delivery = "delivery"
    completed = "completed"

    @property
    def position(self) -> int:
        return STAGE_SEQUENCE.index(self)


# fixed workflow order, completed is terminal
STAGE_SEQUENCE = tuple(OrderStage)
