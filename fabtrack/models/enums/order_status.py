# fabtrack/models/enums/order_status.py
import enum


class OrderStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
