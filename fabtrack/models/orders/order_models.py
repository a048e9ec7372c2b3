from sqlalchemy import Column, String, Boolean, DateTime, Date, Index
from fabtrack.core.db import Base


class OrderDocument(Base):
    """Flat, one-column-per-field representation of an order.

    Column names are the document keys shared with the order codec; nothing
    outside ``order_codec`` should read them directly.
    """

    __tablename__ = "orders"

    id = Column(String(32), primary_key=True)
    client_email = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    current_stage = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)

    # ---------------- QUOTATION ----------------
    quotation_link = Column(String, nullable=True)
    quotation_approved = Column(Boolean, nullable=True)
    quotation_timestamp = Column(DateTime(timezone=True), nullable=True)

    # ---------------- MATERIAL ----------------
    material_estimation = Column(String, nullable=True)
    material_purchase_bill = Column(String, nullable=True)
    material_loading = Column(String, nullable=True)
    material_arrival = Column(String, nullable=True)
    material_timestamp = Column(DateTime(timezone=True), nullable=True)

    # ---------------- PRODUCTION 1 ----------------
    production1_marking = Column(String, nullable=True)
    production1_cutting = Column(String, nullable=True)
    production1_edge_preparation = Column(String, nullable=True)
    production1_joint_welding = Column(String, nullable=True)
    production1_design = Column(String, nullable=True)
    production1_design_approved = Column(Boolean, nullable=True)
    production1_timestamp = Column(DateTime(timezone=True), nullable=True)

    # ---------------- PRODUCTION 2 ----------------
    production2_full_welding = Column(String, nullable=True)
    production2_surface_finishing = Column(String, nullable=True)
    production2_inspection_needed = Column(Boolean, nullable=True)
    production2_timestamp = Column(DateTime(timezone=True), nullable=True)

    # ---------------- PAINTING ----------------
    painting_primer = Column(String, nullable=True)
    painting_painting = Column(String, nullable=True)
    painting_inspection_needed = Column(Boolean, nullable=True)
    painting_timestamp = Column(DateTime(timezone=True), nullable=True)

    # ---------------- DELIVERY ----------------
    delivery_date = Column(Date, nullable=True)
    delivery_confirmed = Column(Boolean, nullable=True)
    delivery_loading = Column(String, nullable=True)
    delivery_vehicle_number = Column(String(50), nullable=True)
    delivery_driver_number = Column(String(50), nullable=True)
    delivery_successful = Column(Boolean, nullable=True)
    delivery_timestamp = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_orders_client_created", "client_email", "created_at"),)

    def __repr__(self):
        return f"<OrderDocument id={self.id} client={self.client_email} stage={self.current_stage}>"
