from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from comanda.infrastructure.db.models.catalog import Base


class OrderCounterModel(Base):
    __tablename__ = "order_counters"

    scope: Mapped[str] = mapped_column(String(80), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False)


class OrderModel(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    local: Mapped[str] = mapped_column(String(50), nullable=False)
    counter_scope: Mapped[str] = mapped_column(String(80), nullable=False)
    sequence_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    display_number: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_hour: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    submitted_by: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.id"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    idempotency_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    idempotency_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)

    lines: Mapped[list["OrderLineModel"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineModel.position",
    )

    __table_args__ = (
        UniqueConstraint(
            "counter_scope",
            "sequence_number",
            name="uq_orders_counter_scope_sequence",
        ),
        UniqueConstraint(
            "submitted_by",
            "idempotency_key",
            name="uq_orders_submitted_by_idempotency_key",
        ),
        CheckConstraint(
            "display_number BETWEEN 1 AND 100",
            name="ck_orders_display_number_range",
        ),
        CheckConstraint("total >= 0", name="ck_orders_total_non_negative"),
        Index("ix_orders_status_created_at", "status", "created_at"),
        Index("ix_orders_status_scheduled_hour", "status", "scheduled_hour"),
        Index("ix_orders_submitted_by_scheduled_hour", "submitted_by", "scheduled_hour"),
    )


class OrderLineModel(Base):
    __tablename__ = "order_lines"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    order_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    food_id: Mapped[str] = mapped_column(String(50), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_at_order_time: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    line_total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    order: Mapped[OrderModel] = relationship(back_populates="lines")
