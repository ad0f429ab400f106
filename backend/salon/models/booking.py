"""
Модель записи на прием
"""
from sqlalchemy import (
    Column, Integer, ForeignKey, Date, String, TIMESTAMP, DDL, Index, event, text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base
from ..scheduling.rules import BookingStatus


class Booking(Base):
    """Запись клиента. Время занимают только записи со статусом confirmed."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_phone = Column(String(20), nullable=True)
    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)  # start_time + длительность услуги
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)
    cancel_token = Column(String(64), unique=True, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    service = relationship("Service")
    customer = relationship("Customer")

    __table_args__ = (
        # Последний рубеж против двойной записи на одно и то же начало
        Index(
            "unique_confirmed_booking_start",
            "salon_id", "booking_date", "start_time",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
    )

    def __repr__(self):
        return f"<Booking {self.booking_date} {self.start_time}-{self.end_time} (Status: {self.status})>"


def _minutes_sql(column: str) -> str:
    return f"(split_part({column}, ':', 1)::int * 60 + split_part({column}, ':', 2)::int)"


# В PostgreSQL пересечение интервалов запрещено exclusion-ограничением
event.listen(
    Booking.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql")
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        "ALTER TABLE bookings ADD CONSTRAINT bookings_no_overlap EXCLUDE USING gist ("
        "salon_id WITH =, booking_date WITH =, "
        f"int4range({_minutes_sql('start_time')}, {_minutes_sql('end_time')}) WITH &&"
        ") WHERE (status = 'confirmed')"
    ).execute_if(dialect="postgresql")
)
