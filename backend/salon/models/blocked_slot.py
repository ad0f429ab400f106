"""
Модель заблокированных периодов
"""
from sqlalchemy import Column, Integer, ForeignKey, Date, String, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base


class BlockedSlot(Base):
    """
    Заблокированный период на конкретную дату (отпуск, обед, личное время).
    Без start_time/end_time блокируется весь день.
    """

    __tablename__ = "blocked_slots"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False)
    blocked_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=True)  # "HH:MM"
    end_time = Column(String(5), nullable=True)
    reason = Column(String(200), nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    @property
    def is_whole_day(self) -> bool:
        return not self.start_time or not self.end_time

    def __repr__(self):
        period = "whole day" if self.is_whole_day else f"{self.start_time}-{self.end_time}"
        return f"<BlockedSlot {self.blocked_date} {period} - {self.reason}>"
