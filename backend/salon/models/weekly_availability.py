"""
Модель недельного расписания салона
"""
from sqlalchemy import Column, Integer, ForeignKey, String, Boolean, TIMESTAMP, UniqueConstraint
from sqlalchemy.sql import func
from ..database import Base

# 0=Вс, 6=Сб
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class WeeklyAvailability(Base):
    """Часы работы по дням недели. Строки не удаляются, только переключаются."""

    __tablename__ = "weekly_availability"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0=Вс, 6=Сб
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)
    is_available = Column(Boolean, default=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("salon_id", "day_of_week", name="unique_salon_day_of_week"),
    )

    def __repr__(self):
        status = "open" if self.is_available else "closed"
        return f"<WeeklyAvailability {DAY_NAMES[self.day_of_week]} {self.start_time}-{self.end_time} {status}>"


# Дефолтное расписание для инициализации
DEFAULT_SCHEDULE = [
    {"day_of_week": 0, "start_time": "09:00", "end_time": "17:00", "is_available": False},  # Вс
    {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00", "is_available": True},  # Пн
    {"day_of_week": 2, "start_time": "09:00", "end_time": "17:00", "is_available": True},  # Вт
    {"day_of_week": 3, "start_time": "09:00", "end_time": "17:00", "is_available": True},  # Ср
    {"day_of_week": 4, "start_time": "09:00", "end_time": "17:00", "is_available": True},  # Чт
    {"day_of_week": 5, "start_time": "09:00", "end_time": "17:00", "is_available": True},  # Пт
    {"day_of_week": 6, "start_time": "10:00", "end_time": "14:00", "is_available": True},  # Сб
]
