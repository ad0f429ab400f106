"""
SQLAlchemy модели для базы данных
"""
from .salon import Salon
from .customer import Customer
from .service import Service
from .weekly_availability import WeeklyAvailability
from .blocked_slot import BlockedSlot
from .booking import Booking, BookingStatus

__all__ = [
    "Salon",
    "Customer",
    "Service",
    "WeeklyAvailability",
    "BlockedSlot",
    "Booking",
    "BookingStatus"
]
