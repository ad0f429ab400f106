"""
Решение о приёме записи и об отмене

Проверки идут в фиксированном порядке, первая неудачная
определяет причину отказа.
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

from .rules import (
    BookingStatus,
    do_time_slots_overlap,
    is_advance_booking_valid,
    is_cancellation_allowed,
    is_slot_blocked,
    is_within_working_hours,
    occupying,
)
from .slots import find_day_availability
from .timeutils import TimeRange, calculate_end_time, wraps_past_midnight


class RejectReason(str, Enum):
    """Коды отказа"""
    SERVICE_NOT_FOUND = "service_not_found"
    TOO_SOON = "too_soon"
    CLOSED_DAY = "closed_day"
    OUTSIDE_WORKING_HOURS = "outside_working_hours"
    SLOT_BLOCKED = "slot_blocked"
    ALREADY_BOOKED = "already_booked"
    NOT_CONFIRMED = "not_confirmed"
    NOTICE_PERIOD = "notice_period"


REJECT_MESSAGES = {
    RejectReason.SERVICE_NOT_FOUND: "Service not found",
    RejectReason.TOO_SOON: "Booking must be at least 2 hours in advance",
    RejectReason.CLOSED_DAY: "Salon is closed on this day",
    RejectReason.OUTSIDE_WORKING_HOURS: "Booking is outside working hours",
    RejectReason.SLOT_BLOCKED: "This time slot is blocked",
    RejectReason.ALREADY_BOOKED: "This time slot is already booked",
    RejectReason.NOT_CONFIRMED: "Only confirmed bookings can be changed",
    RejectReason.NOTICE_PERIOD: "Cancellation not allowed within 24 hours of appointment",
}


@dataclass(frozen=True)
class Admission:
    """Запись можно сохранять со статусом confirmed"""
    start_time: str
    end_time: str


@dataclass(frozen=True)
class Rejection:
    reason: RejectReason

    @property
    def message(self) -> str:
        return REJECT_MESSAGES[self.reason]

    @property
    def is_not_found(self) -> bool:
        return self.reason == RejectReason.SERVICE_NOT_FOUND


BookingDecision = Union[Admission, Rejection]


def decide_booking(
    service,
    booking_date: date,
    start_time: str,
    availability: Iterable,
    blocked_periods: Sequence,
    confirmed_bookings: Sequence,
    now: datetime
) -> BookingDecision:
    """
    Проверить предлагаемую запись.

    service - объект с duration_minutes и is_active (или None),
    availability - строки недельного расписания,
    blocked_periods и confirmed_bookings - данные на booking_date.
    """
    if service is None or not service.is_active:
        return Rejection(RejectReason.SERVICE_NOT_FOUND)

    duration = service.duration_minutes
    end_time = calculate_end_time(start_time, duration)

    if not is_advance_booking_valid(booking_date, start_time, now):
        return Rejection(RejectReason.TOO_SOON)

    day = find_day_availability(availability, booking_date)
    if day is None or not day.is_available:
        return Rejection(RejectReason.CLOSED_DAY)

    # "HH:MM" после полуночи сравнивается как раннее утро того же дня
    if wraps_past_midnight(start_time, duration):
        return Rejection(RejectReason.OUTSIDE_WORKING_HOURS)
    if not is_within_working_hours(start_time, end_time, day.start_time, day.end_time):
        return Rejection(RejectReason.OUTSIDE_WORKING_HOURS)

    if is_slot_blocked(start_time, blocked_periods):
        return Rejection(RejectReason.SLOT_BLOCKED)

    proposed = TimeRange(start_time, end_time)
    if any(do_time_slots_overlap(proposed, booking) for booking in occupying(confirmed_bookings)):
        return Rejection(RejectReason.ALREADY_BOOKED)

    return Admission(start_time, end_time)


def decide_cancellation(booking, now: datetime, by_admin: bool = False) -> Optional[Rejection]:
    """
    Можно ли перевести запись в cancelled.
    Возвращает None, если можно. Администратор не ограничен сроком.
    """
    if booking.status != BookingStatus.CONFIRMED.value:
        return Rejection(RejectReason.NOT_CONFIRMED)

    if by_admin:
        return None

    if not is_cancellation_allowed(booking.booking_date, booking.start_time, now):
        return Rejection(RejectReason.NOTICE_PERIOD)

    return None


def decide_completion(booking) -> Optional[Rejection]:
    """Завершить можно только подтверждённую запись"""
    if booking.status != BookingStatus.CONFIRMED.value:
        return Rejection(RejectReason.NOT_CONFIRMED)
    return None
