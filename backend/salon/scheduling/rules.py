"""
Правила записи: чистые предикаты без обращений к БД
"""
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List

from .timeutils import combine

# Минимальное время до записи
MIN_ADVANCE_BOOKING = timedelta(hours=2)

# Клиент не может отменить запись меньше чем за сутки
CANCELLATION_NOTICE_HOURS = 24


class BookingStatus(str, Enum):
    """Статусы записи. cancelled и completed - конечные."""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


def occupying(bookings: Iterable) -> List:
    """Время занимают только подтверждённые записи"""
    return [
        booking for booking in bookings
        if getattr(booking, "status", BookingStatus.CONFIRMED.value) == BookingStatus.CONFIRMED.value
    ]


def do_time_slots_overlap(slot_a, slot_b) -> bool:
    """
    Пересекаются ли интервалы [start, end).
    Стык (a.end == b.start) пересечением не считается.
    """
    return (
        (slot_a.start_time >= slot_b.start_time and slot_a.start_time < slot_b.end_time)
        or (slot_a.end_time > slot_b.start_time and slot_a.end_time <= slot_b.end_time)
        or (slot_a.start_time <= slot_b.start_time and slot_a.end_time >= slot_b.end_time)
    )


def is_whole_day_block(block) -> bool:
    return not block.start_time or not block.end_time


def is_slot_blocked(slot_start: str, blocked_periods: Iterable) -> bool:
    """
    Попадает ли НАЧАЛО слота в заблокированный период.
    Конец слота не проверяется: длинная услуга, начатая перед блоком, проходит.
    """
    for block in blocked_periods:
        if is_whole_day_block(block):
            return True
        if block.start_time <= slot_start < block.end_time:
            return True
    return False


def is_advance_booking_valid(booking_date: date, start_time: str, now: datetime) -> bool:
    """Начало записи не раньше чем now + 2 часа (граница включительно)"""
    return combine(booking_date, start_time) >= now + MIN_ADVANCE_BOOKING


def is_within_working_hours(slot_start: str, slot_end: str, work_start: str, work_end: str) -> bool:
    return slot_start >= work_start and slot_end <= work_end


def hours_until(booking_date: date, start_time: str, now: datetime) -> int:
    """Целые часы до начала записи (дробная часть отбрасывается к нулю)"""
    seconds = (combine(booking_date, start_time) - now).total_seconds()
    return int(seconds / 3600)


def is_cancellation_allowed(booking_date: date, start_time: str, now: datetime) -> bool:
    """
    Отмена клиентом запрещена, только если до записи от 0 до 24 часов.
    Уже прошедшие записи этим правилом не блокируются.
    """
    hours = hours_until(booking_date, start_time, now)
    return not (0 < hours < CANCELLATION_NOTICE_HOURS)
