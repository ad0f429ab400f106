"""
Генерация свободных слотов

Сетка всегда с шагом 30 минут от начала рабочего дня, независимо
от длительности услуги: 45-минутная услуга предлагается только на
получасовых отметках.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .rules import (
    do_time_slots_overlap,
    is_advance_booking_valid,
    is_slot_blocked,
    is_whole_day_block,
    occupying,
)
from .timeutils import (
    MINUTES_PER_DAY,
    TimeRange,
    calculate_end_time,
    day_of_week,
    minutes_to_time,
    time_to_minutes,
)

SLOT_STEP_MINUTES = 30
NEXT_SLOTS_HORIZON_DAYS = 14


@dataclass(frozen=True)
class DaySlots:
    date: date
    slots: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class NextSlot:
    date: date
    time: str


def find_day_availability(availability: Iterable, target_date: date):
    """Строка недельного расписания для дня недели даты или None"""
    weekday = day_of_week(target_date)
    for row in availability:
        if row.day_of_week == weekday:
            return row
    return None


def candidate_starts(work_start: str, work_end: str, duration_minutes: int) -> Iterator[str]:
    """
    Все отметки сетки, на которых услуга укладывается в рабочий день.
    Окончание ровно в момент закрытия допускается.
    """
    end = time_to_minutes(work_end)
    current = time_to_minutes(work_start)
    while True:
        slot_end = current + duration_minutes
        if not (slot_end < end or slot_end % MINUTES_PER_DAY == end):
            break
        yield minutes_to_time(current)
        current += SLOT_STEP_MINUTES


def compute_slots(
    target_date: date,
    service_duration: int,
    availability: Iterable,
    blocked_periods: Sequence,
    confirmed_bookings: Sequence,
    now: datetime
) -> DaySlots:
    """
    Свободные начала записи на дату по возрастанию.
    Выходной и "всё занято" неразличимы: в обоих случаях пустой список.
    """
    day = find_day_availability(availability, target_date)
    if day is None or not day.is_available:
        return DaySlots(target_date, [])

    if any(is_whole_day_block(block) for block in blocked_periods):
        return DaySlots(target_date, [])

    bookings = occupying(confirmed_bookings)
    today = now.date()
    slots = []

    for slot_start in candidate_starts(day.start_time, day.end_time, service_duration):
        # Запас в 2 часа проверяется только для сегодняшнего дня
        if target_date == today and not is_advance_booking_valid(target_date, slot_start, now):
            continue
        if is_slot_blocked(slot_start, blocked_periods):
            continue

        slot = TimeRange(slot_start, calculate_end_time(slot_start, service_duration))
        if any(do_time_slots_overlap(slot, booking) for booking in bookings):
            continue

        slots.append(slot_start)

    return DaySlots(target_date, slots)


def compute_next_slots(
    service_duration: int,
    availability: Iterable,
    blocked_periods_by_date: Dict[date, Sequence],
    confirmed_bookings_by_date: Dict[date, Sequence],
    now: datetime,
    horizon_days: int = NEXT_SLOTS_HORIZON_DAYS,
    limit: Optional[int] = None
) -> List[NextSlot]:
    """Ближайшие свободные слоты, день за днём начиная с сегодняшнего"""
    availability = list(availability)
    result = []

    for offset in range(horizon_days):
        if limit is not None and len(result) >= limit:
            break

        target_date = now.date() + timedelta(days=offset)
        day_slots = compute_slots(
            target_date,
            service_duration,
            availability,
            blocked_periods_by_date.get(target_date, []),
            confirmed_bookings_by_date.get(target_date, []),
            now
        )

        for slot_start in day_slots.slots:
            if limit is not None and len(result) >= limit:
                break
            result.append(NextSlot(target_date, slot_start))

    return result
