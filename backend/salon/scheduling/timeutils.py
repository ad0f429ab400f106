"""
Арифметика времени в формате "HH:MM"

Все времена - локальные "настенные" строки с нулями впереди,
поэтому их можно сравнивать как строки.
"""
from datetime import date, datetime, time
from typing import NamedTuple

MINUTES_PER_DAY = 24 * 60


class TimeRange(NamedTuple):
    """Полуоткрытый интервал [start_time, end_time)"""
    start_time: str
    end_time: str


def time_to_minutes(value: str) -> int:
    """"HH:MM" -> минуты от полуночи. Формат проверяется раньше, на входе API."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total_minutes: int) -> str:
    """Минуты -> "HH:MM", с переходом через полночь"""
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def calculate_end_time(start_time: str, duration_minutes: int) -> str:
    """
    Время окончания услуги.
    23:30 + 60 мин = "00:30": многодневные записи не моделируются,
    проверка перехода через полночь - забота вызывающего кода.
    """
    return minutes_to_time(time_to_minutes(start_time) + duration_minutes)


def wraps_past_midnight(start_time: str, duration_minutes: int) -> bool:
    """True, если окончание нельзя выразить временем того же дня"""
    return time_to_minutes(start_time) + duration_minutes >= MINUTES_PER_DAY


def parse_time(value: str) -> time:
    return time(*divmod(time_to_minutes(value), 60))


def combine(target_date: date, value: str) -> datetime:
    """Дата + "HH:MM" -> datetime"""
    return datetime.combine(target_date, parse_time(value))


def day_of_week(target_date: date) -> int:
    """Индекс дня недели: 0=воскресенье ... 6=суббота"""
    return target_date.isoweekday() % 7
