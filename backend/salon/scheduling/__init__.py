"""
Ядро расписания: арифметика времени, правила, генерация слотов и
решение о приёме записи. Работает только с уже загруженными данными.
"""
from .admission import (
    Admission,
    BookingDecision,
    RejectReason,
    Rejection,
    decide_booking,
    decide_cancellation,
    decide_completion,
)
from .rules import BookingStatus
from .slots import DaySlots, NextSlot, compute_next_slots, compute_slots

__all__ = [
    "Admission",
    "BookingDecision",
    "BookingStatus",
    "DaySlots",
    "NextSlot",
    "RejectReason",
    "Rejection",
    "compute_next_slots",
    "compute_slots",
    "decide_booking",
    "decide_cancellation",
    "decide_completion",
]
