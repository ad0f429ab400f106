"""
Сервис для работы с расписанием и слотами
"""
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..config import get_settings
from ..models.blocked_slot import BlockedSlot
from ..models.booking import Booking, BookingStatus
from ..models.salon import Salon
from ..models.weekly_availability import WeeklyAvailability, DEFAULT_SCHEDULE
from ..scheduling import DaySlots, NextSlot, compute_next_slots, compute_slots
from ..scheduling.slots import find_day_availability

settings = get_settings()
logger = logging.getLogger(__name__)


class ScheduleService:
    """Сервис управления расписанием салона"""

    def __init__(self, db: Session, salon: Salon):
        self.db = db
        self.salon = salon

    # ==================== Чтение ====================

    def get_weekly_availability(self) -> List[WeeklyAvailability]:
        """Недельное расписание, отсортированное по дню недели"""
        return self.db.query(WeeklyAvailability).filter(
            WeeklyAvailability.salon_id == self.salon.id
        ).order_by(WeeklyAvailability.day_of_week).all()

    def get_day_availability(self, target_date: date) -> Optional[WeeklyAvailability]:
        return find_day_availability(self.get_weekly_availability(), target_date)

    def is_open(self, target_date: date) -> bool:
        day = self.get_day_availability(target_date)
        return bool(day and day.is_available)

    def get_blocked_slots(self, target_date: date) -> List[BlockedSlot]:
        """Заблокированные периоды на дату"""
        return self.db.query(BlockedSlot).filter(
            BlockedSlot.salon_id == self.salon.id,
            BlockedSlot.blocked_date == target_date
        ).all()

    def get_confirmed_bookings(self, target_date: date) -> List[Booking]:
        """Подтверждённые записи на дату"""
        return self.db.query(Booking).filter(
            Booking.salon_id == self.salon.id,
            Booking.booking_date == target_date,
            Booking.status == BookingStatus.CONFIRMED.value
        ).all()

    def get_available_slots(self, target_date: date, service_duration: int, now: datetime) -> DaySlots:
        """Свободные слоты на дату с учётом длительности услуги"""
        return compute_slots(
            target_date,
            service_duration,
            self.get_weekly_availability(),
            self.get_blocked_slots(target_date),
            self.get_confirmed_bookings(target_date),
            now
        )

    def get_next_available_slots(
        self,
        service_duration: int,
        now: datetime,
        limit: int = None,
        horizon_days: int = None
    ) -> List[NextSlot]:
        """Ближайшие свободные слоты на горизонте в несколько дней"""
        if limit is None:
            limit = settings.NEXT_SLOTS_DEFAULT_LIMIT
        if horizon_days is None:
            horizon_days = settings.NEXT_SLOTS_HORIZON_DAYS

        first_day = now.date()
        last_day = first_day + timedelta(days=horizon_days - 1)

        # Одна выборка на весь горизонт вместо запросов по дням
        blocked_by_date: Dict[date, List[BlockedSlot]] = defaultdict(list)
        for block in self.db.query(BlockedSlot).filter(
            BlockedSlot.salon_id == self.salon.id,
            BlockedSlot.blocked_date.between(first_day, last_day)
        ):
            blocked_by_date[block.blocked_date].append(block)

        bookings_by_date: Dict[date, List[Booking]] = defaultdict(list)
        for booking in self.db.query(Booking).filter(
            Booking.salon_id == self.salon.id,
            Booking.booking_date.between(first_day, last_day),
            Booking.status == BookingStatus.CONFIRMED.value
        ):
            bookings_by_date[booking.booking_date].append(booking)

        return compute_next_slots(
            service_duration,
            self.get_weekly_availability(),
            blocked_by_date,
            bookings_by_date,
            now,
            horizon_days=horizon_days,
            limit=limit
        )

    # ==================== Изменение расписания ====================

    def set_day_availability(
        self,
        day_of_week: int,
        start_time: str,
        end_time: str,
        is_available: bool = True
    ) -> WeeklyAvailability:
        """
        Установить часы работы на день недели (upsert по salon_id + day_of_week)
        """
        availability = self.db.query(WeeklyAvailability).filter(
            WeeklyAvailability.salon_id == self.salon.id,
            WeeklyAvailability.day_of_week == day_of_week
        ).first()

        if availability:
            availability.start_time = start_time
            availability.end_time = end_time
            availability.is_available = is_available
        else:
            availability = WeeklyAvailability(
                salon_id=self.salon.id,
                day_of_week=day_of_week,
                start_time=start_time,
                end_time=end_time,
                is_available=is_available
            )
            self.db.add(availability)

        self.db.commit()
        self.db.refresh(availability)
        logger.info(
            "Availability updated: salon=%s day=%s %s-%s available=%s",
            self.salon.id, day_of_week, start_time, end_time, is_available
        )
        return availability

    def list_blocked_slots(self, date_from: date = None, date_to: date = None) -> List[BlockedSlot]:
        query = self.db.query(BlockedSlot).filter(BlockedSlot.salon_id == self.salon.id)
        if date_from:
            query = query.filter(BlockedSlot.blocked_date >= date_from)
        if date_to:
            query = query.filter(BlockedSlot.blocked_date <= date_to)
        return query.order_by(BlockedSlot.blocked_date, BlockedSlot.start_time).all()

    def block_period(
        self,
        target_date: date,
        start_time: str = None,
        end_time: str = None,
        reason: str = None
    ) -> BlockedSlot:
        """
        Заблокировать период. Без start_time/end_time - весь день.
        """
        blocked = BlockedSlot(
            salon_id=self.salon.id,
            blocked_date=target_date,
            start_time=start_time or None,
            end_time=end_time or None,
            reason=reason or None
        )
        self.db.add(blocked)
        self.db.commit()
        self.db.refresh(blocked)
        logger.info("Blocked %r", blocked)
        return blocked

    def unblock_period(self, blocked_id: int) -> bool:
        """
        Снять блокировку
        """
        blocked = self.db.query(BlockedSlot).filter(
            BlockedSlot.id == blocked_id,
            BlockedSlot.salon_id == self.salon.id
        ).first()

        if blocked:
            self.db.delete(blocked)
            self.db.commit()
            return True
        return False

    def init_default_schedule(self):
        """
        Инициализировать расписание по умолчанию
        """
        existing = self.db.query(WeeklyAvailability).filter(
            WeeklyAvailability.salon_id == self.salon.id
        ).count()
        if existing > 0:
            return  # Расписание уже есть

        for day_data in DEFAULT_SCHEDULE:
            self.db.add(WeeklyAvailability(salon_id=self.salon.id, **day_data))

        self.db.commit()
        logger.info("Default weekly schedule created for salon %s", self.salon.id)
