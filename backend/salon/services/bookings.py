"""
Сервис записей: создание, отмена, завершение
"""
import logging
import secrets
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.blocked_slot import BlockedSlot
from ..models.booking import Booking, BookingStatus
from ..models.customer import Customer
from ..models.salon import Salon
from ..models.service import Service
from ..models.weekly_availability import WeeklyAvailability
from ..scheduling import Rejection, RejectReason, decide_booking, decide_cancellation, decide_completion
from ..scheduling.timeutils import day_of_week

logger = logging.getLogger(__name__)


def generate_cancel_token() -> str:
    """64 hex-символа для ссылки отмены из письма"""
    return secrets.token_hex(32)


class BookingService:
    """Сервис записей одного салона"""

    def __init__(self, db: Session, salon: Salon):
        self.db = db
        self.salon = salon

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.db.query(Service).filter(
            Service.id == service_id,
            Service.salon_id == self.salon.id
        ).first()

    def create_booking(
        self,
        service_id: int,
        booking_date: date,
        start_time: str,
        customer_name: str,
        customer_email: str,
        now: datetime,
        customer_phone: str = None,
        customer_id: int = None
    ) -> Union[Booking, Rejection]:
        """
        Проверить и сохранить запись.

        Строка расписания на день недели блокируется (FOR UPDATE), поэтому
        параллельные записи на один день недели проверяются по очереди.
        Гонку, которую блокировка не поймала, ловят ограничения в БД.
        """
        service = self.get_service(service_id)

        day = self.db.query(WeeklyAvailability).filter(
            WeeklyAvailability.salon_id == self.salon.id,
            WeeklyAvailability.day_of_week == day_of_week(booking_date)
        ).with_for_update().first()

        blocked = self.db.query(BlockedSlot).filter(
            BlockedSlot.salon_id == self.salon.id,
            BlockedSlot.blocked_date == booking_date
        ).all()

        confirmed = self.db.query(Booking).filter(
            Booking.salon_id == self.salon.id,
            Booking.booking_date == booking_date,
            Booking.status == BookingStatus.CONFIRMED.value
        ).all()

        decision = decide_booking(
            service,
            booking_date,
            start_time,
            [day] if day else [],
            blocked,
            confirmed,
            now
        )

        if isinstance(decision, Rejection):
            self.db.rollback()
            logger.info(
                "Booking rejected: %s %s service=%s reason=%s",
                booking_date, start_time, service_id, decision.reason.value
            )
            return decision

        booking = Booking(
            salon_id=self.salon.id,
            service_id=service.id,
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email.lower(),
            customer_phone=customer_phone,
            booking_date=booking_date,
            start_time=decision.start_time,
            end_time=decision.end_time,
            status=BookingStatus.CONFIRMED.value,
            cancel_token=generate_cancel_token()
        )
        self.db.add(booking)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                "Concurrent booking for %s %s-%s lost the race",
                booking_date, decision.start_time, decision.end_time
            )
            return Rejection(RejectReason.ALREADY_BOOKED)

        self.db.refresh(booking)
        logger.info("Booking created: %r (id=%s)", booking, booking.id)
        return booking

    def get_booking(self, ref: str) -> Optional[Booking]:
        """Запись по числовому ID или по токену отмены"""
        query = self.db.query(Booking).filter(Booking.salon_id == self.salon.id)
        if ref.isdigit():
            return query.filter(Booking.id == int(ref)).first()
        return query.filter(Booking.cancel_token == ref).first()

    def cancel_booking(self, booking: Booking, now: datetime, by_admin: bool = False) -> Optional[Rejection]:
        rejection = decide_cancellation(booking, now, by_admin=by_admin)
        if rejection:
            logger.info("Cancellation rejected: booking=%s reason=%s", booking.id, rejection.reason.value)
            return rejection

        booking.status = BookingStatus.CANCELLED.value
        self.db.commit()
        self.db.refresh(booking)
        logger.info("Booking %s cancelled (by_admin=%s)", booking.id, by_admin)
        return None

    def complete_booking(self, booking: Booking) -> Optional[Rejection]:
        rejection = decide_completion(booking)
        if rejection:
            return rejection

        booking.status = BookingStatus.COMPLETED.value
        self.db.commit()
        self.db.refresh(booking)
        logger.info("Booking %s completed", booking.id)
        return None

    def list_bookings(self, booking_date: date = None, status: str = None) -> List[Booking]:
        """Все записи салона для админки"""
        query = self.db.query(Booking).filter(Booking.salon_id == self.salon.id)
        if booking_date:
            query = query.filter(Booking.booking_date == booking_date)
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.booking_date.desc(), Booking.start_time).all()

    def customer_bookings(self, customer: Customer, today: date) -> Tuple[List[Booking], List[Booking]]:
        """
        Записи клиента: (предстоящие, прошедшие).
        Гостевые записи на тот же email тоже считаются записями клиента.
        """
        bookings = self.db.query(Booking).filter(
            Booking.salon_id == self.salon.id,
            or_(
                Booking.customer_id == customer.id,
                Booking.customer_email == customer.email.lower()
            )
        ).order_by(Booking.booking_date, Booking.start_time).all()

        upcoming = [
            b for b in bookings
            if b.status == BookingStatus.CONFIRMED.value and b.booking_date >= today
        ]
        past = [b for b in bookings if b not in upcoming]
        past.reverse()
        return upcoming, past
