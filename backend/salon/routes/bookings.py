"""
API роутер для записей
"""
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.booking import Booking, BookingStatus
from ..models.customer import Customer
from ..models.salon import Salon
from ..scheduling import Rejection
from ..scheduling.rules import is_cancellation_allowed
from ..services.bookings import BookingService
from ..services.notifications import (
    BookingNotice,
    notify_salon_cancelled_booking,
    notify_salon_new_booking,
    send_booking_cancellation,
    send_booking_confirmation,
)
from .availability import DATE_PATTERN, TIME_PATTERN, parse_date
from .deps import get_current_customer, get_now, get_salon, is_admin, rejection_to_http, require_admin

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


# ==================== Pydantic Schemas ====================

class BookingCreate(BaseModel):
    service_id: int
    date: str = Field(..., pattern=DATE_PATTERN)  # YYYY-MM-DD
    start_time: str = Field(..., pattern=TIME_PATTERN)  # HH:MM
    customer_name: str = Field(..., min_length=2, max_length=100)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=20)


class BookingStatusUpdate(BaseModel):
    status: Literal["cancelled", "completed"]


class BookingResponse(BaseModel):
    id: int
    service_id: int
    service_name: Optional[str]
    date: str
    start_time: str
    end_time: str
    status: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    can_cancel: bool
    cancel_token: Optional[str] = None


def to_response(booking: Booking, now: datetime, include_token: bool = False) -> BookingResponse:
    """Токен отдаётся только при создании записи и администратору"""
    can_cancel = (
        booking.status == BookingStatus.CONFIRMED.value
        and is_cancellation_allowed(booking.booking_date, booking.start_time, now)
    )
    return BookingResponse(
        id=booking.id,
        service_id=booking.service_id,
        service_name=booking.service.name if booking.service else None,
        date=booking.booking_date.isoformat(),
        start_time=booking.start_time,
        end_time=booking.end_time,
        status=booking.status,
        customer_name=booking.customer_name,
        customer_email=booking.customer_email,
        customer_phone=booking.customer_phone,
        can_cancel=can_cancel,
        cancel_token=booking.cancel_token if include_token else None
    )


def _get_booking_or_404(service: BookingService, ref: str) -> Booking:
    booking = service.get_booking(ref)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


def _get_visible_booking(
    service: BookingService,
    ref: str,
    request: Request,
    customer: Optional[Customer]
) -> Booking:
    """
    Запись, доступная вызывающему.

    По токену из письма запись доступна любому. По числовому ID только
    администратору и клиенту, которому она принадлежит, остальным 404.
    """
    booking = _get_booking_or_404(service, ref)
    if not ref.isdigit() or is_admin(request):
        return booking
    if not customer or booking.customer_id != customer.id:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


def _schedule_cancellation_notices(background_tasks: BackgroundTasks, booking: Booking):
    notice = BookingNotice.from_booking(booking)
    background_tasks.add_task(send_booking_cancellation, notice)
    background_tasks.add_task(notify_salon_cancelled_booking, notice)


# ==================== API Endpoints ====================

@router.post("", response_model=BookingResponse, status_code=201)
def create_booking(
    data: BookingCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now),
    customer: Optional[Customer] = Depends(get_current_customer)
):
    """Создать запись (гостем или из личного кабинета)"""
    result = BookingService(db, salon).create_booking(
        service_id=data.service_id,
        booking_date=parse_date(data.date),
        start_time=data.start_time,
        customer_name=data.customer_name,
        customer_email=data.customer_email,
        now=now,
        customer_phone=data.customer_phone,
        customer_id=customer.id if customer else None
    )
    if isinstance(result, Rejection):
        raise rejection_to_http(result)

    notice = BookingNotice.from_booking(result)
    background_tasks.add_task(send_booking_confirmation, notice)
    background_tasks.add_task(notify_salon_new_booking, notice)

    return to_response(result, now, include_token=True)


@router.get("", response_model=List[BookingResponse], dependencies=[Depends(require_admin)])
def list_bookings(
    booking_date: Optional[str] = Query(None, alias="date", pattern=DATE_PATTERN),
    status: Optional[BookingStatus] = None,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now)
):
    """Все записи салона (админ)"""
    bookings = BookingService(db, salon).list_bookings(
        parse_date(booking_date) if booking_date else None,
        status.value if status else None
    )
    return [to_response(b, now, include_token=True) for b in bookings]


@router.get("/{ref}", response_model=BookingResponse)
def get_booking(
    ref: str,
    request: Request,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now),
    customer: Optional[Customer] = Depends(get_current_customer)
):
    """Запись по токену из письма или по ID (владелец, админ)"""
    booking = _get_visible_booking(BookingService(db, salon), ref, request, customer)
    return to_response(booking, now, include_token=is_admin(request))


@router.put("/{ref}", response_model=BookingResponse)
def update_booking_status(
    ref: str,
    data: BookingStatusUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now),
    customer: Optional[Customer] = Depends(get_current_customer)
):
    """Отменить запись или отметить как выполненную"""
    if data.status == BookingStatus.COMPLETED.value and not is_admin(request):
        raise HTTPException(status_code=401, detail="Admin access required")

    service = BookingService(db, salon)
    booking = _get_visible_booking(service, ref, request, customer)

    if data.status == BookingStatus.COMPLETED.value:
        rejection = service.complete_booking(booking)
    else:
        rejection = service.cancel_booking(booking, now, by_admin=is_admin(request))

    if rejection:
        raise rejection_to_http(rejection)

    if booking.status == BookingStatus.CANCELLED.value:
        _schedule_cancellation_notices(background_tasks, booking)

    return to_response(booking, now, include_token=is_admin(request))


@router.delete("/{booking_id}", dependencies=[Depends(require_admin)])
def admin_cancel_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now)
):
    """Отмена администратором без ограничения по сроку"""
    service = BookingService(db, salon)
    booking = _get_booking_or_404(service, str(booking_id))

    rejection = service.cancel_booking(booking, now, by_admin=True)
    if rejection:
        raise rejection_to_http(rejection)

    _schedule_cancellation_notices(background_tasks, booking)
    return {"success": True}
