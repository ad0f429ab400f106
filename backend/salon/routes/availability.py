"""
API роутер для расписания и свободных слотов
"""
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..models.salon import Salon
from ..models.service import Service
from ..services.schedule import ScheduleService
from .deps import get_now, get_salon, require_admin

settings = get_settings()
router = APIRouter(prefix="/api/availability", tags=["availability"])

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


# ==================== Pydantic Schemas ====================

class WeeklyAvailabilityResponse(BaseModel):
    id: int
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool

    class Config:
        from_attributes = True


class AvailabilityUpdate(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)  # 0=Вс
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    is_available: bool = True


class NextSlotResponse(BaseModel):
    date: str
    time: str
    day_name: str


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date")


def resolve_duration(db: Session, salon: Salon, service_id: Optional[int]) -> int:
    """Длительность услуги; неизвестная услуга - длительность по умолчанию"""
    if service_id is not None:
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.salon_id == salon.id
        ).first()
        if service:
            return service.duration_minutes
    return settings.DEFAULT_SERVICE_DURATION_MINUTES


# ==================== API Endpoints ====================

@router.get("")
def get_availability(
    target_date: Optional[str] = Query(None, alias="date", pattern=DATE_PATTERN),
    service_id: Optional[int] = None,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now)
):
    """
    Без даты - недельное расписание.
    С датой - свободные слоты на этот день.
    """
    schedule = ScheduleService(db, salon)

    if target_date is None:
        return [
            WeeklyAvailabilityResponse.model_validate(row)
            for row in schedule.get_weekly_availability()
        ]

    day = parse_date(target_date)
    duration = resolve_duration(db, salon, service_id)
    result = schedule.get_available_slots(day, duration, now)

    response = {"date": result.date.isoformat(), "slots": result.slots}
    if not schedule.is_open(day):
        response["message"] = "Salon is closed on this day"
    return response


@router.get("/next", response_model=List[NextSlotResponse])
def get_next_available(
    service_id: Optional[int] = None,
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now)
):
    """Ближайшие свободные слоты"""
    duration = resolve_duration(db, salon, service_id)
    slots = ScheduleService(db, salon).get_next_available_slots(duration, now, limit=limit)
    return [
        NextSlotResponse(
            date=slot.date.isoformat(),
            time=slot.time,
            day_name=slot.date.strftime("%A")
        )
        for slot in slots
    ]


@router.put("", response_model=WeeklyAvailabilityResponse, dependencies=[Depends(require_admin)])
def update_availability(
    data: AvailabilityUpdate,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon)
):
    """Изменить часы работы на день недели"""
    if data.start_time >= data.end_time:
        raise HTTPException(status_code=400, detail="start_time must be before end_time")

    return ScheduleService(db, salon).set_day_availability(
        data.day_of_week,
        data.start_time,
        data.end_time,
        data.is_available
    )
