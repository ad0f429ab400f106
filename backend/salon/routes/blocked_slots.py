"""
API роутер для заблокированных периодов (только администратор)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.salon import Salon
from ..services.schedule import ScheduleService
from .availability import DATE_PATTERN, TIME_PATTERN, parse_date
from .deps import get_salon, require_admin

router = APIRouter(
    prefix="/api/blocked-slots",
    tags=["blocked-slots"],
    dependencies=[Depends(require_admin)]
)


class BlockedSlotCreate(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    reason: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def check_period(self):
        # Либо оба времени (период), либо ни одного (весь день)
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be given together")
        if self.start_time and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class BlockedSlotResponse(BaseModel):
    id: int
    date: str
    start_time: Optional[str]
    end_time: Optional[str]
    reason: Optional[str]
    is_whole_day: bool


def to_response(blocked) -> BlockedSlotResponse:
    return BlockedSlotResponse(
        id=blocked.id,
        date=blocked.blocked_date.isoformat(),
        start_time=blocked.start_time,
        end_time=blocked.end_time,
        reason=blocked.reason,
        is_whole_day=blocked.is_whole_day
    )


@router.get("", response_model=List[BlockedSlotResponse])
def list_blocked_slots(
    date_from: Optional[str] = Query(None, alias="from", pattern=DATE_PATTERN),
    date_to: Optional[str] = Query(None, alias="to", pattern=DATE_PATTERN),
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon)
):
    """Все блокировки или блокировки в диапазоне дат"""
    first = parse_date(date_from) if date_from else None
    last = parse_date(date_to) if date_to else None
    blocked = ScheduleService(db, salon).list_blocked_slots(first, last)
    return [to_response(b) for b in blocked]


@router.post("", response_model=BlockedSlotResponse, status_code=201)
def create_blocked_slot(
    data: BlockedSlotCreate,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon)
):
    blocked = ScheduleService(db, salon).block_period(
        parse_date(data.date),
        data.start_time,
        data.end_time,
        data.reason
    )
    return to_response(blocked)


@router.delete("/{blocked_id}")
def delete_blocked_slot(blocked_id: int, db: Session = Depends(get_db), salon: Salon = Depends(get_salon)):
    if not ScheduleService(db, salon).unblock_period(blocked_id):
        raise HTTPException(status_code=404, detail="Blocked slot not found")
    return {"success": True}
