"""
API роутер для каталога услуг
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.salon import Salon
from ..models.service import Service
from .deps import get_salon, require_admin

router = APIRouter(prefix="/api/services", tags=["services"])


# ==================== Pydantic Schemas ====================

class ServiceResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    duration_minutes: int
    price: float
    is_active: bool
    image_url: Optional[str]

    class Config:
        from_attributes = True


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    duration_minutes: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    image_url: Optional[str] = None


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    image_url: Optional[str] = None


def _get_service_or_404(db: Session, salon: Salon, service_id: int) -> Service:
    service = db.query(Service).filter(
        Service.id == service_id,
        Service.salon_id == salon.id
    ).first()
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


# ==================== API Endpoints ====================

@router.get("", response_model=List[ServiceResponse])
def get_services(db: Session = Depends(get_db), salon: Salon = Depends(get_salon)):
    """Получить список активных услуг"""
    return db.query(Service).filter(
        Service.salon_id == salon.id,
        Service.is_active == True  # noqa: E712
    ).order_by(Service.name).all()


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service(service_id: int, db: Session = Depends(get_db), salon: Salon = Depends(get_salon)):
    return _get_service_or_404(db, salon, service_id)


@router.post("", response_model=ServiceResponse, status_code=201, dependencies=[Depends(require_admin)])
def create_service(data: ServiceCreate, db: Session = Depends(get_db), salon: Salon = Depends(get_salon)):
    service = Service(salon_id=salon.id, **data.model_dump())
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@router.put("/{service_id}", response_model=ServiceResponse, dependencies=[Depends(require_admin)])
def update_service(
    service_id: int,
    data: ServiceUpdate,
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon)
):
    service = _get_service_or_404(db, salon, service_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(service, field, value)
    db.commit()
    db.refresh(service)
    return service


@router.delete("/{service_id}", dependencies=[Depends(require_admin)])
def delete_service(service_id: int, db: Session = Depends(get_db), salon: Salon = Depends(get_salon)):
    """Мягкое удаление: на услугу могут ссылаться старые записи"""
    service = _get_service_or_404(db, salon, service_id)
    service.is_active = False
    db.commit()
    return {"success": True}
