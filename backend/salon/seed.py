"""
Начальные данные: салон, услуги, недельное расписание
"""
import logging

from sqlalchemy.orm import Session

from .models.salon import Salon
from .models.service import Service
from .services.schedule import ScheduleService

logger = logging.getLogger(__name__)

DEFAULT_SALON = {
    "name": "Salon Owner",
    "salon_name": "Salon",
    "email": "owner@salon.local",
}

DEFAULT_SERVICES = [
    {"name": "Herreklip", "description": "Klassisk herreklip", "duration_minutes": 30, "price": 250},
    {"name": "Dameklip", "description": "Klip og føn", "duration_minutes": 45, "price": 400},
    {"name": "Børneklip", "description": "Klip til børn under 12 år", "duration_minutes": 30, "price": 200},
    {"name": "Pensionistklip", "description": "Klip til pensionister", "duration_minutes": 30, "price": 200},
    {"name": "Hårfarvning", "description": "Farvning af hele håret", "duration_minutes": 60, "price": 500},
    {"name": "Styling", "description": "Opsætning og styling", "duration_minutes": 45, "price": 300},
]


def ensure_salon(db: Session) -> Salon:
    """Первый салон; создаётся, если таблица пуста"""
    salon = db.query(Salon).order_by(Salon.id).first()
    if salon:
        return salon

    salon = Salon(**DEFAULT_SALON)
    db.add(salon)
    db.commit()
    db.refresh(salon)
    logger.info("Default salon created: %r", salon)
    return salon


def seed_services(db: Session, salon: Salon) -> int:
    """Добавить услуги, если их нет. Возвращает число добавленных."""
    existing = db.query(Service).filter(Service.salon_id == salon.id).count()
    if existing > 0:
        return 0

    for data in DEFAULT_SERVICES:
        db.add(Service(salon_id=salon.id, **data))
    db.commit()
    return len(DEFAULT_SERVICES)


def seed_defaults(db: Session, with_services: bool = False) -> Salon:
    salon = ensure_salon(db)
    ScheduleService(db, salon).init_default_schedule()
    if with_services:
        seed_services(db, salon)
    return salon
