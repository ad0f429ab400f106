"""
Общие зависимости роутеров: часы, салон, сессии клиента и администратора
"""
from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.customer import Customer
from ..models.salon import Salon
from ..scheduling import Rejection

CUSTOMER_SESSION_KEY = "customer_id"
ADMIN_SESSION_KEY = "admin"


def get_now() -> datetime:
    """Текущее локальное время (подменяется в тестах)"""
    return datetime.now()


def get_salon(db: Session = Depends(get_db)) -> Salon:
    """Салон - единственный ресурс расписания"""
    salon = db.query(Salon).order_by(Salon.id).first()
    if not salon:
        raise HTTPException(status_code=404, detail="No salon found")
    return salon


def get_current_customer(request: Request, db: Session = Depends(get_db)) -> Optional[Customer]:
    customer_id = request.session.get(CUSTOMER_SESSION_KEY)
    if customer_id is None:
        return None

    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        # Аккаунт удалён, а cookie осталась
        request.session.pop(CUSTOMER_SESSION_KEY, None)
    return customer


def require_customer(customer: Optional[Customer] = Depends(get_current_customer)) -> Customer:
    if not customer:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return customer


def is_admin(request: Request) -> bool:
    return bool(request.session.get(ADMIN_SESSION_KEY, False))


def require_admin(request: Request) -> None:
    if not is_admin(request):
        raise HTTPException(status_code=401, detail="Admin access required")


def rejection_to_http(rejection: Rejection) -> HTTPException:
    """Отказ бизнес-правила -> HTTP ответ"""
    status_code = 404 if rejection.is_not_found else 400
    return HTTPException(
        status_code=status_code,
        detail={"error": rejection.message, "reason": rejection.reason.value}
    )
