"""
API роутер для личного кабинета клиента и входа администратора
"""
import secrets
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..models.customer import Customer
from ..models.salon import Salon
from ..services.accounts import EmailAlreadyRegistered, authenticate_customer, register_customer
from ..services.bookings import BookingService
from .bookings import to_response
from .deps import (
    ADMIN_SESSION_KEY,
    CUSTOMER_SESSION_KEY,
    get_current_customer,
    get_now,
    get_salon,
    require_customer,
)

settings = get_settings()
router = APIRouter(prefix="/api", tags=["auth"])


# ==================== Pydantic Schemas ====================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AdminLoginRequest(BaseModel):
    password: str


class CustomerResponse(BaseModel):
    id: int
    email: str
    name: str
    phone: Optional[str]

    class Config:
        from_attributes = True


# ==================== Клиенты ====================

@router.post("/auth/register", response_model=CustomerResponse, status_code=201)
def register(data: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    try:
        customer = register_customer(db, data.email, data.password, data.name, data.phone)
    except EmailAlreadyRegistered:
        raise HTTPException(status_code=400, detail="Email already registered")

    request.session[CUSTOMER_SESSION_KEY] = customer.id
    return customer


@router.post("/auth/login", response_model=CustomerResponse)
def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    customer = authenticate_customer(db, data.email, data.password)
    if not customer:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    request.session[CUSTOMER_SESSION_KEY] = customer.id
    return customer


@router.post("/auth/logout")
def logout(request: Request):
    request.session.pop(CUSTOMER_SESSION_KEY, None)
    return {"success": True}


@router.get("/auth/me")
def me(customer: Optional[Customer] = Depends(get_current_customer)):
    """Текущий клиент или {"customer": null}"""
    if not customer:
        return {"customer": None}
    return {"customer": CustomerResponse.model_validate(customer)}


@router.get("/customer/bookings")
def customer_bookings(
    customer: Customer = Depends(require_customer),
    db: Session = Depends(get_db),
    salon: Salon = Depends(get_salon),
    now: datetime = Depends(get_now)
):
    """Записи клиента: предстоящие и прошедшие"""
    upcoming, past = BookingService(db, salon).customer_bookings(customer, now.date())
    return {
        "upcoming": [to_response(b, now) for b in upcoming],
        "past": [to_response(b, now) for b in past]
    }


# ==================== Администратор ====================

@router.post("/admin/login")
def admin_login(data: AdminLoginRequest, request: Request):
    if not secrets.compare_digest(data.password.encode(), settings.ADMIN_PASSWORD.encode()):
        raise HTTPException(status_code=401, detail="Invalid password")

    request.session[ADMIN_SESSION_KEY] = True
    return {"success": True}


@router.post("/admin/logout")
def admin_logout(request: Request):
    request.session.pop(ADMIN_SESSION_KEY, None)
    return {"success": True}
