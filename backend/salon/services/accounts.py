"""
Аккаунты клиентов: регистрация и вход
"""
import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..models.customer import Customer

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class EmailAlreadyRegistered(Exception):
    """Аккаунт с таким email уже существует"""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def get_customer_by_email(db: Session, email: str) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.email == email.lower()).first()


def register_customer(db: Session, email: str, password: str, name: str, phone: str = None) -> Customer:
    if get_customer_by_email(db, email):
        raise EmailAlreadyRegistered(email)

    customer = Customer(
        email=email.lower(),
        password_hash=hash_password(password),
        name=name,
        phone=phone
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info("Customer registered: %s", customer.email)
    return customer


def authenticate_customer(db: Session, email: str, password: str) -> Optional[Customer]:
    """Клиент по email и паролю или None"""
    customer = get_customer_by_email(db, email)
    if not customer or not verify_password(password, customer.password_hash):
        return None
    return customer
