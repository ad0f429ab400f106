"""
Модель салона (единственный ресурс расписания)
"""
from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base


class Salon(Base):
    """Салон и его владелец-мастер"""

    __tablename__ = "salons"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)  # имя мастера
    salon_name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    def __repr__(self):
        return f"<Salon {self.salon_name}>"
