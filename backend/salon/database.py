"""
Подключение к базе данных (PostgreSQL или SQLite)
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import get_settings

settings = get_settings()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Создать движок базы данных.
    Владельцем движка является приложение (lifespan в main.py),
    сервисы получают только сессию.
    """
    if database_url.startswith("sqlite"):
        # SQLite - для локальной разработки и тестов
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo
        )

    # PostgreSQL - для продакшена
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=echo
    )


# Создание движка базы данных
engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Создание фабрики сессий
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Базовый класс для моделей
Base = declarative_base()


def get_db():
    """
    Dependency для получения сессии базы данных
    Использование:
        @router.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """
    Инициализация базы данных
    Создание всех таблиц, определенных в моделях
    """
    # Импорт регистрирует модели и DDL-события в метаданных
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
