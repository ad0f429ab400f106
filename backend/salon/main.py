"""
Главный файл FastAPI приложения
Salon Booking System
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .admin import setup_admin
from .config import get_settings
from .database import SessionLocal, engine, init_db
from .routes.auth import router as auth_router
from .routes.availability import router as availability_router
from .routes.blocked_slots import router as blocked_slots_router
from .routes.bookings import router as bookings_router
from .routes.services import router as services_router
from .seed import seed_defaults

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Создание таблиц и начальных данных
    init_db(engine)
    db = SessionLocal()
    try:
        salon = seed_defaults(db)
        logger.info("Salon ready: %s (env=%s)", salon.salon_name, settings.ENVIRONMENT)
    finally:
        db.close()

    yield

    engine.dispose()


# FastAPI приложение
app = FastAPI(
    title="Salon Booking API",
    description="API для системы онлайн-записи",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else [settings.SITE_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Сессии клиентов и администратора
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    https_only=settings.ENVIRONMENT == "production",
)

# Подключение роутеров
app.include_router(services_router)
app.include_router(availability_router)
app.include_router(blocked_slots_router)
app.include_router(bookings_router)
app.include_router(auth_router)

# Админ-панель
setup_admin(app, engine)


@app.get("/health")
async def health_check():
    return {"status": "ok", "environment": settings.ENVIRONMENT}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("salon.main:app", host="127.0.0.1", port=8000, reload=settings.DEBUG)
