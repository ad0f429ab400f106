"""
Админ-панель салона
Доступ: http://localhost:8000/admin
Логин: admin / Пароль: из .env (ADMIN_PASSWORD)
"""
import secrets
from typing import Optional

from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request
from wtforms import validators

from .config import get_settings
from .models.blocked_slot import BlockedSlot
from .models.booking import Booking
from .models.customer import Customer
from .models.service import Service
from .models.weekly_availability import WeeklyAvailability
from .routes.availability import TIME_PATTERN
from .routes.deps import ADMIN_SESSION_KEY
from .scheduling.timeutils import time_to_minutes

settings = get_settings()

ADMIN_USERNAME = "admin"

TIME_FORMAT_MESSAGE = "Время в формате HH:MM"


def check_period(start_time: Optional[str], end_time: Optional[str], required: bool = True) -> None:
    """
    Проверка интервала из формы админки.
    Без required пустой интервал означает весь день.
    """
    start_time = start_time or None
    end_time = end_time or None
    if not required and start_time is None and end_time is None:
        return
    if start_time is None or end_time is None:
        raise ValueError("Нужно указать и начало, и конец")
    if time_to_minutes(start_time) >= time_to_minutes(end_time):
        raise ValueError("Начало должно быть раньше конца")


def time_field(required: bool = True) -> dict:
    presence = validators.DataRequired() if required else validators.Optional()
    return {"validators": [presence, validators.Regexp(TIME_PATTERN, message=TIME_FORMAT_MESSAGE)]}


class AdminAuth(AuthenticationBackend):
    """Вход по паролю из настроек; флаг в сессии общий с /api/admin/login"""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = form.get("username") or ""
        password = form.get("password") or ""

        if username == ADMIN_USERNAME and secrets.compare_digest(
            password.encode(), settings.ADMIN_PASSWORD.encode()
        ):
            request.session.update({ADMIN_SESSION_KEY: True})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.pop(ADMIN_SESSION_KEY, None)
        return True

    async def authenticate(self, request: Request) -> bool:
        return bool(request.session.get(ADMIN_SESSION_KEY, False))


# ==================== МОДЕЛИ ДЛЯ АДМИНКИ ====================

class BookingAdmin(ModelView, model=Booking):
    """Записи клиентов"""
    name = "Запись"
    name_plural = "Записи"
    icon = "fa-solid fa-calendar-check"

    # Статус меняется через API, чтобы работали правила отмены
    can_create = False
    can_edit = False

    column_list = [
        Booking.id,
        Booking.booking_date,
        Booking.start_time,
        Booking.end_time,
        Booking.status,
        Booking.customer_name,
        Booking.customer_email,
        Booking.service,
        Booking.created_at
    ]
    column_searchable_list = [Booking.customer_name, Booking.customer_email, Booking.status]
    column_sortable_list = [Booking.booking_date, Booking.created_at, Booking.status]
    column_default_sort = [(Booking.booking_date, True)]
    column_details_exclude_list = [Booking.cancel_token]

    column_labels = {
        "id": "ID",
        "booking_date": "Дата",
        "start_time": "Начало",
        "end_time": "Конец",
        "status": "Статус",
        "customer_name": "Клиент",
        "customer_email": "Email",
        "customer_phone": "Телефон",
        "service": "Услуга",
        "created_at": "Создано"
    }


class CustomerAdmin(ModelView, model=Customer):
    """Клиенты"""
    name = "Клиент"
    name_plural = "Клиенты"
    icon = "fa-solid fa-users"

    can_create = False
    column_list = [Customer.id, Customer.name, Customer.email, Customer.phone, Customer.created_at]
    column_searchable_list = [Customer.name, Customer.email, Customer.phone]
    column_sortable_list = [Customer.name, Customer.created_at]
    column_details_exclude_list = [Customer.password_hash]
    form_excluded_columns = [Customer.password_hash]

    column_labels = {
        "id": "ID",
        "name": "Имя",
        "email": "Email",
        "phone": "Телефон",
        "created_at": "Дата регистрации"
    }


class ServiceAdmin(ModelView, model=Service):
    """Услуги"""
    name = "Услуга"
    name_plural = "Услуги"
    icon = "fa-solid fa-scissors"

    column_list = [
        Service.id,
        Service.name,
        Service.price,
        Service.duration_minutes,
        Service.is_active
    ]
    column_searchable_list = [Service.name]
    column_sortable_list = [Service.name, Service.price, Service.duration_minutes]

    form_args = {
        "name": {"validators": [validators.DataRequired(), validators.Length(min=2, max=100)]},
        "duration_minutes": {"validators": [validators.DataRequired(), validators.NumberRange(min=1, max=24 * 60)]},
        "price": {"validators": [validators.InputRequired(), validators.NumberRange(min=0)]}
    }

    column_labels = {
        "id": "ID",
        "name": "Название",
        "description": "Описание",
        "price": "Цена",
        "duration_minutes": "Длительность (мин)",
        "is_active": "Активна"
    }


class WeeklyAvailabilityAdmin(ModelView, model=WeeklyAvailability):
    """Часы работы"""
    name = "День недели"
    name_plural = "Часы работы"
    icon = "fa-solid fa-clock"

    can_create = False
    can_delete = False
    column_list = [
        WeeklyAvailability.day_of_week,
        WeeklyAvailability.start_time,
        WeeklyAvailability.end_time,
        WeeklyAvailability.is_available
    ]
    column_default_sort = [(WeeklyAvailability.day_of_week, False)]
    form_args = {
        "day_of_week": {"validators": [validators.InputRequired(), validators.NumberRange(min=0, max=6)]},
        "start_time": time_field(),
        "end_time": time_field()
    }

    column_labels = {
        "day_of_week": "День (0=Вс)",
        "start_time": "Начало",
        "end_time": "Конец",
        "is_available": "Рабочий"
    }

    async def on_model_change(self, data, model, is_created, request):
        check_period(data.get("start_time"), data.get("end_time"))


class BlockedSlotAdmin(ModelView, model=BlockedSlot):
    """Заблокированные периоды"""
    name = "Блокировка"
    name_plural = "Блокировки"
    icon = "fa-solid fa-ban"

    can_edit = False
    column_list = [
        BlockedSlot.id,
        BlockedSlot.blocked_date,
        BlockedSlot.start_time,
        BlockedSlot.end_time,
        BlockedSlot.reason
    ]
    column_sortable_list = [BlockedSlot.blocked_date]
    column_default_sort = [(BlockedSlot.blocked_date, True)]
    form_args = {
        "start_time": time_field(required=False),
        "end_time": time_field(required=False)
    }

    column_labels = {
        "blocked_date": "Дата",
        "start_time": "Начало",
        "end_time": "Конец",
        "reason": "Причина"
    }

    async def on_model_change(self, data, model, is_created, request):
        check_period(data.get("start_time"), data.get("end_time"), required=False)


def setup_admin(app, engine):
    """Настройка админ-панели"""
    authentication_backend = AdminAuth(secret_key=settings.SECRET_KEY)

    admin = Admin(
        app,
        engine,
        authentication_backend=authentication_backend,
        title="Salon Admin",
        base_url="/admin"
    )

    # Регистрация моделей
    admin.add_view(BookingAdmin)
    admin.add_view(CustomerAdmin)
    admin.add_view(ServiceAdmin)
    admin.add_view(WeeklyAvailabilityAdmin)
    admin.add_view(BlockedSlotAdmin)

    return admin
