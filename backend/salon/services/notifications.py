"""
Сервис для отправки уведомлений
Письма клиентам (SMTP) и оповещения салону (Telegram)
"""
import logging
import smtplib
from dataclasses import dataclass
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from enum import Enum
from typing import Optional

import httpx

from ..config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    """Типы уведомлений"""
    NEW_BOOKING = "new_booking"
    CANCELLED_BOOKING = "cancelled_booking"


@dataclass(frozen=True)
class BookingNotice:
    """
    Снимок записи для фоновой отправки.
    Фоновые задачи выполняются после закрытия сессии БД,
    поэтому ORM-объект в них не передаётся.
    """
    booking_id: int
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    service_name: str
    booking_date: date
    start_time: str
    end_time: str
    cancel_token: str

    @classmethod
    def from_booking(cls, booking) -> "BookingNotice":
        return cls(
            booking_id=booking.id,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone,
            service_name=booking.service.name if booking.service else "-",
            booking_date=booking.booking_date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            cancel_token=booking.cancel_token
        )

    @property
    def details_url(self) -> str:
        return f"{settings.SITE_URL.rstrip('/')}/api/bookings/{self.cancel_token}"


class NotificationService:
    """Сервис для отправки писем и уведомлений в Telegram"""

    def __init__(self):
        self.bot_token = settings.TELEGRAM_SALON_BOT_TOKEN
        self.salon_chat_id = settings.TELEGRAM_SALON_CHAT_ID
        self.api_url = f"https://api.telegram.org/bot{self.bot_token}"

    async def send_telegram_message(
        self,
        chat_id: str,
        text: str,
        parse_mode: str = "HTML"
    ) -> bool:
        """
        Отправить сообщение в Telegram

        Args:
            chat_id: ID чата получателя
            text: Текст сообщения
            parse_mode: Режим парсинга (Markdown или HTML)

        Returns:
            bool: True если отправлено успешно
        """
        if not chat_id or not self.bot_token:
            logger.warning("Telegram не настроен, пропускаем отправку")
            return False

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.api_url}/sendMessage",
                    json={
                        "chat_id": chat_id,
                        "text": text,
                        "parse_mode": parse_mode
                    },
                    timeout=10.0
                )
        except httpx.HTTPError as e:
            logger.error("Исключение при отправке в Telegram: %s", e)
            return False

        if response.status_code != 200:
            logger.error("Ошибка отправки в Telegram: %s", response.text)
            return False

        logger.info("Уведомление отправлено в чат %s", chat_id)
        return True

    def send_email(self, to_email: str, subject: str, body: str) -> bool:
        """
        Отправить письмо через SMTP.
        Без SMTP_HOST письмо только пишется в лог (локальная разработка).
        """
        if not settings.SMTP_HOST:
            logger.info("SMTP не настроен, письмо для %s: %s\n%s", to_email, subject, body)
            return True

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = settings.EMAIL_FROM
        msg["To"] = to_email
        msg.attach(MIMEText(body, "plain", "utf-8"))

        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as server:
                if settings.SMTP_USE_TLS:
                    server.starttls()
                if settings.SMTP_USER and settings.SMTP_PASSWORD:
                    server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.sendmail(settings.EMAIL_FROM, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Не удалось отправить письмо %s: %s", to_email, e)
            return False

        logger.info("Письмо отправлено: %s", to_email)
        return True

    async def send_salon_alert(self, notification_type: NotificationType, notice: BookingNotice) -> bool:
        """Оповестить салон о новой записи или отмене"""
        if notification_type == NotificationType.NEW_BOOKING:
            title = "📅 <b>NEW BOOKING</b>"
        else:
            title = "❌ <b>BOOKING CANCELLED</b>"

        message = (
            f"{title}\n\n"
            f"👤 {notice.customer_name}\n"
            f"📞 {notice.customer_phone or '-'}\n"
            f"📧 {notice.customer_email}\n\n"
            f"💇 {notice.service_name}\n"
            f"📆 {notice.booking_date.strftime('%d.%m.%Y')} {notice.start_time}-{notice.end_time}\n"
            f"ID #{notice.booking_id}"
        )
        return await self.send_telegram_message(self.salon_chat_id, message)


# Глобальный экземпляр сервиса
notification_service = NotificationService()


# Фоновые задачи для роутеров

def send_booking_confirmation(notice: BookingNotice) -> bool:
    """Письмо клиенту о подтверждённой записи"""
    body = (
        f"Hi {notice.customer_name},\n\n"
        f"Your booking is confirmed.\n\n"
        f"Service: {notice.service_name}\n"
        f"Date: {notice.booking_date.isoformat()}\n"
        f"Time: {notice.start_time} - {notice.end_time}\n\n"
        f"Booking details: {notice.details_url}\n"
        f"Free cancellation up to 24 hours before the appointment.\n"
    )
    return notification_service.send_email(notice.customer_email, "Booking confirmation", body)


def send_booking_cancellation(notice: BookingNotice) -> bool:
    """Письмо клиенту об отменённой записи"""
    body = (
        f"Hi {notice.customer_name},\n\n"
        f"Your booking has been cancelled.\n\n"
        f"Service: {notice.service_name}\n"
        f"Date: {notice.booking_date.isoformat()}\n"
        f"Time: {notice.start_time} - {notice.end_time}\n"
    )
    return notification_service.send_email(notice.customer_email, "Booking cancelled", body)


async def notify_salon_new_booking(notice: BookingNotice):
    await notification_service.send_salon_alert(NotificationType.NEW_BOOKING, notice)


async def notify_salon_cancelled_booking(notice: BookingNotice):
    await notification_service.send_salon_alert(NotificationType.CANCELLED_BOOKING, notice)
