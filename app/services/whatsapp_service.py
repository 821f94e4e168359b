"""wa.me deep links with prefilled messages."""
import re
from datetime import date, time
from urllib.parse import quote

from app.core.config import settings

WHATSAPP_BASE_URL = "https://wa.me"

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str, country_code: str | None = None) -> str:
    """Digits only, prefixed with the country code when it is missing."""
    country_code = country_code or settings.whatsapp_country_code
    digits = _NON_DIGITS.sub("", phone)
    if digits.startswith(country_code):
        return digits
    return f"{country_code}{digits}"


def build_whatsapp_url(phone: str, text: str) -> str:
    return f"{WHATSAPP_BASE_URL}/{_NON_DIGITS.sub('', phone)}?text={quote(text, safe='')}"


def contact_message() -> str:
    return f"Olá! Gostaria de saber mais sobre os cursos do {settings.site_name}."


def contact_url() -> str:
    return build_whatsapp_url(settings.whatsapp_phone, contact_message())


def enrollment_message(
    name: str, email: str, phone: str, course_title: str, message: str | None = None
) -> str:
    return (
        "*Nova Inscrição pelo Site*\n\n"
        f"*Nome:* {name}\n"
        f"*Email:* {email}\n"
        f"*WhatsApp:* {phone}\n"
        f"*Curso de Interesse:* {course_title}\n"
        f"*Mensagem:* {message or 'Sem mensagem'}"
    )


def appointment_message(
    client_name: str, service_name: str, appointment_date: date, appointment_time: time
) -> str:
    """Opening line the admin sends a client about their appointment."""
    return (
        f"Olá {client_name}! Sobre seu agendamento de {service_name} "
        f"no dia {appointment_date.strftime('%d/%m/%Y')} às {appointment_time.strftime('%H:%M')}..."
    )


def appointment_url(
    client_phone: str,
    client_name: str,
    service_name: str,
    appointment_date: date,
    appointment_time: time,
) -> str:
    return build_whatsapp_url(
        normalize_phone(client_phone),
        appointment_message(client_name, service_name, appointment_date, appointment_time),
    )
