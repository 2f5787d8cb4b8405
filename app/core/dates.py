"""
Fechas de calendario sin zona horaria.

Las fechas de vencimiento viajan como `YYYY-MM-DD`. Cualquier valor con hora
se trunca a su parte de fecha antes de guardarse o compararse, para evitar
corrimientos de un día en los bordes de medianoche.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.config import get_settings


def parse_calendar_date(value: date | datetime | str | None) -> date | None:
    """
    Convierte la entrada a `date`.

    Acepta `date`, `datetime` (se descarta la hora) y cadenas ISO con o sin
    componente horario (`2025-01-20`, `2025-01-20T05:00:00.000Z`).
    Cadena vacía o None → None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        date_part = text.split("T")[0].split(" ")[0]
        try:
            return date.fromisoformat(date_part)
        except ValueError:
            raise ValueError(f"Fecha inválida: '{value}'. Use el formato YYYY-MM-DD")
    raise ValueError(f"Tipo de fecha no soportado: {type(value).__name__}")


def today() -> date:
    """Fecha actual en la zona horaria configurada."""
    return datetime.now(ZoneInfo(get_settings().TIMEZONE)).date()


def days_between(start: date, end: date) -> int:
    """Días de calendario desde `start` hasta `end` (negativo si `end` ya pasó)."""
    return (end - start).days
