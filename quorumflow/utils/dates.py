# file: utils/dates.py

from datetime import date, datetime, timedelta, timezone
from typing import Tuple, Union

MONTHS_ES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

WEEKDAYS_ES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")

DateLike = Union[date, datetime]


def year_range(year: int) -> Tuple[datetime, datetime]:
    """Half-open range [Jan 1 of year, Jan 1 of year + 1)."""
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)


def in_year(value: datetime, year: int) -> bool:
    start, end = year_range(year)
    return start <= value < end


def as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_from(today: date, days: int) -> date:
    return today + timedelta(days=days)


def format_short_date(value: DateLike) -> str:
    """dd/MM/yyyy"""
    return value.strftime("%d/%m/%Y")


def format_long_date(value: DateLike) -> str:
    """d MMMM yyyy, e.g. ``5 marzo 2024``."""
    return f"{value.day} {MONTHS_ES[value.month - 1]} {value.year}"


def format_weekday_date(value: DateLike) -> str:
    """EEEE d 'de' MMMM yyyy, e.g. ``martes 5 de marzo 2024``."""
    weekday = WEEKDAYS_ES[value.weekday()]
    return f"{weekday} {value.day} de {MONTHS_ES[value.month - 1]} {value.year}"


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Stored datetimes are naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_full_date(value: DateLike) -> str:
    """dd 'de' MMMM 'de' yyyy, e.g. ``05 de marzo de 2024``."""
    return f"{value.day:02d} de {MONTHS_ES[value.month - 1]} de {value.year}"


def format_month_year(value: DateLike) -> str:
    """MMMM yyyy, e.g. ``marzo 2024``."""
    return f"{MONTHS_ES[value.month - 1]} {value.year}"


def format_generation_time(value: datetime) -> str:
    """d 'de' MMMM 'de' yyyy 'a las' HH:mm."""
    return f"{value.day} de {MONTHS_ES[value.month - 1]} de {value.year} a las {value:%H:%M}"
