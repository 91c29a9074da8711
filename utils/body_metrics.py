# utils/body_metrics.py
import re
from datetime import datetime, date, timezone
from typing import Optional, Union

# Postgres trims trailing zeros from fractional seconds; fromisoformat before 3.11 wants 3 or 6 digits
FRACTION_RE = re.compile(r'\.(\d+)')


def _pad_fraction(match) -> str:
    return '.' + match.group(1)[:6].ljust(6, '0')


def parse_timestamp(value: Union[str, datetime, date]) -> datetime:
    """
    Parse a timestamp coming back from Supabase.
    Accepts "YYYY-MM-DD", ISO datetimes with or without "Z" and with any number
    of fractional-second digits, and date/datetime objects.
    Naive values are treated as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif 'T' not in value and ' ' not in value.strip():
        dt = datetime.strptime(value.strip(), '%Y-%m-%d')
    else:
        text = FRACTION_RE.sub(_pad_fraction, value.strip().replace('Z', '+00:00'), count=1)
        dt = datetime.fromisoformat(text)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date(value: Union[str, datetime, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip()[:10], '%Y-%m-%d').date()


def calculate_age(birth_date: Union[str, date], today: Optional[date] = None) -> int:
    """Calendar-exact age in years"""
    birth = parse_date(birth_date)
    today = today or date.today()

    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def calculate_bmi(weight: float, height: float) -> str:
    """BMI from kg and cm, one decimal place"""
    height_in_meters = height / 100
    return f"{weight / (height_in_meters * height_in_meters):.1f}"


def format_day_month(value) -> str:
    return parse_timestamp(value).strftime('%d/%m')


def format_full_date(value) -> str:
    return parse_timestamp(value).strftime('%d/%m/%Y')
