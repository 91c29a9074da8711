# tests/test_body_metrics.py
from datetime import date, timedelta, timezone

from utils.body_metrics import calculate_age, calculate_bmi, format_day_month, format_full_date, parse_timestamp


def test_age_is_zero_one_day_before_first_birthday():
    today = date(2026, 10, 19)
    birth = date(2025, 10, 20)
    assert calculate_age(birth, today) == 0


def test_age_is_one_on_first_birthday():
    today = date(2026, 10, 19)
    assert calculate_age(date(2025, 10, 19), today) == 1


def test_age_uses_month_and_day_not_year_difference():
    today = date(2026, 3, 1)
    assert calculate_age("1990-12-31", today) == 35
    assert calculate_age("1990-02-28", today) == 36


def test_age_with_real_today():
    birth = date.today() - timedelta(days=1)
    assert calculate_age(birth.isoformat()) == 0


def test_bmi_one_decimal():
    assert calculate_bmi(70, 175) == "22.9"
    assert calculate_bmi(80, 180) == "24.7"


def test_parse_timestamp_formats():
    assert parse_timestamp("2026-01-05").tzinfo == timezone.utc
    assert parse_timestamp("2026-01-05T10:00:00Z").hour == 10
    assert parse_timestamp("2026-01-05T10:00:00+00:00") == parse_timestamp("2026-01-05T10:00:00Z")


def test_parse_timestamp_trimmed_fractional_seconds():
    parsed = parse_timestamp("2026-10-02T10:20:30.12345+00:00")
    assert parsed.microsecond == 123450
    assert parse_timestamp("2026-10-02T10:20:30.1Z").microsecond == 100000
    assert parse_timestamp("2026-10-02T10:20:30.1234567+00:00").microsecond == 123456


def test_date_formatting():
    assert format_day_month("2026-01-05T00:00:00+00:00") == "05/01"
    assert format_full_date("2026-01-05T00:00:00Z") == "05/01/2026"
