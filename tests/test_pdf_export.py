# tests/test_pdf_export.py
import re
from datetime import date

import pytest
from PIL import Image

from models.measurement_schemas import MeasurementResponse
from models.student_schemas import StudentResponse
from models.view_schemas import ChartKey, Gender
from services.errors import ExportError
from services import pdf_export, report_layout
from services.pdf_export import build_pdf, export_filename, generate_student_pdf, paginate
from services.report_layout import MIN_HEIGHT, WIDTH, render_report


def count_pages(pdf_bytes):
    return len(re.findall(rb"/Type\s*/Page(?!s)", pdf_bytes))


@pytest.fixture
def student():
    return StudentResponse(
        id="s-1",
        user_id="trainer-1",
        name="Maria  da Silva",
        email="maria@example.com",
        phone="",
        date_of_birth="1992-04-10"
    )


@pytest.fixture
def history():
    return [
        MeasurementResponse(
            id="m-2", student_id="s-1", weight=63.4, height=165, body_fat_percentage=24.5,
            waist_circumference=72.0, arm_circumference_left=28.0, calf_circumference_right=35.0,
            measured_at="2026-09-01T00:00:00+00:00", notes="Boa evolução no treino de pernas."
        ),
        MeasurementResponse(
            id="m-1", student_id="s-1", weight=65.0, height=165, body_fat_percentage=26.0,
            waist_circumference=75.0, measured_at="2026-06-01T00:00:00+00:00"
        ),
    ]


def test_paginate_650_units_gives_three_pages():
    assert paginate(650, 297) == [0, -297, -594]


def test_paginate_short_content_is_one_page():
    assert paginate(200, 297) == [0]


def test_paginate_exact_page_keeps_trailing_page():
    assert paginate(297, 297) == [0, -297]


def test_export_filename_collapses_whitespace():
    assert export_filename("Maria  da\tSilva", date(2026, 10, 19)) == "Maria_da_Silva_medicoes_2026-10-19.pdf"


def test_build_pdf_page_count_follows_image_height():
    # 840px wide at 4px/mm is 210mm; 2600px tall is 650mm
    image = Image.new("RGB", (840, 2600), "white")
    pdf_bytes = build_pdf(image)
    assert pdf_bytes.startswith(b"%PDF")
    assert count_pages(pdf_bytes) == 3


def test_render_report_is_a4_wide_and_at_least_one_page(student, history):
    image = render_report(student, history[0], Gender.FEMALE, [], history)
    assert image.width == WIDTH
    assert image.height >= MIN_HEIGHT


def test_render_report_grows_with_charts(student, history):
    without = render_report(student, history[0], Gender.MALE, [], history)
    with_charts = render_report(student, history[0], Gender.MALE, [ChartKey.PESO, ChartKey.CINTURA], history)
    assert with_charts.height > without.height


def test_unrenderable_charts_are_left_out(student, history):
    without = render_report(student, history[0], Gender.MALE, [], history)
    only_arm = render_report(student, history[0], Gender.MALE, [ChartKey.BRACO_ESQUERDO], history)
    assert only_arm.height == without.height


@pytest.mark.asyncio
async def test_generate_student_pdf(student, history):
    filename, pdf_bytes = await generate_student_pdf(student, history[0], Gender.MALE, [ChartKey.PESO], history)
    assert filename.startswith("Maria_da_Silva_medicoes_")
    assert filename.endswith(".pdf")
    assert count_pages(pdf_bytes) >= 1


@pytest.mark.asyncio
async def test_generate_student_pdf_wraps_failures(student, history, monkeypatch):
    def broken(*args, **kwargs):
        raise OSError("no display")

    monkeypatch.setattr(pdf_export, "render_report", broken)
    with pytest.raises(ExportError):
        await generate_student_pdf(student, history[0])


def test_font_falls_back_when_truetype_files_are_missing(monkeypatch):
    monkeypatch.setitem(report_layout.FONT_FILES, True, ("/nonexistent/NoSuchFont-Bold.ttf",))
    report_layout._font.cache_clear()
    try:
        font = report_layout._font(17, True)
        left, top, right, bottom = font.getbbox("Peso")
        assert right > left
    finally:
        report_layout._font.cache_clear()
