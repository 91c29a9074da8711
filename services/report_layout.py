# services/report_layout.py
"""
Printable body-measurement report drawn off-screen with Pillow.

The layout is a stack of full-width blocks (header, student info, headline
metrics, body illustration, detail table, notes, evolution charts, footer).
Each block is drawn on its own image and the blocks are pasted one under
the other, so the final height follows the content.
"""
from datetime import datetime
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from models.measurement_schemas import MeasurementResponse
from models.student_schemas import StudentResponse
from models.view_schemas import ChartKey, ChartSeries, Gender
from services.chart_series import CHART_HEIGHT, CHART_WIDTH, build_charts, chart_coordinates, format_value
from utils.body_metrics import calculate_age, calculate_bmi, format_full_date

PX_PER_MM = 4
PAGE_WIDTH_MM = 210
PAGE_HEIGHT_MM = 297
WIDTH = PAGE_WIDTH_MM * PX_PER_MM
MIN_HEIGHT = PAGE_HEIGHT_MM * PX_PER_MM
MARGIN = 32
CONTENT_WIDTH = WIDTH - 2 * MARGIN
CHART_SCALE = 1.5

WHITE = "#FFFFFF"
BLUE = "#2563EB"
GRAY_50 = "#F9FAFB"
GRAY_200 = "#E5E7EB"
GRAY_500 = "#6B7280"
GRAY_600 = "#4B5563"
GRAY_700 = "#374151"
GRAY_800 = "#1F2937"
GRAY_900 = "#111827"

FONT_FILES = {
    False: ("DejaVuSans.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    True: ("DejaVuSans-Bold.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
}

# (label, background, label colour, value colour)
HEADLINE_STYLES = [
    ("PESO", "#EFF6FF", "#2563EB", "#1E40AF"),
    ("ALTURA", "#F0FDF4", "#16A34A", "#166534"),
    ("IMC", "#FFF7ED", "#EA580C", "#9A3412"),
    ("% GORDURA", "#FEF2F2", "#DC2626", "#991B1B"),
]

TRUNK_ROWS = [
    ('chest_circumference', 'Peito'),
    ('waist_circumference', 'Cintura'),
    ('hip_circumference', 'Quadril'),
]

LIMB_ROWS = [
    ('arm_circumference_left', 'Braço Esquerdo'),
    ('arm_circumference_right', 'Braço Direito'),
    ('thigh_circumference_left', 'Coxa Esquerda'),
    ('thigh_circumference_right', 'Coxa Direita'),
    ('calf_circumference_left', 'Panturrilha Esquerda'),
    ('calf_circumference_right', 'Panturrilha Direita'),
]

# Body outlines in a 250x400 box: circle (cx, cy, r), lines, ellipses (cx, cy, rx, ry)
BODY_OUTLINES = {
    Gender.MALE: {
        'head': (125, 30, 20),
        'lines': [
            (125, 50, 125, 65), (100, 65, 150, 65),
            (100, 65, 85, 140), (150, 65, 165, 140),
            (110, 65, 110, 180), (140, 65, 140, 180),
            (115, 190, 110, 320), (135, 190, 140, 320),
        ],
        'ellipses': [
            (125, 95, 30, 15), (125, 155, 25, 12), (125, 190, 28, 15),
            (115, 240, 12, 25), (135, 240, 12, 25),
            (110, 340, 10, 20), (140, 340, 10, 20),
        ],
    },
    Gender.FEMALE: {
        'head': (125, 30, 18),
        'lines': [
            (125, 48, 125, 62), (105, 62, 145, 62),
            (105, 62, 92, 135), (145, 62, 158, 135),
            (112, 62, 112, 170), (138, 62, 138, 170),
            (117, 185, 112, 320), (133, 185, 138, 320),
        ],
        'ellipses': [
            (125, 90, 28, 14), (125, 150, 20, 10), (125, 185, 32, 18),
            (117, 240, 15, 26), (133, 240, 15, 26),
            (112, 340, 12, 20), (138, 340, 12, 20),
        ],
    },
}

# Where each circumference label sits next to the illustration: (side, top)
BODY_LABELS = [
    ('chest_circumference', 'Peito', 'left', 80),
    ('arm_circumference_left', 'Braço E', 'left', 104),
    ('arm_circumference_right', 'Braço D', 'right', 104),
    ('waist_circumference', 'Cintura', 'left', 128),
    ('hip_circumference', 'Quadril', 'right', 160),
    ('thigh_circumference_left', 'Coxa E', 'left', 192),
    ('thigh_circumference_right', 'Coxa D', 'right', 192),
    ('calf_circumference_left', 'Panturrilha E', 'left', 340),
    ('calf_circumference_right', 'Panturrilha D', 'right', 340),
]


@lru_cache(maxsize=None)
def _font(size: int, bold: bool = False):
    for path in FONT_FILES[bold]:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _text_width(draw: ImageDraw.ImageDraw, text: str, font) -> float:
    left, _, right, _ = draw.textbbox((0, 0), text, font=font)
    return right - left


def _center_text(draw, cx: float, y: float, text: str, font, fill: str) -> None:
    draw.text((cx - _text_width(draw, text, font) / 2, y), text, font=font, fill=fill)


def _right_text(draw, right: float, y: float, text: str, font, fill: str) -> None:
    draw.text((right - _text_width(draw, text, font), y), text, font=font, fill=fill)


def _wrap(draw, text: str, font, width: float) -> List[str]:
    lines = []
    for paragraph in text.splitlines() or [""]:
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}".strip()
            if current and _text_width(draw, candidate, font) > width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


def _block(height: int) -> Tuple[Image.Image, ImageDraw.ImageDraw]:
    image = Image.new("RGB", (WIDTH, height), WHITE)
    return image, ImageDraw.Draw(image)


def _header_block() -> Image.Image:
    image, draw = _block(120)
    _center_text(draw, WIDTH / 2, 16, "FitTracker Pro", _font(30, True), BLUE)
    _center_text(draw, WIDTH / 2, 60, "Relatório de Medições Corporais", _font(20, True), GRAY_800)
    draw.line((MARGIN, 100, WIDTH - MARGIN, 100), fill=BLUE, width=3)
    return image


def _student_block(student: StudentResponse, measurement: MeasurementResponse, today=None) -> Image.Image:
    image, draw = _block(190)
    draw.rounded_rectangle((MARGIN, 8, WIDTH - MARGIN, 176), radius=8, fill=GRAY_50)
    draw.text((MARGIN + 24, 24), "Informações do Aluno", font=_font(18, True), fill=GRAY_800)

    label_font = _font(13)
    value_font = _font(16, True)
    column = CONTENT_WIDTH / 2
    fields = [
        ("Nome:", student.name),
        ("Idade:", f"{calculate_age(student.date_of_birth, today)} anos"),
        ("Data da Medição:", format_full_date(measurement.measured_at)),
    ]
    for index, (label, value) in enumerate(fields):
        x = MARGIN + 24 + (index % 2) * column
        y = 64 + (index // 2) * 54
        draw.text((x, y), label, font=label_font, fill=GRAY_600)
        draw.text((x, y + 18), value, font=value_font, fill=GRAY_900)
    return image


def _headline_block(measurement: MeasurementResponse) -> Image.Image:
    image, draw = _block(120)
    values = [
        f"{format_value(measurement.weight)}kg",
        f"{format_value(measurement.height)}cm",
        calculate_bmi(measurement.weight, measurement.height),
        f"{format_value(measurement.body_fat_percentage)}%" if measurement.body_fat_percentage is not None else "-",
    ]
    gap = 16
    box_width = (CONTENT_WIDTH - 3 * gap) / 4
    for index, ((label, background, label_color, value_color), value) in enumerate(zip(HEADLINE_STYLES, values)):
        left = MARGIN + index * (box_width + gap)
        draw.rounded_rectangle((left, 8, left + box_width, 104), radius=8, fill=background)
        _center_text(draw, left + box_width / 2, 24, label, _font(13, True), label_color)
        _center_text(draw, left + box_width / 2, 52, value, _font(26, True), value_color)
    return image


def _draw_body(draw, left: int, top: int, gender: Gender) -> None:
    outline = BODY_OUTLINES[Gender(gender)]
    stroke = GRAY_700

    cx, cy, r = outline['head']
    draw.ellipse((left + cx - r, top + cy - r, left + cx + r, top + cy + r), outline=stroke, width=2)
    for x1, y1, x2, y2 in outline['lines']:
        draw.line((left + x1, top + y1, left + x2, top + y2), fill=stroke, width=2)
    for cx, cy, rx, ry in outline['ellipses']:
        draw.ellipse((left + cx - rx, top + cy - ry, left + cx + rx, top + cy + ry), outline=stroke, width=2)


def _illustration_block(measurement: MeasurementResponse, gender: Gender) -> Image.Image:
    image, draw = _block(430)
    box_left = (WIDTH - 250) // 2
    box_top = 8
    draw.rounded_rectangle((box_left, box_top, box_left + 250, box_top + 400), radius=8, fill=GRAY_50, outline=GRAY_200)
    _draw_body(draw, box_left, box_top, gender)

    font = _font(12, True)
    for field, label, side, top in BODY_LABELS:
        value = getattr(measurement, field)
        if value is None:
            continue
        text = f"{label}: {format_value(value)}cm"
        text_width = _text_width(draw, text, font)
        if side == 'left':
            x = box_left - 10 - text_width - 8
        else:
            x = box_left + 250 + 10
        y = box_top + top
        draw.rounded_rectangle((x, y, x + text_width + 8, y + 20), radius=4, fill=WHITE, outline=GRAY_200)
        draw.text((x + 4, y + 3), text, font=font, fill=GRAY_900)
    return image


def _detail_rows(measurement: MeasurementResponse):
    basic = [
        ("Peso:", f"{format_value(measurement.weight)} kg"),
        ("Altura:", f"{format_value(measurement.height)} cm"),
        ("IMC:", calculate_bmi(measurement.weight, measurement.height)),
        ("% Gordura:", f"{format_value(measurement.body_fat_percentage)}%" if measurement.body_fat_percentage is not None else "-"),
    ]
    trunk = [(f"{label}:", f"{format_value(getattr(measurement, field))} cm")
             for field, label in TRUNK_ROWS if getattr(measurement, field) is not None]
    limbs = [(f"{label}:", f"{format_value(getattr(measurement, field))} cm")
             for field, label in LIMB_ROWS if getattr(measurement, field) is not None]
    return [("Medidas Básicas", basic), ("Tronco", trunk), ("Membros", limbs)]


def _detail_block(measurement: MeasurementResponse) -> Image.Image:
    columns = _detail_rows(measurement)
    row_height = 28
    max_rows = max(len(rows) for _, rows in columns)
    image, draw = _block(90 + max_rows * row_height)

    draw.text((MARGIN, 8), "Medições Detalhadas", font=_font(18, True), fill=GRAY_800)
    gap = 16
    column_width = (CONTENT_WIDTH - 2 * gap) / 3
    label_font = _font(13)
    value_font = _font(13, True)
    for index, (title, rows) in enumerate(columns):
        left = MARGIN + index * (column_width + gap)
        right = left + column_width
        draw.text((left, 44), title, font=_font(14, True), fill=GRAY_700)
        for row, (label, value) in enumerate(rows):
            y = 76 + row * row_height
            draw.text((left, y), label, font=label_font, fill=GRAY_600)
            _right_text(draw, right, y, value, value_font, GRAY_900)
            draw.line((left, y + row_height - 6, right, y + row_height - 6), fill=GRAY_200, width=1)
    return image


def _notes_block(notes: str) -> Image.Image:
    probe = ImageDraw.Draw(Image.new("RGB", (1, 1)))
    font = _font(13)
    lines = _wrap(probe, notes, font, CONTENT_WIDTH - 24)
    line_height = 20
    image, draw = _block(60 + len(lines) * line_height + 16)

    draw.text((MARGIN, 4), "Observações", font=_font(16, True), fill=GRAY_800)
    draw.rounded_rectangle((MARGIN, 36, WIDTH - MARGIN, 36 + len(lines) * line_height + 20), radius=8, fill=GRAY_50)
    for index, line in enumerate(lines):
        draw.text((MARGIN + 12, 46 + index * line_height), line, font=font, fill=GRAY_700)
    return image


def _charts_title_block() -> Image.Image:
    image, draw = _block(52)
    draw.text((MARGIN, 8), "Gráficos de Evolução", font=_font(18, True), fill=GRAY_800)
    draw.line((MARGIN, 40, WIDTH - MARGIN, 40), fill=GRAY_200, width=1)
    return image


def _chart_block(chart: ChartSeries) -> Image.Image:
    plot_width = int(CHART_WIDTH * CHART_SCALE)
    plot_height = int(CHART_HEIGHT * CHART_SCALE)
    image, draw = _block(plot_height + 84)

    draw.text((MARGIN, 4), chart.title, font=_font(15, True), fill=GRAY_900)
    draw.rounded_rectangle((MARGIN, 32, WIDTH - MARGIN, 32 + plot_height + 40), radius=8, fill=GRAY_50)

    left = (WIDTH - plot_width) // 2
    top = 52
    for gx in range(0, CHART_WIDTH + 1, 40):
        x = left + gx * CHART_SCALE
        draw.line((x, top, x, top + plot_height), fill=GRAY_200, width=1)
    for gy in range(0, CHART_HEIGHT + 1, 18):
        y = top + gy * CHART_SCALE
        draw.line((left, y, left + plot_width, y), fill=GRAY_200, width=1)

    scaled = [(left + x * CHART_SCALE, top + y * CHART_SCALE) for x, y in chart_coordinates(chart.points)]
    if len(scaled) > 1:
        draw.line(scaled, fill=chart.color, width=3, joint="curve")

    value_font = _font(14)
    date_font = _font(12)
    for (x, y), point in zip(scaled, chart.points):
        draw.ellipse((x - 4, y - 4, x + 4, y + 4), fill=chart.color)
        _center_text(draw, x, y - 24, f"{format_value(point.value)}{chart.unit}", value_font, GRAY_700)
        _center_text(draw, x, top + 168 * CHART_SCALE, point.date, date_font, GRAY_500)
    return image


def _footer_block(generated_at: datetime) -> Image.Image:
    image, draw = _block(90)
    draw.line((MARGIN, 12, WIDTH - MARGIN, 12), fill=GRAY_200, width=1)
    font = _font(12)
    _center_text(draw, WIDTH / 2, 28, f"Relatório gerado em {generated_at.strftime('%d/%m/%Y %H:%M')}", font, GRAY_500)
    _center_text(draw, WIDTH / 2, 50, "FitTracker Pro - Sistema de Gerenciamento para Personal Trainers", font, GRAY_500)
    return image


def _stack(blocks: Sequence[Image.Image]) -> Image.Image:
    height = max(sum(block.height for block in blocks) + 2 * MARGIN, MIN_HEIGHT)
    page = Image.new("RGB", (WIDTH, height), WHITE)
    y = MARGIN
    for block in blocks:
        page.paste(block, (0, y))
        y += block.height
    return page


def render_report(
    student: StudentResponse,
    measurement: MeasurementResponse,
    gender: Gender = Gender.MALE,
    chart_keys: Sequence[ChartKey] = (),
    measurements: Sequence[MeasurementResponse] = (),
    generated_at: Optional[datetime] = None
) -> Image.Image:
    """Draw the full report for one measurement and return it as an RGB image"""
    generated_at = generated_at or datetime.now()

    blocks = [
        _header_block(),
        _student_block(student, measurement, generated_at.date()),
        _headline_block(measurement),
        _illustration_block(measurement, gender),
        _detail_block(measurement),
    ]

    if measurement.notes:
        blocks.append(_notes_block(measurement.notes))

    charts = build_charts(chart_keys, measurements) if chart_keys else []
    if charts:
        blocks.append(_charts_title_block())
        blocks.extend(_chart_block(chart) for chart in charts)

    blocks.append(_footer_block(generated_at))
    return _stack(blocks)
