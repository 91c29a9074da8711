# services/chart_series.py
"""
Evolution series derived from a student's measurement history.

Every chart in the product (profile tab, SVG endpoint, PDF report) goes
through extract_series(), so the "at least two points" rule applies the
same way everywhere.
"""
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from models.measurement_schemas import MeasurementResponse
from models.view_schemas import ChartKey, ChartSeries, SeriesPoint, TrendSummary
from utils.body_metrics import format_day_month, parse_timestamp

MIN_POINTS = 2

# Drawing box shared by the SVG and raster renderers
CHART_WIDTH = 400
CHART_HEIGHT = 180


class ChartMeta(NamedTuple):
    field: str
    title: str
    color: str
    unit: str


CHART_META: Dict[ChartKey, ChartMeta] = {
    ChartKey.PESO: ChartMeta('weight', 'Evolução do Peso', '#3B82F6', 'kg'),
    ChartKey.GORDURA: ChartMeta('body_fat_percentage', 'Evolução da % de Gordura', '#EF4444', '%'),
    ChartKey.PEITO: ChartMeta('chest_circumference', 'Circunferência do Peito', '#F59E0B', 'cm'),
    ChartKey.CINTURA: ChartMeta('waist_circumference', 'Circunferência da Cintura', '#10B981', 'cm'),
    ChartKey.QUADRIL: ChartMeta('hip_circumference', 'Circunferência do Quadril', '#8B5CF6', 'cm'),
    ChartKey.BRACO_ESQUERDO: ChartMeta('arm_circumference_left', 'Circunferência do Braço Esquerdo', '#F97316', 'cm'),
    ChartKey.BRACO_DIREITO: ChartMeta('arm_circumference_right', 'Circunferência do Braço Direito', '#FB7185', 'cm'),
    ChartKey.COXA_ESQUERDA: ChartMeta('thigh_circumference_left', 'Circunferência da Coxa Esquerda', '#06B6D4', 'cm'),
    ChartKey.COXA_DIREITA: ChartMeta('thigh_circumference_right', 'Circunferência da Coxa Direita', '#0EA5E9', 'cm'),
    ChartKey.PANTURRILHA_ESQUERDA: ChartMeta('calf_circumference_left', 'Circunferência da Panturrilha Esquerda', '#84CC16', 'cm'),
    ChartKey.PANTURRILHA_DIREITA: ChartMeta('calf_circumference_right', 'Circunferência da Panturrilha Direita', '#22C55E', 'cm'),
}


def value_for(measurement: MeasurementResponse, key: ChartKey) -> Optional[float]:
    return getattr(measurement, CHART_META[ChartKey(key)].field)


def sort_ascending(measurements: Sequence[MeasurementResponse]) -> List[MeasurementResponse]:
    return sorted(measurements, key=lambda m: parse_timestamp(m.measured_at))


def extract_series(key: ChartKey, measurements: Sequence[MeasurementResponse]) -> List[SeriesPoint]:
    """
    Time-ascending (dd/MM, value) points for one key.

    Measurements without a value for the key are skipped. Returns an empty
    list when the result would have fewer than two points.
    """
    key = ChartKey(key)
    if len(measurements) < MIN_POINTS:
        return []

    points = []
    for measurement in sort_ascending(measurements):
        value = value_for(measurement, key)
        if value is None:
            continue
        points.append(SeriesPoint(date=format_day_month(measurement.measured_at), value=value))

    if len(points) < MIN_POINTS:
        return []
    return points


def build_chart(key: ChartKey, measurements: Sequence[MeasurementResponse]) -> Optional[ChartSeries]:
    points = extract_series(key, measurements)
    if not points:
        return None
    meta = CHART_META[ChartKey(key)]
    return ChartSeries(key=key, title=meta.title, color=meta.color, unit=meta.unit, points=points)


def build_charts(keys: Sequence[ChartKey], measurements: Sequence[MeasurementResponse]) -> List[ChartSeries]:
    """Renderable charts for the requested keys, in enumeration order"""
    wanted = {ChartKey(k) for k in keys}
    charts = []
    for key in ChartKey:
        if key not in wanted:
            continue
        chart = build_chart(key, measurements)
        if chart:
            charts.append(chart)
    return charts


def available_charts(measurements: Sequence[MeasurementResponse]) -> List[ChartKey]:
    """Keys with at least one recorded value somewhere in the history"""
    return [
        key for key in ChartKey
        if any(value_for(m, key) is not None for m in measurements)
    ]


def chart_coordinates(points: Sequence[SeriesPoint]) -> List[Tuple[float, float]]:
    """Map points into the 400x180 chart box, values scaled between min and max"""
    if not points:
        return []
    values = [p.value for p in points]
    min_val = min(values)
    value_range = (max(values) - min_val) or 1
    steps = max(len(points) - 1, 1)

    coordinates = []
    for index, point in enumerate(points):
        x = (index / steps) * 360 + 20
        y = 160 - ((point.value - min_val) / value_range) * 120
        coordinates.append((x, y))
    return coordinates


def _change(points: List[SeriesPoint]) -> Optional[str]:
    if not points:
        return None
    return f"{points[-1].value - points[0].value:.1f}"


def summarize_trends(measurements: Sequence[MeasurementResponse]) -> TrendSummary:
    """Variation since the first measurement, only for renderable series"""
    return TrendSummary(
        weight_change=_change(extract_series(ChartKey.PESO, measurements)),
        body_fat_change=_change(extract_series(ChartKey.GORDURA, measurements)),
        total_measurements=len(measurements)
    )


def format_value(value: float) -> str:
    """70.0 -> "70", 70.5 -> "70.5" """
    return f"{value:.2f}".rstrip('0').rstrip('.')
