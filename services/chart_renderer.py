# services/chart_renderer.py
from html import escape

from models.view_schemas import ChartSeries
from services.chart_series import CHART_HEIGHT, CHART_WIDTH, chart_coordinates, format_value


def render_svg(chart: ChartSeries) -> str:
    """Line chart as a standalone SVG document: grid, line, dots, value and date labels"""
    coordinates = chart_coordinates(chart.points)
    grid_id = f"grid-{chart.key.value}"

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{CHART_WIDTH}" height="{CHART_HEIGHT}" '
        f'viewBox="0 0 {CHART_WIDTH} {CHART_HEIGHT}">',
        f'<title>{escape(chart.title)}</title>',
        '<defs>',
        f'<pattern id="{grid_id}" width="40" height="18" patternUnits="userSpaceOnUse">',
        '<path d="M 40 0 L 0 0 0 18" fill="none" stroke="#E5E7EB" stroke-width="0.5"/>',
        '</pattern>',
        '</defs>',
        f'<rect width="100%" height="100%" fill="url(#{grid_id})"/>',
    ]

    if len(coordinates) > 1:
        points = " ".join(f"{x:.1f},{y:.1f}" for x, y in coordinates)
        parts.append(f'<polyline fill="none" stroke="{chart.color}" stroke-width="2" points="{points}"/>')

    for (x, y), point in zip(coordinates, chart.points):
        label = escape(f"{format_value(point.value)}{chart.unit}")
        parts.append('<g>')
        parts.append(f'<circle cx="{x:.1f}" cy="{y:.1f}" r="3" fill="{chart.color}"/>')
        parts.append(f'<text x="{x:.1f}" y="{y - 8:.1f}" text-anchor="middle" font-size="10" fill="#374151">{label}</text>')
        parts.append(f'<text x="{x:.1f}" y="175" text-anchor="middle" font-size="8" fill="#6B7280">{escape(point.date)}</text>')
        parts.append('</g>')

    parts.append('</svg>')
    return "\n".join(parts)
