# models/view_schemas.py
from pydantic import BaseModel
from typing import Optional, List
from enum import Enum

from models.measurement_schemas import MeasurementResponse
from models.student_schemas import StudentWithLatestMeasurement


class ChartKey(str, Enum):
    """Every measurement series a chart can be drawn for"""
    PESO = "peso"
    GORDURA = "gordura"
    PEITO = "peito"
    CINTURA = "cintura"
    QUADRIL = "quadril"
    BRACO_ESQUERDO = "bracoEsquerdo"
    BRACO_DIREITO = "bracoDireito"
    COXA_ESQUERDA = "coxaEsquerda"
    COXA_DIREITA = "coxaDireita"
    PANTURRILHA_ESQUERDA = "panturrilhaEsquerda"
    PANTURRILHA_DIREITA = "panturrilhaDireita"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ProfileTab(str, Enum):
    MEASUREMENTS = "measurements"
    CHARTS = "charts"


class SeriesPoint(BaseModel):
    date: str
    value: float


class ChartSeries(BaseModel):
    key: ChartKey
    title: str
    color: str
    unit: str
    points: List[SeriesPoint]


class TrendSummary(BaseModel):
    weight_change: Optional[str] = None
    body_fat_change: Optional[str] = None
    total_measurements: int = 0


class StudentCard(StudentWithLatestMeasurement):
    """One tile of the student grid"""
    age: int
    latest_bmi: Optional[str] = None


class DashboardStats(BaseModel):
    total_students: int = 0
    new_this_month: int = 0
    total_measurements: int = 0
    with_progress: int = 0


class StatCard(BaseModel):
    title: str
    value: int
    change: str


class DashboardResponse(BaseModel):
    stats: DashboardStats
    cards: List[StatCard]
    recent_students: List[StudentWithLatestMeasurement]


class ProfileHeader(BaseModel):
    id: str
    name: str
    email: str
    age: int
    can_export: bool


class ChartsTab(BaseModel):
    series: List[ChartSeries]
    summary: TrendSummary


class ProfileResponse(BaseModel):
    header: ProfileHeader
    active_tab: ProfileTab
    measurements: Optional[List[MeasurementResponse]] = None
    measurements_count: int = 0
    charts: Optional[ChartsTab] = None


class ChartOption(BaseModel):
    key: ChartKey
    title: str


class ExportOptions(BaseModel):
    has_measurement: bool
    requires_chart_selection: bool
    available_charts: List[ChartOption]


class ExportRequest(BaseModel):
    gender: Gender = Gender.MALE
    charts: List[ChartKey] = []
