# models/measurement_schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone

CIRCUMFERENCE_FIELDS = [
    'chest_circumference',
    'waist_circumference',
    'hip_circumference',
    'arm_circumference_left',
    'arm_circumference_right',
    'thigh_circumference_left',
    'thigh_circumference_right',
    'calf_circumference_left',
    'calf_circumference_right',
]

# Columns fetched when students are joined with their history
MEASUREMENT_COLUMNS = ['id', 'student_id', 'weight', 'height', 'body_fat_percentage'] + CIRCUMFERENCE_FIELDS + ['measured_at']


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _form_date_to_timestamp(value):
    """'YYYY-MM-DD' from the form becomes midnight UTC; full timestamps pass through"""
    if isinstance(value, str) and 'T' not in value:
        day = datetime.strptime(value.strip(), '%Y-%m-%d')
        return day.replace(tzinfo=timezone.utc).isoformat()
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class MeasurementCreate(BaseModel):
    """Measurement form payload. Optional numbers may arrive as blank strings."""
    student_id: str
    weight: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    body_fat_percentage: float = Field(..., ge=0, le=100)

    chest_circumference: Optional[float] = None
    waist_circumference: Optional[float] = None
    hip_circumference: Optional[float] = None
    arm_circumference_left: Optional[float] = None
    arm_circumference_right: Optional[float] = None
    thigh_circumference_left: Optional[float] = None
    thigh_circumference_right: Optional[float] = None
    calf_circumference_left: Optional[float] = None
    calf_circumference_right: Optional[float] = None

    measured_at: str
    notes: Optional[str] = None

    @field_validator(*CIRCUMFERENCE_FIELDS, 'notes', mode='before')
    @classmethod
    def blank_optional(cls, value):
        return _blank_to_none(value)

    @field_validator('measured_at', mode='before')
    @classmethod
    def normalize_measured_at(cls, value):
        return _form_date_to_timestamp(value)


class MeasurementUpdate(BaseModel):
    weight: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    body_fat_percentage: Optional[float] = Field(None, ge=0, le=100)

    chest_circumference: Optional[float] = None
    waist_circumference: Optional[float] = None
    hip_circumference: Optional[float] = None
    arm_circumference_left: Optional[float] = None
    arm_circumference_right: Optional[float] = None
    thigh_circumference_left: Optional[float] = None
    thigh_circumference_right: Optional[float] = None
    calf_circumference_left: Optional[float] = None
    calf_circumference_right: Optional[float] = None

    measured_at: Optional[str] = None
    notes: Optional[str] = None

    @field_validator(*CIRCUMFERENCE_FIELDS, 'notes', mode='before')
    @classmethod
    def blank_optional(cls, value):
        return _blank_to_none(value)

    @field_validator('measured_at', mode='before')
    @classmethod
    def normalize_measured_at(cls, value):
        return _form_date_to_timestamp(_blank_to_none(value))


class MeasurementResponse(BaseModel):
    id: str
    student_id: str
    user_id: Optional[str] = None
    weight: float
    height: float
    body_fat_percentage: Optional[float] = None

    chest_circumference: Optional[float] = None
    waist_circumference: Optional[float] = None
    hip_circumference: Optional[float] = None
    arm_circumference_left: Optional[float] = None
    arm_circumference_right: Optional[float] = None
    thigh_circumference_left: Optional[float] = None
    thigh_circumference_right: Optional[float] = None
    calf_circumference_left: Optional[float] = None
    calf_circumference_right: Optional[float] = None

    measured_at: str
    created_at: Optional[str] = None
    notes: Optional[str] = None
