# models/student_schemas.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import date

from models.measurement_schemas import MeasurementResponse


class StudentCreate(BaseModel):
    """Student form payload"""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = ""
    date_of_birth: date


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None


class StudentResponse(BaseModel):
    id: str
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class StudentWithLatestMeasurement(StudentResponse):
    latest_measurement: Optional[MeasurementResponse] = None
    measurements_count: int = 0
