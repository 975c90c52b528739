# salon_booking/schemas/availability.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import UUID


class TimeSlot(BaseModel):
    """Bookable slot of a professional; derived, never persisted"""
    time: str = Field(..., description="Local start time, HH:MM")
    starts_at: datetime = Field(..., description="Slot start instant")
    ends_at: datetime = Field(..., description="Slot end instant")
    available: bool = Field(True, description="Always true for emitted slots")
    professional_id: UUID

    @field_validator("ends_at")
    @classmethod
    def end_after_start(cls, v: datetime, info) -> datetime:
        starts_at = info.data.get("starts_at")
        if starts_at and v <= starts_at:
            raise ValueError("End time must be after start time")
        return v


class AvailabilityResponse(BaseModel):
    """Slots of one professional on one local day"""
    salon_id: UUID
    professional_id: UUID
    date: str = Field(..., description="Requested local date, YYYY-MM-DD")
    timezone: str
    duration_minutes: int
    slots: List[TimeSlot] = Field(default_factory=list)


class RuleWindow(BaseModel):
    start_time: str
    end_time: str
    is_break: bool = False


class DayRules(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday")
    day_name: str
    windows: List[RuleWindow] = Field(default_factory=list)
    business_hours: Optional[RuleWindow] = Field(None, description="Salon hours for the day, if open")


class ProfessionalRulesDTO(BaseModel):
    professional_id: UUID
    professional_name: str
    timezone: str
    working_days: int = Field(0, ge=0, le=0b1111111, description="Bit n set = works on day n, 0=Sunday")
    days: List[DayRules] = Field(default_factory=list)
    message: Optional[str] = None
