from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional
from room_admin.utils.validation_helpers import to_naive_utc


class BookingCreate(BaseModel):
    title: str = Field(min_length=3)
    room_id: int
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, value):
        return to_naive_utc(value)


class BookingUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3)
    room_id: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, value):
        return to_naive_utc(value)


class BookingResponse(BaseModel):
    id: int
    title: str
    room_id: int
    user_id: int
    start_time: datetime
    end_time: datetime
    created_at: datetime
    room_name: Optional[str] = None
    user_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TimeSlot(BaseModel):
    start_time: datetime
    end_time: datetime
