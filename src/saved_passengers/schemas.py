from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from src.seats.schemas import Gender

class SavedPassengerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    age: int = Field(..., ge=1, le=120)
    gender: Gender
    is_default: bool = False

    class Config:
        use_enum_values = True

class SavedPassengerCreate(SavedPassengerBase):
    pass

class SavedPassengerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    age: Optional[int] = Field(None, ge=1, le=120)
    gender: Optional[Gender] = None
    is_default: Optional[bool] = None

    class Config:
        use_enum_values = True

class SavedPassenger(SavedPassengerBase):
    id: int
    user_id: int
    created_at: datetime

    class Config:
        from_attributes = True
