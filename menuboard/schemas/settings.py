from pydantic import BaseModel, Field
from typing import Optional

class DayHours(BaseModel):
    open: str = "08:00"
    close: str = "22:00"
    closed: bool = False

class WeeklyHours(BaseModel):
    monday: Optional[DayHours] = None
    tuesday: Optional[DayHours] = None
    wednesday: Optional[DayHours] = None
    thursday: Optional[DayHours] = None
    friday: Optional[DayHours] = None
    saturday: Optional[DayHours] = None
    sunday: Optional[DayHours] = None

class RestaurantSettingsIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    instagram: Optional[str] = None
    address: Optional[str] = None
    opening_hours: Optional[WeeklyHours] = None

class RestaurantSettingsOut(BaseModel):
    id: str
    name: str
    logo_url: Optional[str] = None
    primary_color: str
    secondary_color: str
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    instagram: Optional[str] = None
    address: Optional[str] = None
    opening_hours: Optional[dict] = None
    is_open: bool = False
