from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date

from menuboard.models.core import DEFAULT_BADGE

DiscountTypeIn = Literal["percentage", "fixed"]

class PromotionIn(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    badge_text: str = DEFAULT_BADGE
    is_active: bool = True
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class PromotionPatch(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    badge_text: Optional[str] = None
    is_active: Optional[bool] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class PromotionOut(PromotionIn):
    id: str
    eligible: bool = False

class LinkIn(BaseModel):
    menu_item_id: str

class LinkPatch(BaseModel):
    discount_type: Optional[DiscountTypeIn] = None
    discount_value: Optional[float] = Field(default=None, ge=0)

class PromotionItemOut(BaseModel):
    id: str
    promotion_id: str
    menu_item_id: str
    discount_type: Optional[DiscountTypeIn] = None
    discount_value: Optional[float] = None
    item_name: Optional[str] = None
    price: Optional[float] = None
    discounted_price: Optional[float] = None

class CountdownOut(BaseModel):
    promotion_id: str
    expired: bool
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    display: Optional[str] = None
