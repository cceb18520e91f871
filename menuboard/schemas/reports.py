from pydantic import BaseModel
from typing import List, Optional

class ViewStatOut(BaseModel):
    promotion_id: str
    title: str
    count: int
    percentage: float

class PromotionViewReportOut(BaseModel):
    total_views: int
    active_promotions: int = 0
    top: Optional[ViewStatOut] = None
    stats: List[ViewStatOut]
    chart: List[ViewStatOut]
    pie: List[ViewStatOut]
