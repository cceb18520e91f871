from pydantic import BaseModel, Field
from typing import Optional

class CategoryIn(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    display_order: int = 0

class CategoryPatch(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    display_order: Optional[int] = None

class CategoryOut(CategoryIn):
    id: str
    item_count: int = 0

class MenuItemIn(BaseModel):
    category_id: str
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(ge=0)
    image_url: Optional[str] = None
    is_active: bool = True

class MenuItemPatch(BaseModel):
    category_id: Optional[str] = None
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    is_active: Optional[bool] = None

class MenuItemOut(MenuItemIn):
    id: str
    category_name: Optional[str] = None
