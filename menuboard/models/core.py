from sqlalchemy import (
    String, ForeignKey, Boolean, Numeric, Enum, Text, Date, Integer, JSON, UniqueConstraint
)
from sqlalchemy.orm import Mapped, mapped_column
from enum import Enum as PyEnum
from datetime import date
from decimal import Decimal
from menuboard.db import Base
from menuboard.models.common import IdMixin, TSMixin

# ── Enums ───────────────────────────────────────────────────────────────────
class DiscountType(PyEnum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

class AppRole(PyEnum):
    ADMIN = "admin"
    USER = "user"

DEFAULT_BADGE = "Promoção"

# ── Identity ────────────────────────────────────────────────────────────────
class User(Base, IdMixin, TSMixin):
    __tablename__ = "users"
    email: Mapped[str] = mapped_column(String(160), unique=True)
    pass_hash: Mapped[str] = mapped_column(String(200))
    active: Mapped[bool] = mapped_column(Boolean, default=True)

class UserRole(Base, TSMixin):
    __tablename__ = "user_roles"
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), primary_key=True)
    role: Mapped[AppRole] = mapped_column(Enum(AppRole, values_callable=lambda e: [m.value for m in e]), default=AppRole.USER)

# ── Settings ────────────────────────────────────────────────────────────────
class RestaurantSettings(Base, IdMixin, TSMixin):
    __tablename__ = "restaurant_settings"
    name: Mapped[str] = mapped_column(String(200))
    logo_url: Mapped[str | None] = mapped_column(String(400))
    primary_color: Mapped[str] = mapped_column(String(16), default="#5a7a5a")
    secondary_color: Mapped[str] = mapped_column(String(16), default="#f5f0e8")
    phone: Mapped[str | None] = mapped_column(String(20))
    whatsapp: Mapped[str | None] = mapped_column(String(20))
    instagram: Mapped[str | None] = mapped_column(String(80))
    address: Mapped[str | None] = mapped_column(Text)
    opening_hours: Mapped[dict | None] = mapped_column(JSON)  # {"monday": {"open": "08:00", "close": "22:00", "closed": false}, ...}

# ── Menu ────────────────────────────────────────────────────────────────────
class Category(Base, IdMixin, TSMixin):
    __tablename__ = "categories"
    name: Mapped[str] = mapped_column(String(120))
    description: Mapped[str | None] = mapped_column(Text)
    display_order: Mapped[int] = mapped_column(Integer, default=0)

class MenuItem(Base, IdMixin, TSMixin):
    __tablename__ = "menu_items"
    category_id: Mapped[str] = mapped_column(String(36), ForeignKey("categories.id"))
    name: Mapped[str] = mapped_column(String(160))
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    image_url: Mapped[str | None] = mapped_column(String(400))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

# ── Promotions ──────────────────────────────────────────────────────────────
class Promotion(Base, IdMixin, TSMixin):
    __tablename__ = "promotions"
    title: Mapped[str] = mapped_column(String(160))
    description: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(String(400))
    badge_text: Mapped[str] = mapped_column(String(40), default=DEFAULT_BADGE)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    start_date: Mapped[date | None] = mapped_column(Date)  # inclusive
    end_date: Mapped[date | None] = mapped_column(Date)    # inclusive

class PromotionItem(Base, IdMixin, TSMixin):
    __tablename__ = "promotion_items"
    __table_args__ = (UniqueConstraint("promotion_id", "menu_item_id", name="uq_promotion_item"),)
    promotion_id: Mapped[str] = mapped_column(String(36), ForeignKey("promotions.id"))
    menu_item_id: Mapped[str] = mapped_column(String(36), ForeignKey("menu_items.id"))
    discount_type: Mapped[DiscountType | None] = mapped_column(
        Enum(DiscountType, values_callable=lambda e: [m.value for m in e]), default=DiscountType.PERCENTAGE
    )
    discount_value: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=0)

class PromotionView(Base, IdMixin, TSMixin):
    # append-only log, no FK: views outlive deleted promotions
    __tablename__ = "promotion_views"
    promotion_id: Mapped[str] = mapped_column(String(36), index=True)
    user_agent: Mapped[str | None] = mapped_column(Text)
