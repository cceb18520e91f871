# Importing the module registers tables with Base for create_all()
from .core import (  # noqa: F401
    # Enums
    DiscountType, AppRole,

    # Identity
    User, UserRole,

    # Settings
    RestaurantSettings,

    # Menu
    Category, MenuItem,

    # Promotions
    Promotion, PromotionItem, PromotionView,
)

__all__ = [
    "DiscountType", "AppRole",
    "User", "UserRole",
    "RestaurantSettings",
    "Category", "MenuItem",
    "Promotion", "PromotionItem", "PromotionView",
]
