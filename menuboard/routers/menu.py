from collections import Counter
from fastapi import APIRouter, Depends
from typing import List, Optional
from decimal import Decimal

from menuboard.schemas.menu import (
    CategoryIn,
    CategoryPatch,
    CategoryOut,
    MenuItemIn,
    MenuItemPatch,
    MenuItemOut,
)
from menuboard.models.core import Category, MenuItem
from menuboard.deps import get_store, require_admin, require_auth
from menuboard.services.store import Store

router = APIRouter(prefix="/menu", tags=["menu"])


# ---------- helpers ----------

def _as_float(val: Decimal | float | int | None) -> float | None:
    if val is None:
        return None
    return float(val)

def patch_fields(body, required: set[str]) -> dict:
    # explicit nulls may only clear optional columns
    return {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None or k not in required}

def category_out(c: Category, item_count: int = 0) -> CategoryOut:
    return CategoryOut(
        id=c.id,
        name=c.name,
        description=c.description,
        display_order=c.display_order,
        item_count=item_count,
    )

def item_out(m: MenuItem, categories: dict[str, Category] | None = None) -> MenuItemOut:
    cat = (categories or {}).get(m.category_id)
    return MenuItemOut(
        id=m.id,
        category_id=m.category_id,
        name=m.name,
        description=m.description,
        price=_as_float(m.price) or 0.0,
        image_url=m.image_url,
        is_active=bool(m.is_active),
        category_name=cat.name if cat else None,
    )

def list_categories_with_counts(store: Store) -> List[CategoryOut]:
    cats = store.fetch_all(Category, order_by="display_order")
    counts = Counter(m.category_id for m in store.fetch_all(MenuItem))
    return [category_out(c, counts.get(c.id, 0)) for c in cats]


# ---------- CATEGORIES ----------

@router.get("/categories", response_model=List[CategoryOut])
def list_categories(store: Store = Depends(get_store), sub: str = Depends(require_auth)):
    """Categories by display order, each with its derived item count."""
    return list_categories_with_counts(store)


@router.post("/categories", response_model=CategoryOut)
def create_category(body: CategoryIn, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    return category_out(store.insert(Category, **body.model_dump()))


@router.patch("/categories/{cat_id}", response_model=CategoryOut)
def update_category(cat_id: str, body: CategoryPatch, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    cat = store.update(Category, cat_id, **patch_fields(body, required={"name", "display_order"}))
    count = len(store.fetch_all(MenuItem, category_id=cat.id))
    return category_out(cat, count)


@router.delete("/categories/{cat_id}")
def delete_category(cat_id: str, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    """
    Hard delete; the category's items and their promotion links go with it.
    """
    removed = store.delete_category(cat_id)
    return {"ok": True, "id": cat_id, "items_deleted": removed}


# ---------- ITEMS ----------

@router.get("/items", response_model=List[MenuItemOut])
def list_items(
    category_id: Optional[str] = None,
    active_only: bool = False,
    store: Store = Depends(get_store),
    sub: str = Depends(require_auth),
):
    filters = {}
    if category_id:
        filters["category_id"] = category_id
    if active_only:
        filters["is_active"] = True
    rows = store.fetch_all(MenuItem, order_by="name", **filters)
    cats = {c.id: c for c in store.fetch_all(Category)}
    return [item_out(m, cats) for m in rows]


@router.post("/items", response_model=MenuItemOut)
def create_item(body: MenuItemIn, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    cat = store.get(Category, body.category_id)
    data = body.model_dump()
    data["price"] = Decimal(str(body.price))
    it = store.insert(MenuItem, **data)
    return item_out(it, {cat.id: cat})


@router.patch("/items/{item_id}", response_model=MenuItemOut)
def update_item(item_id: str, body: MenuItemPatch, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    data = patch_fields(body, required={"category_id", "name", "price", "is_active"})
    if data.get("category_id"):
        store.get(Category, data["category_id"])
    if data.get("price") is not None:
        data["price"] = Decimal(str(data["price"]))
    it = store.update(MenuItem, item_id, **data)
    cats = {c.id: c for c in store.fetch_all(Category, id=it.category_id)}
    return item_out(it, cats)


@router.delete("/items/{item_id}")
def delete_item(item_id: str, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    """
    Hard delete; the item's promotion links are removed first.
    """
    store.delete_menu_item(item_id)
    return {"ok": True, "id": item_id}
