"""Unauthenticated endpoints behind the public menu page."""
from fastapi import APIRouter, Depends, Request
from typing import Literal, Optional

from menuboard.config import settings
from menuboard.deps import get_clock, get_store
from menuboard.models.core import Category, MenuItem, Promotion, PromotionItem, PromotionView
from menuboard.routers.menu import _as_float
from menuboard.routers.promotions import promotion_out
from menuboard.routers.settings import load_settings, settings_out
from menuboard.services.clock import Clock
from menuboard.services.promotions import best_offers, eligible, sort_for_display
from menuboard.services.rotation import RotationController
from menuboard.services.store import Store

router = APIRouter(prefix="/public", tags=["public"])


def _matches(item: MenuItem, q: str) -> bool:
    q = q.casefold()
    return q in item.name.casefold() or q in (item.description or "").casefold()


@router.get("/menu")
def public_menu(
    q: Optional[str] = None,
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """
    Active items grouped by category; categories without active items are left out.
    Items on an eligible promotion carry its badge and the discounted price.
    """
    items = store.fetch_all(MenuItem, order_by="name", is_active=True)
    if q and q.strip():
        items = [m for m in items if _matches(m, q.strip())]
    offers = best_offers(items, store.fetch_all(PromotionItem), store.fetch_all(Promotion), clock.today())

    sections = []
    for cat in store.fetch_all(Category, order_by="display_order"):
        rows = [m for m in items if m.category_id == cat.id]
        if not rows:
            continue
        out = []
        for m in rows:
            offer = offers.get(m.id)
            out.append({
                "id": m.id,
                "name": m.name,
                "description": m.description,
                "image_url": m.image_url,
                "price": _as_float(m.price),
                "promotion": None if offer is None else {
                    "id": offer.promotion.id,
                    "title": offer.promotion.title,
                    "badge_text": offer.promotion.badge_text,
                },
                "discounted_price": _as_float(offer.discounted_price) if offer and offer.has_discount else None,
            })
        sections.append({
            "id": cat.id,
            "name": cat.name,
            "description": cat.description,
            "items": out,
        })
    return {"categories": sections}


@router.get("/banner")
def banner(
    index: int = 0,
    step: Optional[Literal["next", "prev", "tick"]] = None,
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """
    Rotation state for the promotions banner. The page keeps the index and
    calls back with `step` on its timer or when the user navigates.
    """
    promos = sort_for_display(eligible(store.fetch_all(Promotion), clock.today()))
    rot = RotationController(promos, clock=clock, period=settings.ROTATION_SECONDS)
    rot.goto(index)
    if step == "next":
        rot.next()
    elif step == "prev":
        rot.prev()
    elif step == "tick":
        rot.tick()

    current = rot.current
    if current is None:
        return {"state": rot.state.value, "index": None, "total": 0, "promotion": None}
    left = rot.countdown(settings.TZ)
    return {
        "state": rot.state.value,
        "index": rot.index,
        "total": len(rot.promotions),
        "auto_advance": rot.auto_advance,
        "show_navigation": rot.show_navigation,
        "period_seconds": rot.period,
        "promotion": promotion_out(current, clock.today()).model_dump(mode="json"),
        "countdown": None if left is None else left.display(),
    }


@router.get("/info")
def info(store: Store = Depends(get_store), clock: Clock = Depends(get_clock)):
    return settings_out(load_settings(store), clock)


@router.post("/promotions/{promotion_id}/view")
def record_view(promotion_id: str, request: Request, store: Store = Depends(get_store)):
    store.get(Promotion, promotion_id)
    v = store.insert(PromotionView, promotion_id=promotion_id, user_agent=request.headers.get("user-agent"))
    return {"ok": True, "id": v.id}
