import logging
from fastapi import APIRouter, Depends
from typing import List
from decimal import Decimal

from menuboard.config import settings
from menuboard.deps import get_clock, get_store, require_admin, require_auth
from menuboard.errors import Conflict, NotFound
from menuboard.models.core import DEFAULT_BADGE, DiscountType, MenuItem, Promotion, PromotionItem
from menuboard.routers.menu import _as_float, patch_fields
from menuboard.schemas.promotions import (
    CountdownOut,
    LinkIn,
    LinkPatch,
    PromotionIn,
    PromotionItemOut,
    PromotionOut,
    PromotionPatch,
)
from menuboard.services.clock import Clock
from menuboard.services.promotions import compute_discounted_price, eligible, is_eligible, sort_for_display
from menuboard.services.rotation import promotion_end_instant, time_left
from menuboard.services.store import Store

router = APIRouter(prefix="/promotions", tags=["promotions"])
logger = logging.getLogger("menuboard.promotions")


def promotion_out(p: Promotion, today) -> PromotionOut:
    return PromotionOut(
        id=p.id,
        title=p.title,
        description=p.description,
        image_url=p.image_url,
        badge_text=p.badge_text,
        is_active=bool(p.is_active),
        start_date=p.start_date,
        end_date=p.end_date,
        eligible=is_eligible(p, today),
    )


def link_out(link: PromotionItem, item: MenuItem | None = None) -> PromotionItemOut:
    out = PromotionItemOut(
        id=link.id,
        promotion_id=link.promotion_id,
        menu_item_id=link.menu_item_id,
        discount_type=link.discount_type.value if link.discount_type else None,
        discount_value=_as_float(link.discount_value),
    )
    if item is not None:
        out.item_name = item.name
        out.price = _as_float(item.price)
        out.discounted_price = _as_float(
            compute_discounted_price(item.price, link.discount_type, link.discount_value)
        )
    return out


# ---------- PROMOTIONS ----------

@router.get("", response_model=List[PromotionOut])
def list_promotions(
    active_only: bool = False,
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
    sub: str = Depends(require_auth),
):
    filters = {"is_active": True} if active_only else {}
    rows = store.fetch_all(Promotion, order_by="created_at", descending=True, **filters)
    today = clock.today()
    return [promotion_out(p, today) for p in rows]


@router.get("/eligible", response_model=List[PromotionOut])
def list_eligible(store: Store = Depends(get_store), clock: Clock = Depends(get_clock)):
    """Promotions that are switched on and inside their date window today."""
    today = clock.today()
    rows = sort_for_display(eligible(store.fetch_all(Promotion), today))
    return [promotion_out(p, today) for p in rows]


@router.post("", response_model=PromotionOut)
def create_promotion(
    body: PromotionIn,
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
    sub: str = Depends(require_admin),
):
    data = body.model_dump()
    data["badge_text"] = data["badge_text"] or DEFAULT_BADGE
    p = store.insert(Promotion, **data)
    logger.info("promotion %s created by %s", p.id, sub)
    return promotion_out(p, clock.today())


@router.patch("/{promotion_id}", response_model=PromotionOut)
def update_promotion(
    promotion_id: str,
    body: PromotionPatch,
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
    sub: str = Depends(require_admin),
):
    data = patch_fields(body, required={"title", "badge_text", "is_active"})
    p = store.update(Promotion, promotion_id, **data)
    return promotion_out(p, clock.today())


@router.delete("/{promotion_id}")
def delete_promotion(promotion_id: str, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    store.delete_promotion(promotion_id)
    return {"ok": True, "id": promotion_id}


@router.get("/{promotion_id}/countdown", response_model=CountdownOut)
def countdown(promotion_id: str, store: Store = Depends(get_store), clock: Clock = Depends(get_clock)):
    p = store.get(Promotion, promotion_id)
    if p.end_date is None:
        # open-ended promotions never run out
        return CountdownOut(promotion_id=p.id, expired=False)
    left = time_left(promotion_end_instant(p.end_date, settings.TZ), clock.now())
    if left is None:
        return CountdownOut(promotion_id=p.id, expired=True)
    return CountdownOut(
        promotion_id=p.id,
        expired=False,
        days=left.days,
        hours=left.hours,
        minutes=left.minutes,
        seconds=left.seconds,
        display=left.display(),
    )


# ---------- LINKS ----------

@router.get("/items/{item_id}", response_model=List[PromotionOut])
def promotions_for_item(
    item_id: str,
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
    sub: str = Depends(require_auth),
):
    store.get(MenuItem, item_id)
    promo_ids = {l.promotion_id for l in store.fetch_all(PromotionItem, menu_item_id=item_id)}
    today = clock.today()
    rows = [p for p in store.fetch_all(Promotion, order_by="created_at", descending=True) if p.id in promo_ids]
    return [promotion_out(p, today) for p in rows]


@router.get("/{promotion_id}/items", response_model=List[PromotionItemOut])
def list_links(promotion_id: str, store: Store = Depends(get_store), sub: str = Depends(require_auth)):
    store.get(Promotion, promotion_id)
    items = {m.id: m for m in store.fetch_all(MenuItem)}
    out = []
    for link in store.fetch_all(PromotionItem, order_by="created_at", promotion_id=promotion_id):
        item = items.get(link.menu_item_id)
        if item is None:
            # dangling link, nothing to show
            continue
        out.append(link_out(link, item))
    return out


@router.post("/{promotion_id}/items", response_model=PromotionItemOut)
def link_item(promotion_id: str, body: LinkIn, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    """
    Link an item to a promotion; starts as percentage with value 0, i.e. no discount yet.
    """
    store.get(Promotion, promotion_id)
    item = store.get(MenuItem, body.menu_item_id)
    if store.fetch_all(PromotionItem, promotion_id=promotion_id, menu_item_id=item.id):
        raise Conflict("item already linked to this promotion")
    link = store.insert(
        PromotionItem,
        promotion_id=promotion_id,
        menu_item_id=item.id,
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("0"),
    )
    return link_out(link, item)


@router.patch("/{promotion_id}/items/{item_id}", response_model=PromotionItemOut)
def update_link(
    promotion_id: str,
    item_id: str,
    body: LinkPatch,
    store: Store = Depends(get_store),
    sub: str = Depends(require_admin),
):
    item = store.get(MenuItem, item_id)
    links = store.fetch_all(PromotionItem, promotion_id=promotion_id, menu_item_id=item_id)
    if not links:
        raise NotFound("item is not linked to this promotion")
    data = body.model_dump(exclude_unset=True)
    if "discount_type" in data:
        data["discount_type"] = DiscountType(data["discount_type"]) if data["discount_type"] else None
    if data.get("discount_value") is not None:
        data["discount_value"] = Decimal(str(data["discount_value"]))
    # reject combinations the pricing engine cannot evaluate before saving
    compute_discounted_price(
        item.price,
        data.get("discount_type", links[0].discount_type),
        data.get("discount_value", links[0].discount_value),
    )
    link = store.update(PromotionItem, links[0].id, **data)
    return link_out(link, item)


@router.delete("/{promotion_id}/items/{item_id}")
def unlink_item(promotion_id: str, item_id: str, store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    links = store.fetch_all(PromotionItem, promotion_id=promotion_id, menu_item_id=item_id)
    for link in links:
        store.delete(PromotionItem, link.id)
    return {"ok": True, "unlinked": len(links)}
