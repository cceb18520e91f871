# menuboard/routers/settings.py
from fastapi import APIRouter, Depends

from menuboard.config import settings as app_settings
from menuboard.deps import get_clock, get_store, require_admin
from menuboard.models.core import RestaurantSettings
from menuboard.routers.menu import patch_fields
from menuboard.schemas.settings import RestaurantSettingsIn, RestaurantSettingsOut
from menuboard.services.clock import Clock
from menuboard.services.hours import default_schedule, is_open_now, validate_schedule
from menuboard.services.store import Store

router = APIRouter(prefix="/settings", tags=["settings"])

def load_settings(store: Store) -> RestaurantSettings:
    """The singleton row, created with defaults on first access."""
    rows = store.fetch_all(RestaurantSettings, order_by="created_at")
    if rows:
        return rows[0]
    return store.insert(
        RestaurantSettings,
        name=app_settings.RESTAURANT_NAME,
        opening_hours=default_schedule(),
    )

def settings_out(rs: RestaurantSettings, clock: Clock) -> RestaurantSettingsOut:
    return RestaurantSettingsOut(
        id=rs.id, name=rs.name, logo_url=rs.logo_url,
        primary_color=rs.primary_color, secondary_color=rs.secondary_color,
        phone=rs.phone, whatsapp=rs.whatsapp, instagram=rs.instagram, address=rs.address,
        opening_hours=rs.opening_hours,
        is_open=is_open_now(rs.opening_hours, clock.now()),
    )

@router.get("/restaurant", response_model=RestaurantSettingsOut)
def get_restaurant(store: Store = Depends(get_store), clock: Clock = Depends(get_clock)):
    return settings_out(load_settings(store), clock)

@router.put("/restaurant", response_model=RestaurantSettingsOut)
def update_restaurant(
    body: RestaurantSettingsIn,
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
    sub: str = Depends(require_admin),
):
    rs = load_settings(store)
    data = patch_fields(body, required={"name", "primary_color", "secondary_color"})
    if body.opening_hours is not None:
        # replaced wholesale; days left out are treated as closed
        hours = body.opening_hours.model_dump(exclude_none=True)
        validate_schedule(hours)
        data["opening_hours"] = hours
    rs = store.update(RestaurantSettings, rs.id, **data)
    return settings_out(rs, clock)

@router.get("/open-status")
def open_status(store: Store = Depends(get_store), clock: Clock = Depends(get_clock)):
    rs = load_settings(store)
    now = clock.now()
    return {"is_open": is_open_now(rs.opening_hours, now), "checked_at": now.isoformat()}
