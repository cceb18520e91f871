"""Generic query collaborator over the SQL store.

Routers go through `Store` for plain CRUD so that failures surface as
`UpstreamFailure` and cascades are explicit, visible operations.
"""
import logging
from typing import Any, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from menuboard.errors import Conflict, NotFound, UpstreamFailure
from menuboard.models.core import Category, MenuItem, Promotion, PromotionItem

logger = logging.getLogger("menuboard.store")

M = TypeVar("M")


class Store:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("%s rejected: %s", action, e.orig)
            raise Conflict(f"{action} conflicts with existing data")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("%s failed: %s", action, e)
            raise UpstreamFailure(f"{action} failed")

    # ---------- reads ----------

    def fetch_all(self, model: type[M], order_by: str | None = None, descending: bool = False, **equals: Any) -> list[M]:
        stmt = select(model)
        for name, value in equals.items():
            stmt = stmt.where(getattr(model, name) == value)
        if order_by:
            col = getattr(model, order_by)
            stmt = stmt.order_by(col.desc() if descending else col.asc())
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            logger.error("fetch %s failed: %s", model.__tablename__, e)
            raise UpstreamFailure(f"could not read {model.__tablename__}")

    def get(self, model: type[M], id: str) -> M:
        try:
            row = self.db.get(model, id)
        except SQLAlchemyError as e:
            logger.error("get %s/%s failed: %s", model.__tablename__, id, e)
            raise UpstreamFailure(f"could not read {model.__tablename__}")
        if row is None:
            raise NotFound(f"{model.__tablename__} {id} not found")
        return row

    # ---------- writes ----------

    def insert(self, model: type[M], **fields: Any) -> M:
        row = model(**fields)
        self.db.add(row)
        self._commit(f"insert {model.__tablename__}")
        self.db.refresh(row)
        return row

    def update(self, model: type[M], id: str, **fields: Any) -> M:
        row = self.get(model, id)
        for k, v in fields.items():
            setattr(row, k, v)
        self._commit(f"update {model.__tablename__}")
        self.db.refresh(row)
        return row

    def delete(self, model: type[M], id: str) -> None:
        row = self.get(model, id)
        self.db.delete(row)
        self._commit(f"delete {model.__tablename__}")

    # ---------- cascades ----------

    def delete_menu_item(self, item_id: str) -> None:
        item = self.get(MenuItem, item_id)
        self.db.execute(delete(PromotionItem).where(PromotionItem.menu_item_id == item.id))
        self.db.delete(item)
        self._commit("delete menu_items")
        logger.info("deleted menu item %s and its promotion links", item_id)

    def delete_category(self, category_id: str) -> int:
        cat = self.get(Category, category_id)
        item_ids = list(self.db.scalars(select(MenuItem.id).where(MenuItem.category_id == cat.id)))
        if item_ids:
            self.db.execute(delete(PromotionItem).where(PromotionItem.menu_item_id.in_(item_ids)))
            self.db.execute(delete(MenuItem).where(MenuItem.id.in_(item_ids)))
        self.db.delete(cat)
        self._commit("delete categories")
        logger.info("deleted category %s with %d items", category_id, len(item_ids))
        return len(item_ids)

    def delete_promotion(self, promotion_id: str) -> None:
        promo = self.get(Promotion, promotion_id)
        self.db.execute(delete(PromotionItem).where(PromotionItem.promotion_id == promo.id))
        self.db.delete(promo)
        self._commit("delete promotions")
        logger.info("deleted promotion %s and its item links", promotion_id)
