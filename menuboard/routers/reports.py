from fastapi import APIRouter, Depends

from menuboard.deps import get_store, require_admin
from menuboard.models.core import Promotion, PromotionView
from menuboard.schemas.reports import PromotionViewReportOut, ViewStatOut
from menuboard.services.store import Store
from menuboard.services.views import ViewStat, aggregate, build_report

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/promotion-views", response_model=PromotionViewReportOut)
def promotion_views(store: Store = Depends(get_store), sub: str = Depends(require_admin)):
    promotions = store.fetch_all(Promotion, order_by="created_at", descending=True)
    views = store.fetch_all(PromotionView)
    report = build_report(aggregate(promotions, views))

    def _out(s: ViewStat) -> ViewStatOut:
        return ViewStatOut(
            promotion_id=s.promotion_id, title=s.title, count=s.count,
            percentage=round(report.percentages[s.promotion_id], 1),
        )

    return PromotionViewReportOut(
        total_views=report.total,
        active_promotions=sum(1 for p in promotions if p.is_active),
        top=_out(report.top) if report.top else None,
        stats=[_out(s) for s in report.ranking],
        chart=[_out(s) for s in report.chart()],
        pie=[_out(s) for s in report.pie()],
    )
