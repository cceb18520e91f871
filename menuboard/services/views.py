from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class ViewStat:
    promotion_id: str
    title: str
    count: int


@dataclass
class ViewReport:
    total: int
    stats: list[ViewStat]
    ranking: list[ViewStat]
    percentages: dict[str, float] = field(default_factory=dict)
    top: ViewStat | None = None

    def chart(self, limit: int = 10) -> list[ViewStat]:
        return self.ranking[:limit]

    def pie(self) -> list[ViewStat]:
        return [s for s in self.ranking if s.count > 0]


def _get(obj: Any, key: str):
    if isinstance(obj, Mapping):
        return obj[key]
    return getattr(obj, key)


def aggregate(promotions: Iterable[Any], views: Iterable[Any]) -> list[ViewStat]:
    """One entry per promotion, in input order, including never-viewed ones.

    Views pointing at promotions not in `promotions` are ignored.
    """
    counts = Counter(_get(v, "promotion_id") for v in views)
    return [
        ViewStat(_get(p, "id"), _get(p, "title"), counts.get(_get(p, "id"), 0))
        for p in promotions
    ]


def percentage(count: int, total: int) -> float:
    return count / total * 100 if total else 0.0


def build_report(stats: list[ViewStat]) -> ViewReport:
    total = sum(s.count for s in stats)
    # sorted() is stable: ties keep input order
    ranking = sorted(stats, key=lambda s: s.count, reverse=True)
    top = ranking[0] if ranking and ranking[0].count > 0 else None
    return ViewReport(
        total=total,
        stats=stats,
        ranking=ranking,
        percentages={s.promotion_id: percentage(s.count, total) for s in stats},
        top=top,
    )
