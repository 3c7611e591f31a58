"""
Top-N sıralamaları.

Metriği tam olarak 0 olan özneler listeye girmez. Eşit metrikli
özneler giriş sırasını korur (Python sıralaması kararlıdır); kimliğe
göre sıralı sonuç isteyen çağıran girdiyi önceden sıralar.
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from dropship_manager.models.analytics import RankingEntry

T = TypeVar("T")


def top_n(subjects: Iterable[T], metric_fn: Callable[[T], float], n: int) -> list[tuple[T, float]]:
    """En yüksek metrikli n özne, (özne, metrik) çiftleri olarak."""
    if n <= 0:
        return []
    scored = []
    for subject in subjects:
        value = metric_fn(subject)
        if value == 0:
            continue
        scored.append((subject, value))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:n]


def rank_entries(
    subjects: Iterable[T],
    metric_fn: Callable[[T], float],
    n: int,
    id_fn: Callable[[T], str],
    name_fn: Optional[Callable[[T], str]] = None,
) -> list[RankingEntry]:
    """top_n sonucunu RankingEntry listesine çevirir."""
    name_fn = name_fn or id_fn
    return [
        RankingEntry(subject_id=id_fn(s), name=name_fn(s), value=value)
        for s, value in top_n(subjects, metric_fn, n)
    ]
