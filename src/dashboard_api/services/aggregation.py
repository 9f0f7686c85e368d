"""Aggregation of time-series records into planned buckets."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import TypeVar

from dashboard_api.services.bucketing import Bucket, to_naive_utc


@dataclass(frozen=True)
class TrendRecord:
    """Catalogue snapshot: running total plus the deltas recorded with it."""

    timestamp: datetime
    total_so_far: int | None
    added: int | None = 0
    removed: int | None = 0


@dataclass(frozen=True)
class EventRecord:
    """A single logged occurrence."""

    timestamp: datetime


@dataclass(frozen=True)
class BucketedTrend:
    start_date: date
    end_date: date
    total_at_end: int
    added: int
    removed: int


@dataclass(frozen=True)
class BucketedCount:
    start_date: date
    end_date: date
    count: int


R = TypeVar("R", TrendRecord, EventRecord)


def _group_by_bucket(
    records: Sequence[R],
    buckets: Sequence[Bucket],
) -> list[list[R]]:
    """Assign each record to the bucket whose inclusive bounds contain it.

    Records are sorted by timestamp (stable, so ties keep their input order)
    and swept once against the ordered buckets. Records outside every bucket
    are dropped.
    """
    groups: list[list[R]] = [[] for _ in buckets]
    if not buckets:
        return groups

    keyed = sorted(
        ((to_naive_utc(record.timestamp), record) for record in records),
        key=lambda pair: pair[0],
    )

    index = 0
    for timestamp, record in keyed:
        while index < len(buckets) and buckets[index].end < timestamp:
            index += 1
        if index == len(buckets):
            break
        if buckets[index].contains(timestamp):
            groups[index].append(record)

    return groups


def forward_fill(values: Sequence[int | None]) -> list[int]:
    """Replace each None with the nearest preceding value, or 0 if none precedes it."""
    filled: list[int] = []
    last_known = 0
    for value in values:
        if value is not None:
            last_known = value
        filled.append(last_known)
    return filled


def aggregate_trend(
    records: Sequence[TrendRecord],
    buckets: Sequence[Bucket],
) -> list[BucketedTrend]:
    """Sum snapshot deltas per bucket and carry the running total forward.

    A bucket's total is the `total_so_far` of its chronologically last
    record. Buckets without a record inherit the previous bucket's total;
    before the first known total they report 0.
    """
    groups = _group_by_bucket(records, buckets)
    totals = forward_fill([items[-1].total_so_far if items else None for items in groups])

    return [
        BucketedTrend(
            start_date=bucket.start_date,
            end_date=bucket.end_date,
            total_at_end=total,
            added=sum(item.added or 0 for item in items),
            removed=sum(item.removed or 0 for item in items),
        )
        for bucket, items, total in zip(buckets, groups, totals)
    ]


def aggregate_count(
    records: Sequence[EventRecord],
    buckets: Sequence[Bucket],
) -> list[BucketedCount]:
    """Count events per bucket. Empty buckets count 0."""
    groups = _group_by_bucket(records, buckets)
    return [
        BucketedCount(start_date=bucket.start_date, end_date=bucket.end_date, count=len(items))
        for bucket, items in zip(buckets, groups)
    ]
