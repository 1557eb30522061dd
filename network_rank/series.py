"""Fold classified log lines into aligned (date, percentile, total) sequences."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import SAMPLE, TIMESTAMP, MalformedRecord, UnpairedRecord
from .records import Record, SampleRecord, TimestampRecord, classify_line


class YearSpan(Enum):
    UNIFORM = "uniform"
    VARIES = "varies"


class YearTracker:
    """Two-state year tracker; once VARIES it never goes back."""

    def __init__(self) -> None:
        self._first_year: Optional[int] = None
        self.span = YearSpan.UNIFORM

    def observe(self, year: int) -> None:
        if self._first_year is None:
            self._first_year = year
        elif year != self._first_year:
            self.span = YearSpan.VARIES


@dataclass(frozen=True)
class Series:
    dates: Tuple[datetime, ...]
    percentiles: Tuple[float, ...]
    totals: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.dates)

    @property
    def is_empty(self) -> bool:
        return not self.dates


Reporter = Callable[[MalformedRecord], None]


def warn_malformed(err: MalformedRecord) -> None:
    print(f"[network_rank][WARN] skipped record, {err}", file=sys.stderr)


def _kind(record: Record) -> str:
    if isinstance(record, TimestampRecord):
        return TIMESTAMP
    if isinstance(record, SampleRecord):
        return SAMPLE
    raise TypeError(f"not a record: {record!r}")


class SeriesBuilder:
    """Pairs each timestamp with the sample next to it, in either order.

    One record is held pending until its partner arrives. When a line is
    skipped as malformed its partner is dropped too: a pending partner at
    once, otherwise the next record of the other kind. A record whose partner
    never arrives raises UnpairedRecord.
    """

    def __init__(self, strict: bool = False, report: Optional[Reporter] = None) -> None:
        self.strict = strict
        self.report = report or warn_malformed
        self.malformed = 0
        self.dropped = 0
        self._lineno = 0
        self._pending: Optional[Tuple[Record, Optional[int], str]] = None
        self._orphan_of: Optional[MalformedRecord] = None
        self._dates: List[datetime] = []
        self._percentiles: List[float] = []
        self._totals: List[float] = []
        self._years = YearTracker()

    def feed(self, line: str) -> None:
        self._lineno += 1
        try:
            record = classify_line(line)
        except MalformedRecord as e:
            err = e.at(self._lineno)
            if self.strict:
                raise err from None
            self.malformed += 1
            self.report(err)
            self._skip_partner_of(err)
            return
        if record is not None:
            self._accept(record, self._lineno, line.rstrip("\r\n"))

    def feed_record(self, record: Record) -> None:
        self._accept(record, None, repr(record))

    def _skip_partner_of(self, err: MalformedRecord) -> None:
        if self._pending is not None and _kind(self._pending[0]) != err.kind:
            _record, lineno, text = self._pending
            self._pending = None
            self._drop(text, lineno, err)
        elif self._orphan_of is not None and self._orphan_of.kind != err.kind:
            # both halves of the pair were malformed
            self._orphan_of = None
        else:
            self._orphan_of = err

    def _drop(self, text: str, lineno: Optional[int], cause: MalformedRecord) -> None:
        self.dropped += 1
        self.report(
            MalformedRecord(text, f"partner of malformed line {cause.lineno} dropped", lineno)
        )

    def _accept(self, record: Record, lineno: Optional[int], text: str) -> None:
        kind = _kind(record)
        if self._orphan_of is not None and self._orphan_of.kind != kind:
            cause, self._orphan_of = self._orphan_of, None
            self._drop(text, lineno, cause)
            return
        self._orphan_of = None

        if self._pending is None:
            self._pending = (record, lineno, text)
            return
        if _kind(self._pending[0]) == kind:
            # the pending record met another of its own kind instead of a partner
            n = len(self._dates)
            if kind == TIMESTAMP:
                raise UnpairedRecord(n + 1, n, self._pending[1])
            raise UnpairedRecord(n, n + 1, self._pending[1])

        first, self._pending = self._pending[0], None
        if isinstance(record, TimestampRecord) and isinstance(first, SampleRecord):
            self._commit(record, first)
        elif isinstance(first, TimestampRecord) and isinstance(record, SampleRecord):
            self._commit(first, record)

    def _commit(self, stamp: TimestampRecord, sample: SampleRecord) -> None:
        self._dates.append(stamp.when)
        self._years.observe(stamp.year)
        self._percentiles.append(sample.percentile)
        self._totals.append(float(sample.total))

    def finish(self) -> Tuple[Series, YearSpan]:
        if self._pending is not None:
            n = len(self._dates)
            record, lineno, _text = self._pending
            if isinstance(record, TimestampRecord):
                raise UnpairedRecord(n + 1, n, lineno)
            raise UnpairedRecord(n, n + 1, lineno)
        series = Series(
            dates=tuple(self._dates),
            percentiles=tuple(self._percentiles),
            totals=tuple(self._totals),
        )
        return series, self._years.span


def build_series(
    lines: Iterable[str],
    strict: bool = False,
    report: Optional[Reporter] = None,
) -> Tuple[Series, YearSpan]:
    builder = SeriesBuilder(strict=strict, report=report)
    for line in lines:
        builder.feed(line)
    return builder.finish()
