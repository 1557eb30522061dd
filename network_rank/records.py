"""Line classifier for network-rank logs.

A ranking log is loosely structured text. Two line shapes carry data:

  Mon, 05 Jan 2009 13:45:02 +0000     -> timestamp record
  1234 out of 56,789                  -> sample record (rank out of total)

Every other line (log chatter, blank lines, comments) is noise and is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Union

from .errors import SAMPLE, TIMESTAMP, MalformedRecord


RE_SAMPLE = re.compile(r"^(\d+) out of ([\d,]+)$")
RE_TIMESTAMP = re.compile(
    r"^[A-Za-z]{3}, (\d{2}) ([A-Za-z]{3,4}) (\d{4})(?: (\d{2}):(\d{2}):(\d{2}))?"
)

MONTHS: Dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}


@dataclass(frozen=True)
class SampleRecord:
    rank: int
    total: int

    @property
    def percentile(self) -> float:
        # upper percentile: rank 0 of N is 100, rank N of N is 0
        return (1 - self.rank / self.total) * 100


@dataclass(frozen=True)
class TimestampRecord:
    when: datetime

    @property
    def year(self) -> int:
        return self.when.year


Record = Union[SampleRecord, TimestampRecord]


def parse_sample(line: str) -> Optional[SampleRecord]:
    m = RE_SAMPLE.match(line)
    if not m:
        return None
    digits = m.group(2).replace(",", "")
    if not digits:
        raise MalformedRecord(line, "total has no digits", kind=SAMPLE)
    total = int(digits)
    if total == 0:
        raise MalformedRecord(line, "total is zero, percentile undefined", kind=SAMPLE)
    return SampleRecord(rank=int(m.group(1)), total=total)


def parse_timestamp(line: str) -> Optional[TimestampRecord]:
    m = RE_TIMESTAMP.match(line)
    if not m:
        return None
    day, mon, year, hh, mm, ss = m.groups()
    month = MONTHS.get(mon.lower())
    if month is None:
        raise MalformedRecord(line, f"unknown month {mon!r}", kind=TIMESTAMP)
    try:
        when = datetime(
            int(year),
            month,
            int(day),
            int(hh or 0),
            int(mm or 0),
            int(ss or 0),
        )
    except ValueError as e:
        raise MalformedRecord(line, f"invalid date: {e}", kind=TIMESTAMP) from None
    return TimestampRecord(when=when)


def classify_line(line: str) -> Optional[Record]:
    """Return the record carried by ``line``, or None for noise.

    Raises MalformedRecord when the line has a known shape but bad fields.
    """
    text = line.rstrip("\r\n")
    sample = parse_sample(text)
    if sample is not None:
        return sample
    return parse_timestamp(text)
