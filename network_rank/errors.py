"""Error kinds raised while turning a ranking log into a chart."""

from __future__ import annotations

from typing import Optional


SAMPLE = "sample"
TIMESTAMP = "timestamp"


class NetworkRankError(Exception):
    pass


class MalformedRecord(NetworkRankError):
    """A line has a recognised shape but its fields do not validate.

    ``kind`` names the shape the line had (SAMPLE or TIMESTAMP).
    """

    def __init__(
        self,
        line: str,
        reason: str,
        lineno: Optional[int] = None,
        kind: Optional[str] = None,
    ) -> None:
        self.line = line
        self.reason = reason
        self.lineno = lineno
        self.kind = kind
        super().__init__(self._message())

    def _message(self) -> str:
        where = f"line {self.lineno}: " if self.lineno is not None else ""
        return f"{where}{self.reason} ({self.line!r})"

    def at(self, lineno: int) -> "MalformedRecord":
        return MalformedRecord(self.line, self.reason, lineno, self.kind)


class UnpairedRecord(NetworkRankError):
    def __init__(self, n_dates: int, n_samples: int, lineno: Optional[int] = None) -> None:
        self.n_dates = n_dates
        self.n_samples = n_samples
        self.lineno = lineno
        where = f" (line {lineno})" if lineno is not None else ""
        super().__init__(
            f"unpaired records{where}: {n_dates} timestamp(s) vs {n_samples} sample(s)"
        )


class ConfigurationConflict(NetworkRankError):
    pass


class StreamUnavailable(NetworkRankError):
    pass


class RenderError(NetworkRankError):
    pass
