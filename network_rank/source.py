"""Line stream for a ranking log: local file or http(s) resource."""

from __future__ import annotations

import io
import time
import urllib.request
from typing import Generator, TextIO

from .errors import StreamUnavailable


HTTP_HEADERS = {
    "User-Agent": "network-rank/0.1",
    "Accept": "text/plain, */*",
}


def is_uri(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def fetch_text(uri: str, timeout: float, retries: int, retry_delay: float = 1.0) -> str:
    req = urllib.request.Request(uri, headers=HTTP_HEADERS, method="GET")

    attempts = max(1, retries)
    last_error: Exception | None = None
    for i in range(attempts):
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return resp.read().decode("utf-8", errors="ignore")
        except (OSError, ValueError) as exc:
            last_error = exc
            if i + 1 < attempts:
                time.sleep(max(0.1, retry_delay))
    raise StreamUnavailable(f"cannot fetch {uri}: {last_error}")


def _drain(f: TextIO) -> Generator[str, None, None]:
    with f:
        for line in f:
            yield line


def open_lines(
    source: str, timeout: float = 30.0, retries: int = 1
) -> Generator[str, None, None]:
    """Return an iterator over the source's lines.

    The source is opened eagerly so a missing file or failed fetch raises
    StreamUnavailable here rather than halfway through parsing. The returned
    generator closes the file when exhausted or when its close() is called.
    """
    if is_uri(source):
        return _drain(io.StringIO(fetch_text(source, timeout, retries)))
    try:
        f = open(source, "r", encoding="utf-8", errors="ignore")
    except OSError as e:
        raise StreamUnavailable(f"cannot open {source}: {e.strerror or e}") from e
    return _drain(f)
