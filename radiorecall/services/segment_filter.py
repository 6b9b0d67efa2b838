"""Watermark gate that decides which listed segments are new.

Each manifest fetch re-lists most of the segments seen on the previous
fetch.  The filter remembers the highest sequence number it has ever
accepted and lets through only numbers above it.  It runs before
classification, so a segment that later turns out unusable still consumes
its number for good.
"""

from __future__ import annotations

from radiorecall.models.segment import Segment


class SegmentNumberFilter:
    """Accepts each media sequence number at most once, in increasing order.

    Not thread-safe; the poll loop calls it sequentially.
    """

    def __init__(self, watermark: int = 0) -> None:
        self._watermark = watermark

    @property
    def watermark(self) -> int:
        """Highest sequence number accepted so far."""
        return self._watermark

    def need_download(self, segment: Segment) -> bool:
        """Return ``True`` and advance the watermark if *segment* is new."""
        if segment.number <= self._watermark:
            return False
        self._watermark = segment.number
        return True
