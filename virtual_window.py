"""
Windowed rendering for long, fixed-row-height lists.

Only the rows inside the viewport (plus a few overscan rows on the far side)
are ever materialized. Row height is fixed per list instance; callers pick it
up front, e.g. ViewerConfig.row_height_for(show_snippets).
"""

from viewer_config import DEFAULT_OVERSCAN


def visible_range(
    scroll_offset: float,
    viewport_height: float,
    row_height: float,
    item_count: int,
    overscan: int = DEFAULT_OVERSCAN,
) -> range:
    """Indices of the rows to materialize for the given scroll position."""
    if item_count <= 0 or row_height <= 0:
        return range(0)

    start = max(0, int(scroll_offset // row_height))
    end = min(item_count - 1, int((scroll_offset + max(0, viewport_height)) // row_height) + overscan)
    return range(start, end + 1)


def row_position(index: int, row_height: float) -> float:
    return index * row_height


def total_extent(item_count: int, row_height: float) -> float:
    return max(0, item_count) * row_height


class VirtualWindow:
    """Scroll state for one list instance.

    Every state change clamps the scroll offset to the scrollable range, so
    visible() is always consistent with the current item count and viewport.
    """

    def __init__(self, row_height: float, overscan: int = DEFAULT_OVERSCAN):
        if row_height <= 0:
            raise ValueError('row_height must be positive')
        self.row_height = row_height
        self.overscan = overscan
        self.scroll_offset = 0.0
        self.viewport_height = 0.0
        self.item_count = 0

    @property
    def total_height(self) -> float:
        return total_extent(self.item_count, self.row_height)

    @property
    def max_scroll(self) -> float:
        return max(0.0, self.total_height - self.viewport_height)

    def _clamp(self) -> None:
        self.scroll_offset = min(max(0.0, self.scroll_offset), self.max_scroll)

    def scroll_to(self, offset: float) -> range:
        self.scroll_offset = offset
        self._clamp()
        return self.visible()

    def scroll_by(self, delta: float) -> range:
        return self.scroll_to(self.scroll_offset + delta)

    def resize(self, viewport_height: float) -> range:
        self.viewport_height = max(0.0, viewport_height)
        self._clamp()
        return self.visible()

    def set_item_count(self, item_count: int) -> range:
        self.item_count = max(0, item_count)
        self._clamp()
        return self.visible()

    def visible(self) -> range:
        return visible_range(
            self.scroll_offset, self.viewport_height, self.row_height, self.item_count, self.overscan
        )

    def position(self, index: int) -> float:
        return row_position(index, self.row_height)

    def row_at(self, y: float) -> int | None:
        """Index of the row under viewport coordinate y, if any."""
        index = int((self.scroll_offset + y) // self.row_height)
        if y < 0 or index >= self.item_count:
            return None
        return index

    def scroll_offset_for(self, index: int) -> float:
        """Smallest scroll change that brings row index fully into view."""
        top = self.position(index)
        bottom = top + self.row_height
        if top < self.scroll_offset:
            return top
        if bottom > self.scroll_offset + self.viewport_height:
            return max(0.0, bottom - self.viewport_height)
        return self.scroll_offset

    def fraction(self) -> tuple[float, float]:
        """(first, last) visible fractions of the total extent, for scrollbars."""
        total = self.total_height
        if total <= 0:
            return (0.0, 1.0)
        first = self.scroll_offset / total
        last = min(1.0, (self.scroll_offset + self.viewport_height) / total)
        return (first, last)
