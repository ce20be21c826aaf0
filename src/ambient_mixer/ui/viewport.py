from __future__ import annotations

from typing_extensions import TypeAlias

VisibleWindow: TypeAlias = tuple[list[int], int]


def window(num_channels: int, selected: int, available_height: int) -> VisibleWindow:
    """Return the visible channel indices and the rows given to each.

    When every channel fits, all are shown and the height is shared evenly.
    Otherwise exactly ``available_height`` one-row items are shown: pinned to
    the top near the start, to the bottom near the end, and centred on
    ``selected`` in between.
    """
    if num_channels <= 0 or available_height <= 0:
        return [], 0
    if num_channels <= available_height:
        return list(range(num_channels)), max(1, available_height // num_channels)
    half = available_height // 2
    if selected < half:
        start = 0
    elif num_channels - selected - 1 < half:
        start = num_channels - available_height
    else:
        start = selected - half
    return list(range(start, start + available_height)), 1
