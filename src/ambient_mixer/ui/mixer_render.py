from __future__ import annotations

from rich.text import Text

from ambient_mixer.ui.view_model import ChannelRow, MixerView

SELECTED_STYLE = "bold #5fc9d6"
MUTED_STYLE = "#808080"
PAUSED_STYLE = "dim"


def ellipsize(text: str, max_len: int) -> str:
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return "." * max_len
    return text[: max_len - 3] + "..."


def render_gauge(width: int, ratio: float) -> str:
    """Render a ``[===---]`` bar exactly ``width`` cells wide."""
    if width <= 0:
        return ""
    if width < 3:
        return "=" * width if ratio >= 0.5 else "-" * width
    inner = width - 2
    filled = int(round(max(0.0, min(1.0, ratio)) * inner))
    return "[" + "=" * filled + "-" * (inner - filled) + "]"


def format_percent(ratio: float) -> str:
    return f"{int(round(max(0.0, min(1.0, ratio)) * 100)):3d}%"


def render_title(title: str, paused: bool) -> str:
    # Border titles are parsed as markup, so the marker avoids square brackets.
    return f"{title} (PAUSED)" if paused else title


def _row_style(row: ChannelRow, paused: bool) -> str | None:
    if row.is_selected:
        return SELECTED_STYLE
    if paused:
        return PAUSED_STYLE
    if row.level == 0:
        return MUTED_STYLE
    return None


def _marker(row: ChannelRow) -> str:
    return "> " if row.is_selected else "  "


def render_row(
    row: ChannelRow, width: int, height: int, *, label_width: int, paused: bool
) -> list[Text]:
    """Render one channel into ``height`` lines of ``width`` cells."""
    if height <= 0:
        return []
    style = _row_style(row, paused) or ""
    percent = format_percent(row.ratio)
    marker = _marker(row)
    if height == 1:
        label = ellipsize(row.label, label_width).ljust(label_width)
        gauge_width = width - len(marker) - len(label) - len(percent) - 2
        gauge = render_gauge(gauge_width, row.ratio)
        line = f"{marker}{label} {gauge} {percent}" if gauge else f"{marker}{label}"
        return [Text(line[:width], style=style)]
    label_line = marker + ellipsize(row.label, max(0, width - len(marker)))
    gauge = render_gauge(width - len(marker) - len(percent) - 1, row.ratio)
    gauge_line = f"{' ' * len(marker)}{gauge} {percent}"
    lines = [Text(label_line, style=style), Text(gauge_line[:width], style=style)]
    lines.extend(Text("") for _ in range(height - 2))
    return lines


def render_mixer_view(view: MixerView, width: int) -> Text:
    """Draw every visible row of the view as one block of text."""
    if not view.rows:
        return Text("No channels")
    longest = max(len(row.label) for row in view.rows)
    label_width = max(1, min(longest, width // 3))
    output = Text()
    first = True
    for row in view.rows:
        for line in render_row(
            row,
            width,
            view.per_item_height,
            label_width=label_width,
            paused=view.paused,
        ):
            if not first:
                output.append("\n")
            first = False
            output.append_text(line)
    return output
