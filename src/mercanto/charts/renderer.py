"""Chart rendering with matplotlib.

Hidden design decisions:
- Plot type per chart kind (line with fill, grouped bars, pie)
- Light/dark colour choices and the rotating series palette
- Best-effort handling of mismatched label/value lengths
- Figure lifecycle: one live figure per display slot, closed on re-render
"""

import logging
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.axes import Axes  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from .models import ChartKind, ChartSpec  # noqa: E402

logger = logging.getLogger(__name__)

# sky, blue, purple, pink
SERIES_FILLS = ["#0ea5e9b3", "#3b82f6b3", "#a855f7b3", "#ec4899b3"]
SERIES_BORDERS = ["#0ea5e9", "#3b82f6", "#a855f7", "#ec4899"]


@dataclass(frozen=True)
class ChartTheme:
    """Colours for non-data chart elements."""

    text: str
    grid: str
    title: str
    background: str


CHART_THEMES = {
    "dark": ChartTheme(text="#94a3b8", grid="#3341554d", title="#22d3ee", background="#1e1e2e"),
    "light": ChartTheme(text="#475569", grid="#cbd5e180", title="#0284c7", background="#f9fafb"),
}


def get_chart_theme(theme: str) -> ChartTheme:
    """Return the chart colours for 'light' or 'dark' (unknown names get dark)."""
    return CHART_THEMES.get(theme, CHART_THEMES["dark"])


def series_colors(index: int) -> tuple[str, str]:
    """Return (fill, border) for the series at index, cycling the palette."""
    return SERIES_FILLS[index % len(SERIES_FILLS)], SERIES_BORDERS[index % len(SERIES_BORDERS)]


class ChartRenderer:
    """Renders ChartSpecs to PNG files, one live figure per slot.

    A slot identifies where a chart is displayed (e.g. one message bubble).
    Rendering into a slot closes whatever was rendered there before, so
    re-rendering on data or theme changes never accumulates figures.
    """

    def __init__(
        self,
        output_dir: str | Path | None = None,
        width: float = 8.0,
        height: float = 4.0,
        dpi: int = 100,
    ) -> None:
        self._output_dir = Path(output_dir) if output_dir else Path(tempfile.gettempdir()) / "mercanto-charts"
        self._size = (width, height)
        self._dpi = dpi
        self._figures: dict[str, Figure] = {}
        self._paths: dict[str, Path] = {}

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def active_slots(self) -> list[str]:
        return list(self._figures)

    def figure(self, slot: str) -> Figure | None:
        """Return the live figure rendered into slot, if any."""
        return self._figures.get(slot)

    def render(self, spec: ChartSpec, theme: str = "dark", slot: str = "default") -> Path:
        """Render spec into slot and return the PNG path."""
        self.release(slot)
        colors = get_chart_theme(theme)

        fig = plt.figure(figsize=self._size, dpi=self._dpi)
        self._figures[slot] = fig
        fig.set_facecolor(colors.background)
        ax = fig.add_subplot()
        ax.set_facecolor(colors.background)
        ax.set_title(spec.title, color=colors.title, fontsize=14, fontweight="bold", pad=16)

        if spec.chart_kind == ChartKind.PIE:
            drawn = _draw_pie(ax, spec, colors)
        else:
            drawn = _draw_cartesian(ax, spec, colors)

        if not drawn:
            logger.warning("Chart '%s' has no plottable data", spec.title)
            ax.set_axis_off()
            ax.text(0.5, 0.5, "No data", ha="center", va="center",
                    transform=ax.transAxes, color=colors.text)

        self._output_dir.mkdir(parents=True, exist_ok=True)
        safe_slot = re.sub(r"[^A-Za-z0-9_-]", "_", slot)
        path = self._output_dir / f"chart-{safe_slot}-{uuid4().hex[:8]}.png"
        fig.savefig(path, facecolor=colors.background, bbox_inches="tight")
        self._paths[slot] = path
        return path

    def release(self, slot: str) -> None:
        """Close the figure rendered into slot and delete its file."""
        fig = self._figures.pop(slot, None)
        if fig is not None:
            plt.close(fig)
        path = self._paths.pop(slot, None)
        if path is not None:
            path.unlink(missing_ok=True)

    def release_all(self) -> None:
        for slot in list(self._figures):
            self.release(slot)


def _style_axes(ax: Axes, colors: ChartTheme) -> None:
    ax.tick_params(colors=colors.text)
    ax.grid(axis="y", color=colors.grid)
    ax.grid(axis="x", visible=False)
    ax.set_axisbelow(True)
    for spine in ax.spines.values():
        spine.set_color(colors.grid)


def _add_legend(ax: Axes, colors: ChartTheme, count: int) -> None:
    ax.legend(
        loc="upper center",
        bbox_to_anchor=(0.5, -0.12),
        ncol=min(count, 4),
        frameon=False,
        labelcolor=colors.text,
    )


def _draw_cartesian(ax: Axes, spec: ChartSpec, colors: ChartTheme) -> bool:
    categories = spec.categories
    # (series index, series, values)
    plotted = [(i, s, s.values[:len(categories)]) for i, s in enumerate(spec.series)]
    plotted = [(i, s, values) for i, s, values in plotted if values]
    if not categories or not plotted:
        return False

    _style_axes(ax, colors)
    positions = list(range(len(categories)))
    all_values = [v for _, _, values in plotted for v in values]

    if spec.chart_kind == ChartKind.LINE:
        for index, series, values in plotted:
            _, border = series_colors(index)
            xs = positions[:len(values)]
            ax.plot(xs, values, color=border, linewidth=2, marker="o", label=series.label)
            ax.fill_between(xs, values, color=border, alpha=0.15)
    else:
        width = 0.8 / len(plotted)
        for position, (index, series, values) in enumerate(plotted):
            fill, border = series_colors(index)
            offset = (position - (len(plotted) - 1) / 2) * width
            xs = [p + offset for p in positions[:len(values)]]
            ax.bar(xs, values, width=width, color=fill, edgecolor=border,
                   linewidth=2, label=series.label)

    ax.set_xticks(positions)
    ax.set_xticklabels(categories)

    # Keep zero on the value axis
    if min(all_values) >= 0:
        ax.set_ylim(bottom=0)
    elif max(all_values) <= 0:
        ax.set_ylim(top=0)

    _add_legend(ax, colors, len(plotted))
    return True


def _draw_pie(ax: Axes, spec: ChartSpec, colors: ChartTheme) -> bool:
    if not spec.series:
        return False

    series = spec.series[0]
    slices = [
        (label, value, i)
        for i, (label, value) in enumerate(zip(spec.categories, series.values, strict=False))
        if value > 0
    ]
    if not slices:
        return False

    labels = [label for label, _, _ in slices]
    values = [value for _, value, _ in slices]
    fills = [series_colors(i)[0] for _, _, i in slices]
    ax.pie(
        values,
        colors=fills,
        labels=labels,
        labeldistance=None,
        wedgeprops={"edgecolor": colors.background, "linewidth": 2},
    )
    ax.set_aspect("equal")
    _add_legend(ax, colors, len(slices))
    return True
