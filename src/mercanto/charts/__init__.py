"""Charts module.

Turns json-chart blocks embedded in model replies into images:
- models.py: ChartSpec and the json-chart wire format
- extractor.py: finds and parses the block, splits out display text
- renderer.py: draws a ChartSpec with matplotlib
"""

from .extractor import CHART_BLOCK_PATTERN, extract, parse_chart_payload
from .models import (
    ChartKind,
    ChartParsed,
    ChartParseFailed,
    ChartParseResult,
    ChartSeries,
    ChartSpec,
    ExtractedContent,
)
from .renderer import ChartRenderer, ChartTheme, get_chart_theme, series_colors

__all__ = [
    "CHART_BLOCK_PATTERN",
    "ChartKind",
    "ChartParsed",
    "ChartParseFailed",
    "ChartParseResult",
    "ChartRenderer",
    "ChartSeries",
    "ChartSpec",
    "ChartTheme",
    "ExtractedContent",
    "extract",
    "get_chart_theme",
    "parse_chart_payload",
    "series_colors",
]
