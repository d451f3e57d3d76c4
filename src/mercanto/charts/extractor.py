"""Chart extraction from model replies.

A reply may embed one fenced block tagged `json-chart`. Extraction splits
the reply into the text to display and the parsed chart. A malformed block
never breaks the rest of the reply: it stays in the text, visible as-is.
"""

import logging
import re

from pydantic import ValidationError

from .models import ChartParsed, ChartParseFailed, ChartParseResult, ChartSpec, ExtractedContent

logger = logging.getLogger(__name__)

CHART_BLOCK_PATTERN = re.compile(r"```json-chart\r?\n(.*?)\r?\n```", re.DOTALL)


def parse_chart_payload(payload: str) -> ChartParseResult:
    """Parse the body of a json-chart block.

    Args:
        payload: JSON text between the fences

    Returns:
        ChartParsed with the spec, or ChartParseFailed with the reason
    """
    try:
        spec = ChartSpec.model_validate_json(payload)
    except ValidationError as e:
        return ChartParseFailed(reason=f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}")
    return ChartParsed(spec=spec)


def extract(content: str) -> ExtractedContent:
    """Split message content into display text and chart.

    Only the first json-chart block is considered; any later block is left
    in the text untouched. Extracting again from the display text therefore
    finds nothing only when the reply carried a single block; with several,
    the next one surfaces.
    """
    match = CHART_BLOCK_PATTERN.search(content)
    if match is None:
        return ExtractedContent(display_text=content)

    result = parse_chart_payload(match.group(1))
    if isinstance(result, ChartParseFailed):
        logger.warning("Failed to parse chart data: %s", result.reason)
        return ExtractedContent(display_text=content)

    display_text = (content[:match.start()] + content[match.end():]).strip()
    return ExtractedContent(display_text=display_text, chart=result.spec)
