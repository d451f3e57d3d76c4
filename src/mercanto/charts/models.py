"""Chart data models.

Hides the mapping between the json-chart wire format
({type, title, labels, datasets: [{label, data}]}) and the names the
rest of the package uses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, Strict


class ChartKind(str, Enum):
    LINE = "line"
    BAR = "bar"
    PIE = "pie"


class ChartSeries(BaseModel):
    """One named series of values.

    Values must be JSON numbers; booleans and numeric strings are rejected.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    label: str = Field(description="Series name shown in the legend")
    values: list[Annotated[float, Strict()]] = Field(alias="data", description="One value per category")


class ChartSpec(BaseModel):
    """A chart requested by the model.

    Series lengths are not checked against the categories here; the
    renderer decides what to do with mismatched data.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="forbid",
    )

    chart_kind: ChartKind = Field(alias="type", description="line, bar or pie")
    title: str = Field(description="Chart title")
    categories: list[str] = Field(alias="labels", description="Category labels, in order")
    series: list[ChartSeries] = Field(alias="datasets", description="Data series, in order")


@dataclass(frozen=True)
class ChartParsed:
    """Successful parse of a chart payload."""

    spec: ChartSpec


@dataclass(frozen=True)
class ChartParseFailed:
    """Failed parse of a chart payload."""

    reason: str


ChartParseResult = ChartParsed | ChartParseFailed


@dataclass(frozen=True)
class ExtractedContent:
    """Message content split into display text and an optional chart."""

    display_text: str
    chart: ChartSpec | None = None
