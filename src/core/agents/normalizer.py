from typing import List, Optional

from src.domain.schemas.analysis import (
    ChangeType,
    ChartType,
    Metric,
    StructuredResult,
)
from src.domain.schemas.response import AIResponse, ChartDescriptor, SummaryCard, SummaryMetric
from src.utils.logger import get_logger

DEFAULT_SUMMARY_TITLE = "Analysis Summary"
EMPTY_RESPONSE = "The analysis did not produce any narrative content. Please try rephrasing your request."


def _text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _bullets(items: Optional[List[str]]) -> List[str]:
    return [f"- {item.strip()}" for item in (items or []) if item and item.strip()]


class ResultNormalizer:
    """Projects a structured result onto the caller-facing AIResponse"""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def normalize(self, result: StructuredResult) -> AIResponse:
        return AIResponse(
            response=self.build_response_text(result),
            summary=self.build_summary(result),
            charts=self.build_charts(result),
        )

    def build_response_text(self, result: StructuredResult) -> str:
        blocks: List[str] = []

        summary = result.executive_summary
        if summary is not None:
            if _text(summary.title):
                blocks.append(f"## {_text(summary.title)}")
            if _text(summary.overview):
                blocks.append(_text(summary.overview))
            key_points = _bullets(summary.key_points)
            if key_points:
                blocks.append("\n".join(key_points))

        analysis = result.analysis
        if analysis is not None:
            if _text(analysis.introduction):
                blocks.append(_text(analysis.introduction))
            for section in analysis.sections or []:
                section_lines: List[str] = []
                if _text(section.title):
                    section_lines.append(f"### {_text(section.title)}")
                if _text(section.content):
                    section_lines.append(_text(section.content))
                insights = _bullets(section.insights)
                if insights:
                    section_lines.append("\n".join(insights))
                if section_lines:
                    blocks.append("\n\n".join(section_lines))
            if _text(analysis.conclusion):
                blocks.append(_text(analysis.conclusion))

        recommendations = []
        for rec in result.recommendations or []:
            title, description = _text(rec.title), _text(rec.description)
            if title and description:
                recommendations.append(f"**{title}**: {description}")
            elif title or description:
                recommendations.append(title or description)
        if recommendations:
            numbered = [f"{i}. {line}" for i, line in enumerate(recommendations, 1)]
            blocks.append("## Recommendations\n\n" + "\n".join(numbered))

        if not blocks:
            return EMPTY_RESPONSE
        return "\n\n".join(blocks)

    def build_summary(self, result: StructuredResult) -> Optional[SummaryCard]:
        """
        Summary card built from the top-level metrics.

        Metrics without a title are skipped since the card has nothing to label
        them with; if none remain there is no summary.
        """
        metrics = [m for m in (self._summary_metric(metric) for metric in result.metrics or []) if m]
        if not metrics:
            return None

        title = None
        if result.executive_summary is not None:
            title = _text(result.executive_summary.title)

        insights: List[str] = []
        for insight in result.insights or []:
            text = _text(insight.description) or _text(insight.title)
            if text:
                insights.append(text)

        return SummaryCard(title=title or DEFAULT_SUMMARY_TITLE, metrics=metrics, insights=insights)

    @staticmethod
    def _summary_metric(metric: Metric) -> Optional[SummaryMetric]:
        title = _text(metric.title)
        if not title:
            return None
        value = metric.value
        if value is None or (isinstance(value, str) and not value.strip()):
            value = metric.numeric_value if metric.numeric_value is not None else "N/A"
        return SummaryMetric(
            title=title,
            value=value,
            change=metric.change if metric.change is not None else 0,
            change_type=metric.change_type or ChangeType.NEUTRAL,
            icon=_text(metric.icon) or "target",
            description=_text(metric.description),
        )

    def build_charts(self, result: StructuredResult) -> Optional[List[ChartDescriptor]]:
        if not result.charts:
            return None
        charts = [
            ChartDescriptor(
                type=chart.type or ChartType.BAR,
                title=_text(chart.title) or "Chart",
                description=_text(chart.description),
                data=list(chart.data or []),
                x_key=_text(chart.x_key) or "label",
                y_key=_text(chart.y_key) or "value",
            )
            for chart in result.charts
        ]
        return charts or None
