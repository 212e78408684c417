import json
import pytest

from src.core.agents.parser import ResponseParser
from src.core.errors import ParseError


@pytest.fixture
def parser():
    return ResponseParser()


def test_parses_plain_json(parser, structured_json):
    result = parser.parse(structured_json)

    assert result.executive_summary.title == "Q4 Board Review"
    assert result.analysis.sections[0].importance.value == "high"
    assert result.metrics[0].numeric_value == 4100000


@pytest.mark.parametrize("fence", ["```json\n{}\n```", "```\n{}\n```", "```JSON\n{}```"])
def test_fenced_json_matches_unwrapped(parser, structured_payload, fence):
    body = json.dumps(structured_payload, indent=2)
    fenced = fence.replace("{}", body)

    assert parser.extract_json(fenced) == parser.extract_json(body)
    assert parser.extract_json(fenced) == structured_payload


def test_tolerates_leading_and_trailing_prose(parser):
    raw = 'Here is the analysis you asked for:\n{"executiveSummary": {"title": "X"}}\nLet me know if you need more.'

    result = parser.parse(raw)

    assert result.executive_summary.title == "X"


def test_prose_before_fenced_block(parser):
    raw = 'Sure! ```json\n{"executiveSummary":{"title":"X","overview":"Y"}}\n```'

    result = parser.parse(raw)

    assert result.executive_summary.title == "X"
    assert result.executive_summary.overview == "Y"


@pytest.mark.parametrize("raw", ["", "   ", "I could not analyze the documents.", "} backwards {", "[1, 2, 3]"])
def test_missing_object_is_parse_error(parser, raw):
    with pytest.raises(ParseError):
        parser.parse(raw)


def test_invalid_json_is_not_repaired(parser):
    raw = '{"executiveSummary": {"title": "X",}}'

    with pytest.raises(ParseError) as exc_info:
        parser.parse(raw)

    assert "Invalid JSON" in exc_info.value.message
    assert exc_info.value.raw == raw


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_non_standard_constants_are_rejected(parser, constant):
    raw = '{"metrics": [{"title": "Growth", "change": %s}]}' % constant

    with pytest.raises(ParseError) as exc_info:
        parser.parse(raw)

    assert "Invalid JSON" in exc_info.value.message


def test_misshapen_sections_are_dropped_not_fatal(parser):
    result = parser.parse('{"executiveSummary": "just a string", "analysis": {"conclusion": "Done."}}')

    assert result.executive_summary is None
    assert result.analysis.conclusion == "Done."


def test_numbers_in_text_fields_become_strings(parser):
    raw = json.dumps({
        "executiveSummary": {"title": "Board Review", "keyPoints": ["Revenue up", 15, {"nested": True}]},
        "recommendations": [{"title": "Hire", "priority": 1}],
        "insights": [{"title": "Churn", "impact": 8}],
    })

    result = parser.parse(raw)

    assert result.executive_summary.key_points == ["Revenue up", "15"]
    assert result.recommendations[0].priority == "1"
    assert result.insights[0].impact == "8"


def test_lone_values_are_wrapped_in_lists(parser):
    raw = json.dumps({
        "metadata": {"sources": "Q4 Financial Report.pdf"},
        "charts": {"type": "bar", "title": "Revenue"},
    })

    result = parser.parse(raw)

    assert result.metadata.sources == ["Q4 Financial Report.pdf"]
    assert result.charts[0].title == "Revenue"


def test_malformed_list_items_are_skipped(parser):
    raw = json.dumps({
        "metrics": ["Revenue", {"title": "Burn", "value": [1, 2], "change": "n/a"}],
        "charts": [{"type": "line", "title": "Trend", "data": [1, {"label": "Q1", "value": 2}]}],
        "executiveSummary": {"actionRequired": "yes", "riskLevel": 3},
    })

    result = parser.parse(raw)

    assert [m.title for m in result.metrics] == ["Burn"]
    assert result.metrics[0].value is None
    assert result.metrics[0].change is None
    assert result.charts[0].data == [{"label": "Q1", "value": 2}]
    assert result.executive_summary.action_required is True
    assert result.executive_summary.risk_level is None


def test_unknown_enum_values_are_dropped(parser):
    result = parser.parse('{"executiveSummary": {"title": "X", "riskLevel": "severe"}, "charts": [{"type": "radar", "title": "C"}]}')

    assert result.executive_summary.risk_level is None
    assert result.charts[0].type is None
    assert result.charts[0].title == "C"


def test_absent_and_empty_fields_are_distinguished(parser):
    result = parser.parse('{"metrics": [], "analysis": {"introduction": "Intro"}}')

    assert result.metrics == []
    assert result.charts is None
    assert result.analysis.sections is None
