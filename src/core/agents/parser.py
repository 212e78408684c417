import json
import re
from typing import Any, Dict

from pydantic import ValidationError

from src.core.errors import ParseError
from src.domain.schemas.analysis import StructuredResult
from src.utils.logger import get_logger

# Leading fence with optional language tag, and trailing fence
_OPENING_FENCE = re.compile(r"^```[ \t]*(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\r?\n?```\s*$")


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Non-standard JSON constant {name}")


class ResponseParser:
    """Extracts the structured result from raw model output"""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    @staticmethod
    def strip_fence(text: str) -> str:
        text = text.strip()
        if text.startswith("```"):
            text = _OPENING_FENCE.sub("", text, count=1)
            text = _CLOSING_FENCE.sub("", text, count=1)
        return text.strip()

    def extract_json(self, raw: str) -> Dict[str, Any]:
        """
        Decode the JSON object embedded in ``raw``.

        Only two tolerances are applied: a surrounding code fence is removed and
        the text is sliced from the first ``{`` to the last ``}``. Anything that
        still fails to decode is a ParseError.
        """
        if not raw or not raw.strip():
            raise ParseError("Model returned an empty response", raw=raw)

        text = self.strip_fence(raw)
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end == -1 or end < start:
            raise ParseError("No JSON object found in model response", raw=raw)

        try:
            decoded = json.loads(text[start:end + 1], parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in model response: {e.msg}", raw=raw) from e
        except ValueError as e:
            raise ParseError(f"Invalid JSON in model response: {e}", raw=raw) from e

        if not isinstance(decoded, dict):
            raise ParseError("Model response JSON is not an object", raw=raw)
        return decoded

    def parse(self, raw: str) -> StructuredResult:
        data = self.extract_json(raw)
        try:
            return StructuredResult.model_validate(data)
        except ValidationError as e:
            raise ParseError(f"Model response does not match the result schema ({e.error_count()} errors)", raw=raw) from e
