"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from job_pal.exceptions import ExtractionFailed

FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


@dataclass(frozen=True)
class Parsed:
    """A JSON object recovered from model output."""

    data: dict[str, Any]
    raw_text: str

    ok = True

    def unwrap(self) -> dict[str, Any]:
        return self.data


@dataclass(frozen=True)
class Failed:
    """Model output that did not contain a parseable JSON object."""

    raw_text: str
    reason: str

    ok = False

    def unwrap(self) -> dict[str, Any]:
        raise ExtractionFailed(self.raw_text, self.reason)


ExtractionResult = Parsed | Failed


def extract_json_result(text: str) -> ExtractionResult:
    """Isolate and parse the single JSON object in a model response.

    If the text contains a fenced code block (```json or bare ```), only the
    block's inner content is parsed. Otherwise the whole text is parsed.
    One parse attempt per path; ``raw_text`` is always the input verbatim.
    """
    if text is None:
        return Failed(raw_text="", reason="empty response")

    match = FENCED_BLOCK.search(text)
    candidate = match.group(1) if match else text
    candidate = candidate.strip()
    if not candidate:
        return Failed(raw_text=text, reason="empty response")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        return Failed(raw_text=text, reason=f"invalid JSON: {e.msg} at line {e.lineno}")

    if not isinstance(data, dict):
        return Failed(raw_text=text, reason=f"expected a JSON object, got {type(data).__name__}")
    return Parsed(data=data, raw_text=text)
