"""
JSON Parser utility for extracting JSON from LLM responses.
"""
import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class JSONParser:
    """Helper class to extract a JSON object from free-form LLM replies."""

    @staticmethod
    def find_object_span(text: str) -> Optional[str]:
        """Return the first balanced top-level ``{...}`` substring, if any.

        Braces inside JSON string literals are ignored so values such as
        ``"use {name}"`` do not unbalance the scan.
        """
        start = text.find("{")
        if start == -1:
            return None

        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        return None

    @staticmethod
    def extract_json(text: str | None) -> Optional[Dict[str, Any]]:
        """Extract a JSON object from text wrapped in prose or code fences.

        Returns None when no brace-delimited substring exists or it does not
        parse as a JSON object. Never raises.
        """
        if not text:
            return None

        candidate = JSONParser.find_object_span(text)
        if candidate is None:
            logger.debug("JSONParser: no brace-delimited object in reply")
            return None

        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, RecursionError):
            logger.debug("JSONParser: could not parse object: %s", candidate[:200])
            return None

        if not isinstance(parsed, dict):
            return None
        return parsed
