"""Parsing of free-text verifier replies into pass/fail judgments."""

import json
import logging
import re
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)

_PASS_WORDS = ("pass", "passed", "valid", "accurate", "ok", "true", "yes")
_FAIL_WORDS = ("fail", "failed", "invalid", "inaccurate", "false", "no")
_TEXT_VERDICTS = {"pass": True, "passed": True, "fail": False, "failed": False}
_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(?P<text>.+)$")
_VERDICT_LINE_RE = re.compile(
    r"^\s*\**\s*(?:verdict|result|status)?\s*\**\s*:?\s*\**\s*(?P<word>[a-z]+)\b", re.I
)
_DECODER = json.JSONDecoder()
_VERDICT_KEYS = ("passed", "pass", "valid", "isValid", "verdict", "status")


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = [line for line in cleaned.split("\n") if not line.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned.strip()


def _judgment_from_value(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _PASS_WORDS:
            return True
        if word in _FAIL_WORDS:
            return False
    return None


def _issues_from_value(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        return []
    issues: list[str] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            issues.append(item.strip())
        elif isinstance(item, dict):
            text = item.get("issue") or item.get("description") or item.get("message")
            if isinstance(text, str) and text.strip():
                issues.append(text.strip())
    return issues


def _json_objects(text: str) -> Iterator[dict[str, Any]]:
    """Every ``{...}`` in ``text`` that decodes to a JSON object, in order."""
    start = text.find("{")
    while start != -1:
        try:
            value, end = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        yield value
        start = text.find("{", end)


def _verdict_object(text: str) -> dict[str, Any] | None:
    """First JSON object carrying a verdict or an issue list."""
    for candidate in _json_objects(text):
        if any(key in candidate for key in (*_VERDICT_KEYS, "issues")):
            return candidate
    return None


def _parse_json(text: str) -> tuple[bool | None, list[str]] | None:
    parsed = _verdict_object(text)
    if parsed is None:
        return None

    passed: bool | None = None
    for key in _VERDICT_KEYS:
        if key in parsed:
            passed = _judgment_from_value(parsed[key])
            if passed is not None:
                break
    issues = _issues_from_value(parsed.get("issues", []))
    if passed is None and "issues" in parsed:
        passed = not issues
    return passed, issues


def _parse_text(text: str) -> tuple[bool | None, list[str]]:
    lines = [line for line in text.splitlines() if line.strip()]
    passed: bool | None = None
    if lines:
        match = _VERDICT_LINE_RE.match(lines[0])
        if match:
            passed = _TEXT_VERDICTS.get(match.group("word").lower())
    issues = []
    for line in lines[1:]:
        bullet = _BULLET_RE.match(line)
        if bullet:
            issues.append(bullet.group("text").strip())
    return passed, issues


def parse_verification_response(text: str) -> tuple[bool | None, list[str]]:
    """Extract a pass/fail judgment and issues from a verifier reply.

    Understands the requested JSON shape ``{"passed": bool, "issues": [...]}``
    (optionally inside markdown fences or surrounding prose) and falls back to a
    ``PASS``/``FAIL`` first line followed by bulleted issues.

    Returns:
        Tuple of (passed or None if undeterminable, issues).
    """
    cleaned = _strip_fences(text)
    if not cleaned:
        return (None, [])
    parsed = _parse_json(cleaned)
    if parsed is not None and parsed[0] is not None:
        return parsed
    passed, issues = _parse_text(cleaned)
    if passed is None:
        logger.warning("Could not determine verdict from verifier reply")
    return passed, issues
