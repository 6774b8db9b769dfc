"""Helpers to parse Responses API outputs."""

import json
from typing import Any, Dict, List, Optional


def parse_function_arguments(response: Any, *, tool_name: str) -> Dict[str, Any]:
    """Return the decoded arguments of the first call to `tool_name`."""
    for item in getattr(response, "output", []):
        if getattr(item, "type", None) == "function_call" and getattr(item, "name", None) == tool_name:
            return json.loads(getattr(item, "arguments", "{}") or "{}")
    raise RuntimeError(f"No function_call output for '{tool_name}' found in Responses API output.")


def parse_suggestions(response: Any, *, tool_name: str) -> List[str]:
    """Extract the cleaned, de-duplicated suggestion strings from a tool call."""
    args = parse_function_arguments(response, tool_name=tool_name)
    suggestions: List[str] = []
    for value in args.get("suggestions") or []:
        text = str(value).strip()
        if text and text not in suggestions:
            suggestions.append(text)
    return suggestions


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = getattr(response, "usage", None)
    return {
        "input_tokens": getattr(usage, "input_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "output_tokens", None) if usage else None,
    }
