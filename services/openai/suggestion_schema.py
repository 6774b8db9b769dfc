"""Schema definition for the smart input suggestion tool."""

from typing import Any, Dict

FUNCTION_NAME = "suggest_field_values"

FUNCTION_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": FUNCTION_NAME,
    "description": "Return suggested values for a dental lab data entry field.",
    "parameters": {
        "type": "object",
        "properties": {
            "suggestions": {
                "type": "array",
                "description": "Suggested values, most relevant first.",
                "items": {"type": "string"},
            },
        },
        "required": ["suggestions"],
        "additionalProperties": False,
    },
    "strict": True,
}
