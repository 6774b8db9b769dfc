"""Smart input suggestions for case entry fields via OpenAI's Responses API."""

import logging
import time
from typing import Any, Dict, List

from openai import AsyncOpenAI

from models.case_record import Material, ProsthesisType
from services.openai.response_parser import extract_usage, parse_suggestions
from services.openai.suggestion_schema import FUNCTION_DEFINITION, FUNCTION_NAME

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = "gpt-5"
MAX_SUGGESTIONS = 5


class SmartSuggestionService:
    """Suggest values for a data entry field from its description and context."""

    SYSTEM_PROMPT = (
        "You are an AI assistant helping dental technicians with data entry in a dental lab "
        "management application. Provide smart suggestions for completing a data entry field, "
        "based on the field's description, any existing data in the field, and any contextual "
        "information provided. Suggestions should use common dental lab terminology, materials, "
        "and procedures."
    )

    def __init__(self, client: AsyncOpenAI, model: str = DEFAULT_MODEL) -> None:
        if client is None:
            raise ValueError("OpenAI AsyncOpenAI client is required.")
        self.client = client
        self.model = model

    @staticmethod
    def _build_user_prompt(field_description: str, existing_data: str, contextual_information: str) -> str:
        vocabulary = (
            f"Known materials: {', '.join(m.value for m in Material)}. "
            f"Known prosthesis types: {', '.join(p.value for p in ProsthesisType)}."
        )
        return "\n".join(
            [
                f"Field Description: {field_description}",
                f"Existing Data: {existing_data or 'None'}",
                f"Contextual Information: {contextual_information or 'None'}",
                vocabulary,
                f"Return at most {MAX_SUGGESTIONS} suggestions.",
            ]
        )

    async def suggest(
        self,
        field_description: str,
        existing_data: str = "",
        contextual_information: str = "",
    ) -> Dict[str, Any]:
        """Return suggestions plus token usage and latency.

        Raises:
            ValueError: If `field_description` is empty.
        """
        if not field_description or not field_description.strip():
            raise ValueError("A field description is required for suggestions.")

        start = time.time()
        user_prompt = self._build_user_prompt(field_description.strip(), existing_data, contextual_information)
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=[
                    {"role": "system", "content": [{"type": "input_text", "text": self.SYSTEM_PROMPT}]},
                    {"role": "user", "content": [{"type": "input_text", "text": user_prompt}]},
                ],
                tools=[FUNCTION_DEFINITION],
                tool_choice={"type": "function", "name": FUNCTION_NAME},
            )
        except Exception as exc:
            logging.error("OpenAI Responses API error: %s", exc)
            raise

        suggestions: List[str] = parse_suggestions(response, tool_name=FUNCTION_NAME)[:MAX_SUGGESTIONS]
        latency = time.time() - start
        LOGGER.info("Suggestion latency: %.3fs (%d suggestions)", latency, len(suggestions))

        result: Dict[str, Any] = {"suggestions": suggestions, "latency": latency}
        result.update(extract_usage(response))
        return result

