from fastapi import HTTPException, Request
from typing import Any, Dict

from services.openai.suggestion_service import SmartSuggestionService


async def suggest_values(
    request: Request,
    field_description: str,
    existing_data: str,
    contextual_information: str,
) -> Dict[str, Any]:
    """Ask OpenAI for data entry suggestions.

    Raises:
        HTTPException(503) when no OpenAI client is configured.
    """
    openai_client = getattr(request.app.state, "openai_client", None)
    if openai_client is None:
        raise HTTPException(status_code=503, detail="Suggestions are not available.")

    service = SmartSuggestionService(openai_client, model=request.app.state.openai_model)
    try:
        return await service.suggest(field_description, existing_data, contextual_information)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
