from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from controllers.suggestion_controller import suggest_values

router = APIRouter()


class SuggestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_description: str = Field(alias="fieldDescription")
    existing_data: str = Field(default="", alias="existingData")
    contextual_information: str = Field(default="", alias="contextualInformation")


@router.post("/suggestions")
async def post_suggestions(request: Request, payload: SuggestionRequest):
    """Suggest values for a case entry field."""
    try:
        result = await suggest_values(
            request, payload.field_description, payload.existing_data, payload.contextual_information
        )
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return result
