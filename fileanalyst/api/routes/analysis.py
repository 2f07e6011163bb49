"""Data analysis endpoint.

Provides:
- POST /api/analyze: Run a prompt against selected data files
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from fileanalyst.api.deps import CurrentUser, Storage
from fileanalyst.api.response import success_response
from fileanalyst.models.analysis import AnalysisRequest
from fileanalyst.services import analysis_service

router = APIRouter(tags=["Analysis"])


@router.post("/analyze")
async def analyze(request: AnalysisRequest, user: CurrentUser, storage: Storage) -> JSONResponse:
    """Analyze the selected files with the hosted model.

    Returns the generated text, token statistics, and any downloadable
    artifact (CSV, JSON, XML, text, SQL, or code) found in the response.
    """
    result = await analysis_service.analyze(user, request, storage=storage)
    return JSONResponse(content=success_response(result.model_dump(mode="json")))
