"""
Rendering of controller results as HTTP responses.
"""

from fastapi.responses import JSONResponse

from app.schemas.common import ActionResult


def envelope_response(result: ActionResult) -> JSONResponse:
    """JSON response carrying the envelope body and its status code."""
    return JSONResponse(status_code=result.status_code, content=result.to_body())
