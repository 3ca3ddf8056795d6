from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from typing import Optional, Any, Dict
from pydantic import BaseModel


def _serialize(data: Any) -> Any:
    # Pydantic models are dumped with their camelCase aliases
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_serialize(item) for item in data]
    if isinstance(data, dict):
        return {k: _serialize(v) for k, v in data.items()}
    return jsonable_encoder(data)


def build_response(
    status_code: int,
    success: bool = True,
    message: str = None,
    data: Any = None,
    error: Optional[str] = None,
    pagination: Optional[Dict[str, int]] = None,
    **extra: Any,
) -> JSONResponse:
    response = {"success": success}

    if message is not None:
        response["message"] = message

    if data is not None:
        response["data"] = _serialize(data)

    if pagination is not None:
        response["pagination"] = pagination

    if error is not None:
        response["error"] = error

    for key, value in extra.items():
        response[key] = _serialize(value)

    return JSONResponse(
        content=response,
        status_code=status_code,
        media_type="application/json"
    )
