"""
JSON response templates shared by the training routes.
"""

from http import HTTPStatus
from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

JSON_MEDIA_TYPE = "application/json"


def _status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


def write_json(status_code: int, data: Any = None) -> JSONResponse:
    """
    Write a JSON body with the given status.

    When there is no payload the body is {"Message": <status text>} for 200
    and {"Error": <status text>} for anything else.
    """
    if data is None:
        if status_code == status.HTTP_200_OK:
            data = {"Message": _status_text(status_code)}
        else:
            data = {"Error": _status_text(status_code)}

    return JSONResponse(status_code=status_code, content=jsonable_encoder(data, by_alias=True))


def error_json(status_code: int, message: str) -> JSONResponse:
    """Generic {"Error": message} envelope."""
    return JSONResponse(status_code=status_code, content={"Error": message})


def empty_response(status_code: int) -> Response:
    """Status-only response with a JSON content type and no body."""
    return Response(status_code=status_code, media_type=JSON_MEDIA_TYPE)
