"""
Dependencies used by the API.
"""

import json
from functools import lru_cache
from typing import Annotated, Any
from urllib.parse import parse_qsl

from fastapi import Depends, Request
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from cloudapi.config.settings import Settings
from cloudapi.core.account import AccountData
from cloudapi.core.errors import (
    DirectoryError,
    InvalidArgumentError,
    ResourceNotFoundError,
    UnsupportedMediaTypeError,
)
from cloudapi.service.directory import DirectoryClient

FORM_CONTENT_TYPES = {"multipart/form-data", "application/x-www-form-urlencoded"}
# Bodies that are JSON when they can be decoded as such, urlencoded otherwise.
RAW_CONTENT_TYPES = {"text/plain", "application/octet-stream"}

CREATE_CONTENT_TYPES = {
    "multipart/form-data",
    "application/octet-stream",
    "application/json",
    "text/plain",
}


@lru_cache
def SETTINGS():
    return Settings()


def logger():
    return get_logger()


def get_directory(request: Request) -> DirectoryClient:
    return request.app.directory


def content_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


def parse_body(body: bytes, media_type: str) -> dict[str, Any]:
    """
    Decode a raw request body into parameters.

    Raises
    ------
    InvalidArgumentError
        If a JSON body is malformed or is not an object.
    """
    text = body.decode("utf-8", errors="replace")

    try:
        params = json.loads(text)
    except ValueError:
        if media_type in RAW_CONTENT_TYPES:
            return dict(parse_qsl(text, keep_blank_values=True))
        raise InvalidArgumentError("Invalid JSON in request body")

    if not isinstance(params, dict):
        if media_type in RAW_CONTENT_TYPES:
            return {}
        raise InvalidArgumentError("Request body must be a JSON object")

    return params


async def request_params(request: Request) -> dict[str, Any]:
    """
    Request parameters: the query string merged with the request body,
    whatever its content type. Body values take precedence.
    """
    params: dict[str, Any] = dict(request.query_params)
    media_type = content_type(request)

    if media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        for key, value in form.multi_items():
            if not isinstance(value, str):
                value = (await value.read()).decode("utf-8", errors="replace")
            params[key] = value
        return params

    body = await request.body()

    if body:
        params.update(parse_body(body, media_type))

    return params


async def create_params(request: Request) -> dict[str, Any]:
    """
    The same as `request_params`, restricted to the content types accepted
    when creating resources.
    """
    media_type = content_type(request)

    if media_type and media_type not in CREATE_CONTENT_TYPES:
        raise UnsupportedMediaTypeError(f"{media_type} is not supported")

    return await request_params(request)


DirectoryDependency = Annotated[DirectoryClient, Depends(get_directory)]


async def get_account(account: str, directory: DirectoryDependency) -> AccountData:
    """
    Resolve the `{account}` path parameter, an account login or UUID.

    Raises
    ------
    ResourceNotFoundError
        If there is no account with this login.
    """
    try:
        return await directory.get_account(account)
    except DirectoryError as e:
        if e.status_code == 404:
            raise ResourceNotFoundError(f"{account} does not exist")
        raise e


LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]
AccountDependency = Annotated[AccountData, Depends(get_account)]
ParamsDependency = Annotated[dict[str, Any], Depends(request_params)]
CreateParamsDependency = Annotated[dict[str, Any], Depends(create_params)]
