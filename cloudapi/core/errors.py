"""
Errors reported to API consumers. Each carries the HTTP status code and the
machine-readable error code rendered in the response body:

    {"code": "ResourceNotFound", "message": "group 0680... does not exist"}
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from structlog import get_logger


class CloudAPIError(Exception):
    status_code: int = 500
    code: str = "InternalError"

    message: str

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def body(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class MissingParameterError(CloudAPIError):
    status_code = 409
    code = "MissingParameter"


class InvalidArgumentError(CloudAPIError):
    status_code = 409
    code = "InvalidArgument"


class ResourceNotFoundError(CloudAPIError):
    status_code = 404
    code = "ResourceNotFound"


class UnsupportedMediaTypeError(CloudAPIError):
    status_code = 415
    code = "UnsupportedMediaType"


class DirectoryError(Exception):
    """
    A failure reported by the directory service. `body` holds the structured
    error (`code` and `message`) and `attribute`, when set, names the entry
    attribute that failed validation.
    """

    status_code: int
    body: dict[str, str]
    attribute: str | None

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        attribute: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = {"code": code, "message": message}
        self.attribute = attribute

    @property
    def code(self) -> str:
        return self.body["code"]

    @property
    def message(self) -> str:
        return self.body["message"]


def error_response(request: Request, status_code: int, body: dict) -> Response:
    """
    The JSON error body, left out for HEAD requests.
    """
    if request.method == "HEAD":
        return Response(status_code=status_code, media_type="application/json")

    return JSONResponse(status_code=status_code, content=body)


def cloudapi_error_handler(request: Request, exc: CloudAPIError) -> Response:
    get_logger().debug(
        "api.error", path=request.url.path, code=exc.code, status=exc.status_code
    )
    return error_response(request, exc.status_code, exc.body())


def directory_error_handler(request: Request, exc: DirectoryError) -> Response:
    """
    Directory errors that a handler did not reclassify are forwarded to the
    caller as they were reported.
    """
    get_logger().debug(
        "api.directory_error",
        path=request.url.path,
        code=exc.code,
        status=exc.status_code,
    )
    return error_response(request, exc.status_code, exc.body)


def add_exception_handlers(app: FastAPI) -> FastAPI:
    """
    Render `CloudAPIError` and `DirectoryError` as JSON error bodies.
    """
    app.add_exception_handler(CloudAPIError, cloudapi_error_handler)
    app.add_exception_handler(DirectoryError, directory_error_handler)
    return app
