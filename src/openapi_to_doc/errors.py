"""Application errors with user-facing hints and process exit codes."""

from enum import Enum


class ErrorCode(str, Enum):
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_EXISTS = "FILE_EXISTS"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    INVALID_OPENAPI = "INVALID_OPENAPI"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"
    WRITE_ERROR = "WRITE_ERROR"


EXIT_CODES = {
    ErrorCode.FILE_NOT_FOUND: 1,
    ErrorCode.FILE_EXISTS: 1,
    ErrorCode.FILE_READ_ERROR: 1,
    ErrorCode.INVALID_OPENAPI: 2,
    ErrorCode.UNSUPPORTED_VERSION: 2,
    ErrorCode.WRITE_ERROR: 3,
}


class AppError(Exception):
    """An expected failure the CLI reports without a traceback."""

    def __init__(self, code: ErrorCode, message: str, hint: str = ""):
        super().__init__(message)
        self.code = code
        self.message = message
        self.hint = hint

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.code]


def file_not_found(path) -> AppError:
    return AppError(ErrorCode.FILE_NOT_FOUND, f"File not found: {path}", "Check the path.")


def file_exists(path) -> AppError:
    return AppError(
        ErrorCode.FILE_EXISTS,
        f"Output file already exists: {path}",
        "Use --force or choose another output path.",
    )


def invalid_openapi(detail: str = "") -> AppError:
    message = "Not a valid OpenAPI document."
    if detail:
        message = f"{message} ({detail})"
    return AppError(ErrorCode.INVALID_OPENAPI, message, "Make sure the file is an OpenAPI 3.x document.")


def unsupported_version(version: str) -> AppError:
    return AppError(
        ErrorCode.UNSUPPORTED_VERSION,
        f"Unsupported API document version: {version}",
        "Convert the document to OpenAPI 3.0.x or 3.1.x and try again.",
    )


def write_error(path, cause: Exception) -> AppError:
    return AppError(ErrorCode.WRITE_ERROR, f"Cannot write output file: {path}", f"Cause: {cause}")
