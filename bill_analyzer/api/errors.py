"""Maps domain exceptions to HTTP error responses.

Error bodies carry a stable code, a safe message and a UTC timestamp.
Tracebacks and raw provider text never reach the client.
"""

import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bill_analyzer.analysis.exceptions import BillAnalysisError, BillAnalysisErrorCode
from bill_analyzer.imaging.exceptions import ImagePreprocessingError, ImagePreprocessingErrorCode
from bill_analyzer.logging.logger import Log
from bill_analyzer.upload.exceptions import FileValidationError, FileValidationErrorCode

FILE_VALIDATION_STATUS: dict[FileValidationErrorCode, int] = {
    FileValidationErrorCode.FILE_REQUIRED: 400,
    FileValidationErrorCode.FILE_TOO_LARGE: 413,
    FileValidationErrorCode.UNSUPPORTED_MEDIA_TYPE: 415,
    FileValidationErrorCode.FILE_UNREADABLE: 500,
}

PREPROCESSING_STATUS: dict[ImagePreprocessingErrorCode, int] = {
    ImagePreprocessingErrorCode.IMAGE_READ_FAILED: 422,
    ImagePreprocessingErrorCode.PREPROCESSING_FAILED: 500,
}

BILL_ANALYSIS_STATUS: dict[BillAnalysisErrorCode, int] = {
    BillAnalysisErrorCode.INVALID_INPUT: 400,
    BillAnalysisErrorCode.PROMPT_TOO_LARGE: 400,
    BillAnalysisErrorCode.UNSUPPORTED_FORMAT: 415,
    BillAnalysisErrorCode.ANALYSIS_FAILED: 500,
    BillAnalysisErrorCode.INVALID_RESPONSE: 500,
    BillAnalysisErrorCode.SERVICE_UNAVAILABLE: 503,
}


class AnalysisNotFoundError(Exception):
    """Raised when no stored analysis exists for an id."""

    def __init__(self, analysis_id: uuid.UUID) -> None:
        super().__init__(f"Analysis not found with ID: {analysis_id}")
        self.analysis_id = analysis_id


class InvalidIdFormatError(Exception):
    """Raised when a path id is not a valid UUID."""


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "code": code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FileValidationError)
    async def handle_file_validation(_: Request, exc: FileValidationError) -> JSONResponse:
        return error_response(FILE_VALIDATION_STATUS[exc.code], exc.code.value, exc.message)

    @app.exception_handler(ImagePreprocessingError)
    async def handle_preprocessing(_: Request, exc: ImagePreprocessingError) -> JSONResponse:
        return error_response(PREPROCESSING_STATUS[exc.code], exc.code.value, exc.message)

    @app.exception_handler(BillAnalysisError)
    async def handle_bill_analysis(_: Request, exc: BillAnalysisError) -> JSONResponse:
        return error_response(BILL_ANALYSIS_STATUS[exc.code], exc.code.value, exc.message)

    # The multipart "file" part is the only validated request input.
    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        Log.warning(
            f"Rejected malformed request on {request.url.path}: "
            f"{len(exc.errors())} validation error(s)"
        )
        return error_response(
            FILE_VALIDATION_STATUS[FileValidationErrorCode.FILE_REQUIRED],
            FileValidationErrorCode.FILE_REQUIRED.value,
            "File is required and must not be empty",
        )

    @app.exception_handler(AnalysisNotFoundError)
    async def handle_not_found(_: Request, exc: AnalysisNotFoundError) -> JSONResponse:
        return error_response(404, "ANALYSIS_NOT_FOUND", str(exc))

    @app.exception_handler(InvalidIdFormatError)
    async def handle_invalid_id(_: Request, exc: InvalidIdFormatError) -> JSONResponse:
        return error_response(400, "INVALID_ID_FORMAT", "ID must be a valid UUID")

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        Log.exception(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        return error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")
