"""AI-powered bill analyzer."""

import json
import threading
from pathlib import Path

from bill_analyzer.analysis.base import BaseBillAnalyzer
from bill_analyzer.analysis.client_base import BaseVisionClient
from bill_analyzer.analysis.decoder import decode_response
from bill_analyzer.analysis.exceptions import (
    BillAnalysisError,
    BillAnalysisErrorCode,
    FailureKind,
    ProviderCallError,
    RetryCancelledError,
    RetryExhaustedError,
)
from bill_analyzer.analysis.models import BillAnalysisResult
from bill_analyzer.analysis.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    load_system_prompt,
)
from bill_analyzer.analysis.retry import RetryExecutor, RetryPolicy
from bill_analyzer.analysis.validator import validate_and_build
from bill_analyzer.logging.logger import Log
from bill_analyzer.upload.models import DetectedType

DEFAULT_MAX_IMAGE_SIZE_BYTES = 5 * 1024 * 1024

SERVICE_UNAVAILABLE_MESSAGE = (
    "Bill analysis service is temporarily unavailable. Please try again later."
)
ANALYSIS_FAILED_MESSAGE = "Failed to analyze bill image"


class BillAnalyzer(BaseBillAnalyzer):
    """Extracts structured line items from a bill image using a vision model."""

    def __init__(
        self,
        *,
        client: BaseVisionClient,
        model: str,
        temperature: float = 0.0,
        retry_policy: RetryPolicy | None = None,
        max_image_size_bytes: int = DEFAULT_MAX_IMAGE_SIZE_BYTES,
        cancel_event: threading.Event | None = None,
        system_prompt_path: Path | None = None,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._max_image_size_bytes = max_image_size_bytes
        self._retry = RetryExecutor(retry_policy or RetryPolicy(), cancel_event=cancel_event)
        self._system_prompt = load_system_prompt(system_prompt_path)
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    def analyze(
        self, image_bytes: bytes | None, detected_type: DetectedType | None
    ) -> BillAnalysisResult:
        """Validate the payload, call the provider with retry and validate the answer."""
        self._check_input(image_bytes, detected_type)
        prompt = self._build_prompt()
        Log.debug(
            f"Sending {len(image_bytes)} bytes of {detected_type.mime_type} "
            f"to model {self._model}"
        )

        raw_response = self._call_with_retry(prompt, image_bytes, detected_type.mime_type)
        Log.debug(f"AI raw response length: {len(raw_response or '')} chars")

        result = self._parse_response(raw_response)
        Log.info(f"Bill analysis complete: {len(result.items)} line items extracted")
        return result

    def _check_input(self, image_bytes: bytes | None, detected_type: DetectedType | None) -> None:
        if image_bytes is None or len(image_bytes) == 0:
            raise BillAnalysisError(
                BillAnalysisErrorCode.INVALID_INPUT, "Image data must not be empty"
            )
        if detected_type is None:
            raise BillAnalysisError(
                BillAnalysisErrorCode.INVALID_INPUT, "Image type must not be null"
            )
        if detected_type is DetectedType.PDF:
            raise BillAnalysisError(
                BillAnalysisErrorCode.UNSUPPORTED_FORMAT,
                "PDF analysis is not yet supported. Please upload an image (JPEG or PNG).",
            )
        if not detected_type.is_image:
            raise BillAnalysisError(
                BillAnalysisErrorCode.UNSUPPORTED_FORMAT,
                "Only JPEG and PNG images can be analyzed",
            )
        if len(image_bytes) > self._max_image_size_bytes:
            raise BillAnalysisError(
                BillAnalysisErrorCode.PROMPT_TOO_LARGE,
                f"Image size exceeds maximum allowed for analysis: {len(image_bytes)} bytes",
            )

    def _build_prompt(self) -> str:
        return self._prompt_template.format(json_schema=self._json_schema)

    def _call_with_retry(self, prompt: str, image_bytes: bytes, mime_type: str) -> str | None:
        def attempt() -> str | None:
            try:
                return self._client.create_chat_completion(
                    model=self._model,
                    temperature=self._temperature,
                    system_prompt=self._system_prompt,
                    user_prompt=prompt,
                    image_bytes=image_bytes,
                    image_mime_type=mime_type,
                    json_schema=self._json_schema_dict,
                )
            except (ProviderCallError, BillAnalysisError):
                raise
            except Exception as exc:
                raise ProviderCallError(
                    FailureKind.UNKNOWN, f"{type(exc).__name__}: {exc}"
                ) from exc

        try:
            return self._retry.execute(attempt)
        except RetryExhaustedError as exc:
            Log.error(f"AI provider call failed after {exc.attempts} attempts: {exc.last_error}")
            raise BillAnalysisError(
                BillAnalysisErrorCode.SERVICE_UNAVAILABLE, SERVICE_UNAVAILABLE_MESSAGE
            ) from exc
        except RetryCancelledError as exc:
            Log.warning(f"AI provider call aborted: {exc}")
            raise BillAnalysisError(
                BillAnalysisErrorCode.SERVICE_UNAVAILABLE, SERVICE_UNAVAILABLE_MESSAGE
            ) from exc
        except ProviderCallError as exc:
            Log.error(f"AI provider call failed ({exc.kind.value}): {exc}")
            raise BillAnalysisError(
                BillAnalysisErrorCode.ANALYSIS_FAILED, ANALYSIS_FAILED_MESSAGE
            ) from exc

    @staticmethod
    def _parse_response(raw_response: str | None) -> BillAnalysisResult:
        if raw_response is None or not raw_response.strip():
            raise BillAnalysisError(
                BillAnalysisErrorCode.INVALID_RESPONSE,
                "Received empty response from analysis service",
            )

        outcome = decode_response(raw_response)
        if not outcome.ok:
            Log.error(
                f"Failed to parse AI response ({len(raw_response)} chars): {outcome.error}"
            )
            raise BillAnalysisError(
                BillAnalysisErrorCode.INVALID_RESPONSE, "Failed to parse analysis response"
            )
        return validate_and_build(outcome.payload)
