import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from bill_analyzer.analysis.base import BaseBillAnalyzer
from bill_analyzer.imaging.base import BaseImageNormalizer
from bill_analyzer.logging.logger import Log
from bill_analyzer.processor.models import BillAnalysisResponse
from bill_analyzer.processor.pipeline import PipelineContext, PipelineStep
from bill_analyzer.upload.validator import FileValidator


class ValidateUploadStep(PipelineStep):
    def __init__(self, validator: FileValidator) -> None:
        self._validator = validator

    def run(self, context: PipelineContext) -> PipelineContext:
        context.detected_type = self._validator.validate(context.upload)
        context.sanitized_filename = self._validator.sanitize_filename(context.upload.filename)
        Log.info(f"Processing upload '{context.sanitized_filename}'")
        return context


class ReadContentStep(PipelineStep):
    def __init__(self, validator: FileValidator) -> None:
        self._validator = validator

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._validator.read_content(context.upload)
        return context


class NormalizeImageStep(PipelineStep):
    def __init__(self, normalizer: BaseImageNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.detected_type is None:
            raise ValueError("PipelineContext.detected_type must be set before normalization")
        context.normalized_bytes = self._normalizer.normalize(
            context.raw_bytes, context.detected_type
        )
        Log.info(
            f"Normalized image: {len(context.raw_bytes)} -> "
            f"{len(context.normalized_bytes)} bytes"
        )
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, analyzer: BaseBillAnalyzer) -> None:
        self._analyzer = analyzer

    def run(self, context: PipelineContext) -> PipelineContext:
        context.analysis_result = self._analyzer.analyze(
            context.normalized_bytes, context.detected_type
        )
        return context


class BuildResponseStep(PipelineStep):
    def __init__(
        self,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._id_factory = id_factory
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.analysis_result is None:
            raise ValueError("PipelineContext.analysis_result must be set before building response")
        context.response = BillAnalysisResponse(
            id=self._id_factory(),
            original_file_name=context.sanitized_filename,
            analysis=context.analysis_result,
            analyzed_at=self._clock(),
        )
        return context
