import threading

from bill_analyzer.analysis.base import BaseBillAnalyzer
from bill_analyzer.analysis.factory import BillAnalyzerFactory
from bill_analyzer.config.settings import Settings
from bill_analyzer.imaging.base import BaseImageNormalizer
from bill_analyzer.imaging.pillow_normalizer import PillowImageNormalizer
from bill_analyzer.logging.logger import Log
from bill_analyzer.processor.models import BillAnalysisResponse
from bill_analyzer.processor.pipeline import PipelineContext, PipelineStep
from bill_analyzer.processor.steps import (
    AnalyzeStep,
    BuildResponseStep,
    NormalizeImageStep,
    ReadContentStep,
    ValidateUploadStep,
)
from bill_analyzer.upload.models import RawUpload
from bill_analyzer.upload.validator import FileValidator


class Processor:
    """Runs one upload through the bill analysis pipeline.

    Pipeline: validate -> read -> normalize -> analyze -> build response.
    Any step raising stops the pipeline; later steps never run.
    """

    def __init__(
        self,
        validator: FileValidator,
        normalizer: BaseImageNormalizer,
        analyzer: BaseBillAnalyzer,
        steps: list[PipelineStep] | None = None,
    ) -> None:
        self._steps = steps or [
            ValidateUploadStep(validator),
            ReadContentStep(validator),
            NormalizeImageStep(normalizer),
            AnalyzeStep(analyzer),
            BuildResponseStep(),
        ]

    def process(self, upload: RawUpload | None) -> BillAnalysisResponse:
        """Run the full pipeline for an upload and return the response envelope."""
        context = PipelineContext(upload=upload)
        for step in self._steps:
            context = step.run(context)

        if context.response is None:
            raise ValueError("Pipeline finished without building a response")
        Log.info(f"Bill analysis {context.response.id} completed")
        return context.response


def build_processor(
    settings: Settings,
    cancel_event: threading.Event | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    validator = FileValidator(settings)
    normalizer = PillowImageNormalizer(
        max_width=settings.image_max_width_px,
        jpeg_quality=settings.image_jpeg_quality,
    )
    analyzer = BillAnalyzerFactory.create(settings, cancel_event=cancel_event)
    return Processor(validator=validator, normalizer=normalizer, analyzer=analyzer)
