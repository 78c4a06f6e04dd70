from abc import ABC, abstractmethod
from dataclasses import dataclass

from bill_analyzer.analysis.models import BillAnalysisResult
from bill_analyzer.processor.models import BillAnalysisResponse
from bill_analyzer.upload.models import DetectedType, RawUpload


@dataclass(slots=True)
class PipelineContext:
    upload: RawUpload | None
    detected_type: DetectedType | None = None
    sanitized_filename: str = ""
    raw_bytes: bytes = b""
    normalized_bytes: bytes = b""
    analysis_result: BillAnalysisResult | None = None
    response: BillAnalysisResponse | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
