from abc import ABC, abstractmethod

from bill_analyzer.analysis.models import BillAnalysisResult
from bill_analyzer.upload.models import DetectedType


class BaseBillAnalyzer(ABC):
    """Contract for all bill analysis adapters."""

    @abstractmethod
    def analyze(
        self, image_bytes: bytes | None, detected_type: DetectedType | None
    ) -> BillAnalysisResult:
        """Extract structured line-item data from a normalized bill image.

        Args:
            image_bytes: Output of the image normalizer.
            detected_type: Type detected from the upload's magic bytes.

        Returns:
            BillAnalysisResult with at least one line item.

        Raises:
            BillAnalysisError: on any failure.
        """
