import uuid
from dataclasses import dataclass
from datetime import datetime

from bill_analyzer.analysis.models import BillAnalysisResult


@dataclass(frozen=True)
class BillAnalysisResponse:
    """Envelope returned to clients and kept in the result store."""

    id: uuid.UUID
    original_file_name: str
    analysis: BillAnalysisResult
    analyzed_at: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "originalFileName": self.original_file_name,
            "analysis": self.analysis.to_dict(),
            "analyzedAt": self.analyzed_at.isoformat(),
        }
