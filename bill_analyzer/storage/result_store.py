import threading
import uuid

from bill_analyzer.processor.models import BillAnalysisResponse


class InMemoryResultStore:
    """Thread-safe in-process lookup table of analysis responses by id.

    Contents are lost on restart.
    """

    def __init__(self) -> None:
        self._results: dict[uuid.UUID, BillAnalysisResponse] = {}
        self._lock = threading.Lock()

    def save(self, result_id: uuid.UUID, response: BillAnalysisResponse) -> None:
        if result_id is None:
            raise ValueError("ID must not be None")
        if response is None:
            raise ValueError("Response must not be None")
        with self._lock:
            self._results[result_id] = response

    def find_by_id(self, result_id: uuid.UUID) -> BillAnalysisResponse | None:
        if result_id is None:
            raise ValueError("ID must not be None")
        with self._lock:
            return self._results.get(result_id)
