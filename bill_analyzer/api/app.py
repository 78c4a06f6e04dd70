import threading
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, UploadFile

from bill_analyzer.api.errors import (
    AnalysisNotFoundError,
    InvalidIdFormatError,
    register_exception_handlers,
)
from bill_analyzer.config.settings import Settings
from bill_analyzer.logging.logger import Log
from bill_analyzer.processor.processor import Processor, build_processor
from bill_analyzer.storage.result_store import InMemoryResultStore
from bill_analyzer.upload.models import RawUpload


def create_app(
    settings: Settings,
    processor: Processor | None = None,
    store: InMemoryResultStore | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Route handlers are sync, so each request runs on its own worker thread.
    Shutdown sets the cancel event, which aborts retry loops waiting on backoff.
    """
    cancel_event = threading.Event()
    if processor is None:
        processor = build_processor(settings, cancel_event=cancel_event)
    if store is None:
        store = InMemoryResultStore()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        Log.info(
            f"Bill analyzer started (env={settings.app_env}, "
            f"provider={settings.analysis_provider})"
        )
        yield
        cancel_event.set()
        Log.info("Bill analyzer shutting down")

    app = FastAPI(title="Bill Analyzer API", lifespan=lifespan)
    register_exception_handlers(app)

    @app.post("/api/bills/upload", status_code=201, response_model=None)
    def upload_bill(file: UploadFile | None = File(None)) -> dict[str, object]:
        upload = None
        if file is not None:
            upload = RawUpload.from_stream(
                file.file, content_type=file.content_type, filename=file.filename
            )
        response = processor.process(upload)
        store.save(response.id, response)
        return response.to_dict()

    @app.get("/api/bills/{analysis_id}", response_model=None)
    def get_analysis(analysis_id: str) -> dict[str, object]:
        try:
            parsed_id = uuid.UUID(analysis_id)
        except ValueError as exc:
            raise InvalidIdFormatError(analysis_id) from exc
        response = store.find_by_id(parsed_id)
        if response is None:
            raise AnalysisNotFoundError(parsed_id)
        return response.to_dict()

    @app.get("/api/health")
    def health_check() -> dict[str, str]:
        return {"status": "UP"}

    return app
