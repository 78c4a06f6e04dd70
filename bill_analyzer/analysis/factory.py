import threading
from typing import ClassVar

from bill_analyzer.analysis.analyzer import BillAnalyzer
from bill_analyzer.analysis.base import BaseBillAnalyzer
from bill_analyzer.analysis.example_client_adapter import ExampleVisionClientAdapter
from bill_analyzer.analysis.openai_client_adapter import OpenAIVisionClientAdapter
from bill_analyzer.config.settings import Settings


class BillAnalyzerFactory:
    """Creates the configured bill analyzer adapter."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "groq": "https://api.groq.com/openai/v1",
        "openrouter": "https://openrouter.ai/api/v1",
        "together": "https://api.together.xyz/v1",
    }

    @classmethod
    def create(
        cls, settings: Settings, cancel_event: threading.Event | None = None
    ) -> BaseBillAnalyzer:
        """Create a configured bill analyzer from application settings."""
        provider = settings.analysis_provider.strip().lower()
        if provider == "example":
            client = ExampleVisionClientAdapter()
            model = "example"
        else:
            client = OpenAIVisionClientAdapter(
                api_key=settings.analysis_api_key,
                timeout_seconds=settings.analysis_timeout_seconds,
                base_url=cls._resolve_base_url(provider, settings),
                use_json_schema=settings.analysis_use_json_schema,
            )
            model = settings.analysis_model_name
        return BillAnalyzer(
            client=client,
            model=model,
            temperature=settings.analysis_temperature,
            retry_policy=settings.retry_policy(),
            max_image_size_bytes=settings.analysis_max_image_size_bytes,
            cancel_event=cancel_event,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = settings.analysis_base_url.strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "analysis_base_url is required for analysis_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")
