from bill_analyzer.config.settings import Settings

_PLACEHOLDER_MARKERS = ("your_", "${", "REPLACE_WITH")
_GROQ_KEY_PREFIX = "gsk_"
_GROQ_KEY_LENGTH = 56


class ApiKeyError(RuntimeError):
    """Raised at startup when the provider API key is missing or malformed."""


def ensure_api_key_configured(settings: Settings) -> None:
    """Refuse to start with a missing, placeholder, or malformed API key.

    The offline ``example`` provider needs no key. Messages never include
    the key itself.
    """
    provider = settings.analysis_provider.lower()
    if provider == "example":
        return

    key = settings.analysis_api_key.strip()
    if not key:
        raise ApiKeyError(
            f"ANALYSIS_API_KEY must be set for analysis_provider={provider}"
        )
    if any(marker in key for marker in _PLACEHOLDER_MARKERS):
        raise ApiKeyError(
            "ANALYSIS_API_KEY is set to a placeholder value. Replace it with a real key."
        )
    if provider == "groq" and (
        not key.startswith(_GROQ_KEY_PREFIX) or len(key) != _GROQ_KEY_LENGTH
    ):
        raise ApiKeyError(
            "ANALYSIS_API_KEY format is invalid for groq. "
            f"Expected format: {_GROQ_KEY_PREFIX}[52 characters]."
        )
