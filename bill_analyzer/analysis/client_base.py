from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific vision chat clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        image_bytes: bytes,
        image_mime_type: str,
        json_schema: dict[str, object],
    ) -> str | None:
        """Send one request with an attached image and return the response text.

        Raises:
            ProviderCallError: tagged TRANSIENT, PERMANENT or UNKNOWN.
        """
