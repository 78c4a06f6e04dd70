import base64

import httpx
import openai

from bill_analyzer.analysis.client_base import BaseVisionClient
from bill_analyzer.analysis.exceptions import FailureKind, ProviderCallError

_TRANSIENT_STATUS_CODES = frozenset({408, 409, 429})


class OpenAIVisionClientAdapter(BaseVisionClient):
    """Vision client built on the OpenAI-compatible chat completions API.

    SDK-level retries are disabled; retrying is owned by the caller.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        use_json_schema: bool = False,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )
        self._use_json_schema = use_json_schema

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
        image_url = (
            f"data:{image_mime_type};base64,"
            f"{base64.b64encode(image_bytes).decode('ascii')}"
        )
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format=self._response_format(json_schema),
                messages=[
                    {"role": "system", "content": system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": user_prompt},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    },
                ],
            )
        except (openai.APIConnectionError, httpx.TransportError) as exc:
            raise ProviderCallError(
                FailureKind.TRANSIENT, f"AI provider network error: {exc}"
            ) from exc
        except openai.APIStatusError as exc:
            raise ProviderCallError(
                _classify_status(exc.status_code),
                f"AI provider API error (HTTP {exc.status_code}): {exc}",
            ) from exc
        except openai.APIError as exc:
            raise ProviderCallError(
                FailureKind.UNKNOWN, f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            return None
        return response.choices[0].message.content

    def _response_format(self, json_schema: dict[str, object]) -> dict[str, object]:
        if not self._use_json_schema:
            return {"type": "json_object"}
        return {
            "type": "json_schema",
            "json_schema": {
                "name": "bill_analysis_result",
                "strict": False,
                "schema": json_schema,
            },
        }


def _classify_status(status_code: int) -> FailureKind:
    if status_code in _TRANSIENT_STATUS_CODES or status_code >= 500:
        return FailureKind.TRANSIENT
    return FailureKind.PERMANENT
