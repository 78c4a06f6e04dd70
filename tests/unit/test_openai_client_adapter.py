import base64
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from bill_analyzer.analysis.exceptions import FailureKind, ProviderCallError
from bill_analyzer.analysis.openai_client_adapter import OpenAIVisionClientAdapter

IMAGE = b"\x89PNG\r\n\x1a\nfake"


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _status_error(status_code: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.test/v1/chat/completions")
    return openai.APIStatusError(
        f"status {status_code}",
        response=httpx.Response(status_code, request=request),
        body=None,
    )


def _call(adapter: OpenAIVisionClientAdapter) -> str | None:
    return adapter.create_chat_completion(
        model="m",
        temperature=0.1,
        system_prompt="system",
        user_prompt="user",
        image_bytes=IMAGE,
        image_mime_type="image/png",
        json_schema={"type": "object"},
    )


@pytest.fixture()
def mock_client() -> Iterator[MagicMock]:
    client = MagicMock()
    with patch(
        "bill_analyzer.analysis.openai_client_adapter.openai.OpenAI",
        return_value=client,
    ) as factory:
        client.factory = factory
        yield client


class TestOpenAIVisionClientAdapter:
    def test_returns_content(self, mock_client: MagicMock) -> None:
        mock_client.chat.completions.create.return_value = _make_mock_response('{"ok": true}')
        adapter = OpenAIVisionClientAdapter(api_key="k", timeout_seconds=30)
        assert _call(adapter) == '{"ok": true}'

    def test_disables_sdk_retries(self, mock_client: MagicMock) -> None:
        OpenAIVisionClientAdapter(api_key="k", timeout_seconds=12, base_url="https://x/v1")
        mock_client.factory.assert_called_once_with(
            api_key="k", timeout=12, base_url="https://x/v1", max_retries=0
        )

    def test_sends_image_as_data_url(self, mock_client: MagicMock) -> None:
        mock_client.chat.completions.create.return_value = _make_mock_response("{}")
        _call(OpenAIVisionClientAdapter(api_key="k", timeout_seconds=30))
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        system_msg, user_msg = kwargs["messages"]
        assert system_msg == {"role": "system", "content": "system"}
        text_part, image_part = user_msg["content"]
        assert text_part == {"type": "text", "text": "user"}
        expected_url = "data:image/png;base64," + base64.b64encode(IMAGE).decode("ascii")
        assert image_part == {"type": "image_url", "image_url": {"url": expected_url}}
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["model"] == "m"
        assert kwargs["temperature"] == 0.1

    def test_json_schema_response_format(self, mock_client: MagicMock) -> None:
        mock_client.chat.completions.create.return_value = _make_mock_response("{}")
        adapter = OpenAIVisionClientAdapter(
            api_key="k", timeout_seconds=30, use_json_schema=True
        )
        _call(adapter)
        response_format = mock_client.chat.completions.create.call_args.kwargs[
            "response_format"
        ]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["schema"] == {"type": "object"}

    def test_returns_none_without_choices(self, mock_client: MagicMock) -> None:
        response = MagicMock()
        response.choices = []
        mock_client.chat.completions.create.return_value = response
        assert _call(OpenAIVisionClientAdapter(api_key="k", timeout_seconds=30)) is None

    def test_returns_none_content(self, mock_client: MagicMock) -> None:
        mock_client.chat.completions.create.return_value = _make_mock_response(None)
        assert _call(OpenAIVisionClientAdapter(api_key="k", timeout_seconds=30)) is None


class TestFailureClassification:
    @staticmethod
    def _kind_for(mock_client: MagicMock, error: Exception) -> FailureKind:
        mock_client.chat.completions.create.side_effect = error
        with pytest.raises(ProviderCallError) as exc_info:
            _call(OpenAIVisionClientAdapter(api_key="k", timeout_seconds=30))
        return exc_info.value.kind

    def test_connection_error_is_transient(self, mock_client: MagicMock) -> None:
        error = openai.APIConnectionError(request=MagicMock())
        assert self._kind_for(mock_client, error) is FailureKind.TRANSIENT

    def test_sdk_timeout_is_transient(self, mock_client: MagicMock) -> None:
        error = openai.APITimeoutError(request=MagicMock())
        assert self._kind_for(mock_client, error) is FailureKind.TRANSIENT

    def test_httpx_timeout_is_transient(self, mock_client: MagicMock) -> None:
        error = httpx.TimeoutException("timeout")
        assert self._kind_for(mock_client, error) is FailureKind.TRANSIENT

    @pytest.mark.parametrize("status_code", [408, 409, 429, 500, 502, 503])
    def test_retryable_status_is_transient(
        self, mock_client: MagicMock, status_code: int
    ) -> None:
        assert self._kind_for(mock_client, _status_error(status_code)) is FailureKind.TRANSIENT

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422])
    def test_client_status_is_permanent(
        self, mock_client: MagicMock, status_code: int
    ) -> None:
        assert self._kind_for(mock_client, _status_error(status_code)) is FailureKind.PERMANENT

    def test_other_api_error_is_unknown(self, mock_client: MagicMock) -> None:
        error = openai.APIError(message="odd", request=MagicMock(), body=None)
        assert self._kind_for(mock_client, error) is FailureKind.UNKNOWN

    def test_unrelated_exception_propagates(self, mock_client: MagicMock) -> None:
        mock_client.chat.completions.create.side_effect = KeyError("boom")
        with pytest.raises(KeyError):
            _call(OpenAIVisionClientAdapter(api_key="k", timeout_seconds=30))
