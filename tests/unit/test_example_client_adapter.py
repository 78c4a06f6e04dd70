"""Tests for ExampleVisionClientAdapter (template/reference adapter)."""

import json

from bill_analyzer.analysis.decoder import decode_response
from bill_analyzer.analysis.example_client_adapter import ExampleVisionClientAdapter
from bill_analyzer.analysis.validator import validate_and_build


class TestExampleVisionClientAdapter:
    def test_implements_base_contract(self) -> None:
        adapter = ExampleVisionClientAdapter()
        result = adapter.create_chat_completion(
            model="any",
            temperature=0.0,
            system_prompt="sys",
            user_prompt="user",
            image_bytes=b"\xff\xd8\xff",
            image_mime_type="image/jpeg",
            json_schema={"type": "object"},
        )
        assert isinstance(result, str)
        parsed = json.loads(result)
        assert "merchantName" in parsed
        assert "items" in parsed

    def test_returns_valid_bill_structure(self) -> None:
        result = ExampleVisionClientAdapter().create_chat_completion(
            model="x",
            temperature=0.1,
            system_prompt="",
            user_prompt="",
            image_bytes=b"",
            image_mime_type="image/png",
            json_schema={},
        )
        bill = validate_and_build(decode_response(result).payload)
        assert bill.merchant_name == "Example Store"
        assert len(bill.items) == 2
