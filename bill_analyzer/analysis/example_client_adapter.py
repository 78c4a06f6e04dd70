"""Offline vision client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseVisionClient and register the provider in BillAnalyzerFactory.
"""

import json
from typing import ClassVar

from bill_analyzer.analysis.client_base import BaseVisionClient


class ExampleVisionClientAdapter(BaseVisionClient):
    """Returns a fixed, valid bill analysis JSON without any network call."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "merchantName": "Example Store",
        "items": [
            {"name": "Milk", "quantity": 1, "unitPrice": 3.49, "totalPrice": 3.49},
            {"name": "Bread", "quantity": 2, "unitPrice": 4.5, "totalPrice": 9.0},
        ],
        "totalAmount": 12.49,
        "currency": "PLN",
        "categoryTags": ["grocery"],
    }

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
        _ = model, temperature, system_prompt, user_prompt, image_bytes, image_mime_type
        _ = json_schema
        return json.dumps(self.DEFAULT_RESPONSE)
