import asyncio
from unittest.mock import AsyncMock, patch

from azurechat.llm.inference import create_inference_client, text_generation_stream


class TestInferenceClient:

    def test_endpoint_client(self):
        with patch("azurechat.llm.inference.AsyncInferenceClient") as client_cls:
            create_inference_client("tok", endpoint="https://my-endpoint.example/")

        client_cls.assert_called_once_with(model="https://my-endpoint.example/", token="tok")

    def test_default_host_client(self):
        with patch("azurechat.llm.inference.AsyncInferenceClient") as client_cls:
            create_inference_client("tok")

        client_cls.assert_called_once_with(token="tok")

    def test_empty_endpoint_uses_default_host(self):
        with patch("azurechat.llm.inference.AsyncInferenceClient") as client_cls:
            create_inference_client(None, endpoint="")

        client_cls.assert_called_once_with(token=None)

    def test_stream_drops_unset_parameters(self):
        client = AsyncMock()
        client.text_generation.return_value = "stream"

        result = asyncio.run(text_generation_stream(
            client, "hello", model="gpt2",
            parameters={"temperature": 0.3, "top_k": None},
        ))

        assert result == "stream"
        client.text_generation.assert_awaited_once_with(
            "hello", stream=True, details=True, temperature=0.3, model="gpt2")
