"""
Remote text-generation client.

Two addressing modes, matching how the node is configured:

* an explicit ``endpoint`` URL: the client talks to that deployment
  directly and the model id is ignored;
* no endpoint: the default inference host is used and the model id is
  sent with every request.

Streams are opened with ``details=True`` so each record carries
``token.text`` and ``token.special``.
"""
from __future__ import annotations

import logging
from typing import Any, AsyncIterable, Dict, Optional

from huggingface_hub import AsyncInferenceClient

logger = logging.getLogger(__name__)


def create_inference_client(access_token: Optional[str],
                            endpoint: Optional[str] = None) -> AsyncInferenceClient:
    if endpoint:
        logger.info(f"Using inference endpoint {endpoint}")
        return AsyncInferenceClient(model=endpoint, token=access_token)

    logger.info("Using default inference host")
    return AsyncInferenceClient(token=access_token)


async def text_generation_stream(client: Any,
                                 prompt: str,
                                 model: Optional[str] = None,
                                 parameters: Optional[Dict[str, Any]] = None) -> AsyncIterable[Any]:
    """Open a token stream; parameters left as ``None`` are not sent."""
    kwargs = {k: v for k, v in (parameters or {}).items() if v is not None}
    if model:
        kwargs["model"] = model

    return await client.text_generation(prompt, stream=True, details=True, **kwargs)
