from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

from dotenv import load_dotenv
from groq import Groq

load_dotenv()

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Thin async wrapper around the hosted chat model.

    Uses Groq's chat completions API via the `groq` Python client; the
    blocking call runs in a worker thread so request handlers stay async.
    """

    def __init__(self) -> None:
        api_key = os.getenv("GROQ_API_KEY")
        if not api_key:
            raise RuntimeError(
                "Missing GROQ_API_KEY environment variable. "
                "Set it in .env or your environment to enable dataset chat."
            )
        self._client = Groq(api_key=api_key)

    async def complete(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        **kwargs: Any,
    ) -> str:
        """
        Single-turn chat completion that returns the assistant's message content.
        """

        def _generate() -> str:
            messages = [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ]
            params: dict[str, Any] = {
                "model": model,
                "messages": messages,
            }
            params.update({k: v for k, v in kwargs.items() if v is not None})

            response = self._client.chat.completions.create(**params)
            if not response.choices:
                logger.warning("Model %s returned no choices", model)
                return ""
            return (response.choices[0].message.content or "").strip()

        return await asyncio.to_thread(_generate)
