"""
Dataset chat agent: answers free-text questions about an uploaded dataset.

Single-shot call into the LLM. The dataset is handed over as a context object
{name, rowCount, columnCount, data}; the agent turns it into the analyst system
prompt and returns plain text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from insights import config
from insights.store import StoredDataset
from llm.client import LLMClient
from llm.prompts import build_data_analyst_system_prompt


@dataclass
class DatasetChatResult:
    answer: str


def build_data_context(dataset: StoredDataset) -> Dict[str, Any]:
    """Context shape shared with the model: name, counts and the stored rows."""
    return {
        "name": dataset.name,
        "rowCount": dataset.row_count,
        "columnCount": dataset.column_count,
        "data": dataset.data,
    }


class DatasetChatAgent:
    """
    Wraps the LLM with the analyst prompt for one dataset.

    The agent does not keep conversation state; every call is independent.
    """

    def __init__(self, model: str = config.CHAT_MODEL) -> None:
        self.model = model

    async def run(self, question: str, data_context: Dict[str, Any] | None) -> DatasetChatResult:
        client = LLMClient()
        system_prompt = build_data_analyst_system_prompt(data_context, config.CHAT_SAMPLE_ROWS)

        answer = await client.complete(
            model=self.model,
            system_prompt=system_prompt,
            user_prompt=question,
            max_tokens=config.CHAT_MAX_TOKENS,
        )

        return DatasetChatResult(answer=answer or "No response received from the model.")
