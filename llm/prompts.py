import json
from typing import Any, Dict, List

from insights.table import ROW_INDEX_KEY

DATA_ANALYST_SYSTEM_PROMPT = """
You are an expert data analyst. Analyze the provided dataset and give specific, actionable insights based on the actual data values and structure. Always reference specific data points, column names, and values from the dataset.
"""

DATASET_CONTEXT_TEMPLATE = """
DATASET CONTEXT:
- Dataset Name: "{name}"
- Total Rows: {row_count}
- Columns: {columns}

SAMPLE DATA (first {sample_size} rows):
{sample}

ANALYSIS REQUIREMENTS:
1. Reference actual values from this data (specific names, categories, numbers)
2. Use specific column names ({columns})
3. Provide concrete insights based on the numbers shown
4. Give actionable recommendations
5. Be specific - mention actual values, not generic patterns

Analyze THIS specific data with real insights.
"""

WELCOME_TEMPLATE = """I can see you've uploaded "{name}" with {row_count} rows and {column_count} columns. I'm ready to help you analyze this data!

You can ask me things like:
- "What patterns do you see in this data?"
- "Show me insights about the trends"
- "Which category performs best?"
- "What are the key findings?"

What would you like to explore first?"""


def context_columns(rows: List[Dict[str, Any]]) -> List[str]:
    """Column names of the first row, without the synthetic row index."""
    if not rows:
        return []
    return [str(k) for k in rows[0].keys() if k != ROW_INDEX_KEY]


def build_data_analyst_system_prompt(data_context: Dict[str, Any] | None, sample_size: int) -> str:
    """Base analyst prompt, plus a dataset block when the context carries rows."""
    prompt = DATA_ANALYST_SYSTEM_PROMPT.strip()
    rows = (data_context or {}).get("data") or []
    if not rows:
        return prompt

    columns = ", ".join(context_columns(rows))
    sample = json.dumps(rows[:sample_size], indent=2, default=str)
    return prompt + "\n" + DATASET_CONTEXT_TEMPLATE.format(
        name=data_context.get("name", ""),
        row_count=data_context.get("rowCount", len(rows)),
        columns=columns,
        sample_size=sample_size,
        sample=sample,
    )


def build_welcome_message(name: str, row_count: int, column_count: int) -> str:
    return WELCOME_TEMPLATE.format(name=name, row_count=row_count, column_count=column_count)
