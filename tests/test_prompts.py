from llm.prompts import (
    DATA_ANALYST_SYSTEM_PROMPT,
    build_data_analyst_system_prompt,
    build_welcome_message,
)


def test_prompt_without_data_is_base_prompt():
    assert build_data_analyst_system_prompt(None, 5) == DATA_ANALYST_SYSTEM_PROMPT.strip()
    assert build_data_analyst_system_prompt({"name": "x", "data": []}, 5) == DATA_ANALYST_SYSTEM_PROMPT.strip()


def test_prompt_lists_columns_without_row_index():
    rows = [{"rowIndex": i, "region": "N", "sales": i * 10.0} for i in range(1, 9)]
    prompt = build_data_analyst_system_prompt(
        {"name": "q1", "rowCount": 1200, "columnCount": 2, "data": rows}, 5
    )

    assert 'Dataset Name: "q1"' in prompt
    assert "Total Rows: 1200" in prompt
    assert "Columns: region, sales" in prompt
    assert "first 5 rows" in prompt
    assert '"sales": 50.0' in prompt
    assert '"sales": 60.0' not in prompt


def test_welcome_message_mentions_counts():
    message = build_welcome_message("sales", 42, 3)

    assert '"sales" with 42 rows and 3 columns' in message
