from datetime import datetime, timedelta

from insights.dates import iso_date_only
from insights.ingest import parse
from insights.profile import ColumnRole, classify_columns, line_chart, profile
from insights.table import Table


def _roles(table, **kwargs):
    return {c.name: c.role for c in classify_columns(table, **kwargs)}


def test_scenario_bar_and_pie():
    """The a,b sample yields 'a by b' and 'Distribution of b' with exact data."""
    table = parse(b"a,b\n1,x\n2,y\n3,x\n", "csv")

    assert _roles(table) == {"a": ColumnRole.NUMERIC, "b": ColumnRole.CATEGORICAL}

    charts = profile(table)
    assert [c.kind for c in charts] == ["bar", "pie"]

    bar, pie = charts
    assert bar.title == "a by b"
    assert bar.data == [{"b": "x", "a": 4.0}, {"b": "y", "a": 2.0}]
    assert (bar.xField, bar.yField) == ("b", "a")
    assert pie.title == "Distribution of b"
    assert pie.data == [{"name": "x", "value": 2}, {"name": "y", "value": 1}]


def test_numeric_rule_wins_over_low_cardinality():
    """Four numeric-looking values out of five with two distinct values is numeric."""
    table = Table.from_records(
        [{"flag": v} for v in ["1", "0", "1", "0", "n/a"]] + [{"flag": "1"}] * 10
    )

    assert _roles(table)["flag"] is ColumnRole.NUMERIC


def test_only_first_five_rows_are_sampled():
    records = [{"v": "text"} for _ in range(5)] + [{"v": i} for i in range(100)]

    assert _roles(Table.from_records(records))["v"] is ColumnRole.CATEGORICAL


def test_sample_size_is_tunable():
    records = [{"v": "text"} for _ in range(2)] + [{"v": i} for i in range(10)]
    table = Table.from_records(records)

    assert _roles(table, sample_size=2)["v"] is ColumnRole.CATEGORICAL
    assert _roles(table, sample_size=6)["v"] is ColumnRole.NUMERIC


def test_temporal_and_unclassified_columns():
    records = [
        {"when": f"2024-01-0{i}", "note": f"free text {i}", "amount": i * 10}
        for i in range(1, 7)
    ]
    roles = _roles(Table.from_records(records))

    assert roles == {
        "when": ColumnRole.TEMPORAL,
        "note": ColumnRole.UNCLASSIFIED,
        "amount": ColumnRole.NUMERIC,
    }


def test_small_tables_shrink_the_categorical_limit():
    """Two rows allow at most 1.4 distinct values, so two labels are not categorical."""
    table = Table.from_records([{"label": "alpha"}, {"label": "beta"}])

    assert _roles(table)["label"] is ColumnRole.UNCLASSIFIED


def test_line_chart_sorted_and_capped():
    start = datetime(2023, 1, 1)
    records = [
        {"day": (start + timedelta(days=i)).strftime("%Y-%m-%d"), "sales": str(i)}
        for i in reversed(range(80))
    ]
    line = line_chart(Table.from_records(records), "day", "sales")

    assert line.title == "sales Over Time"
    assert len(line.data) == 50
    assert line.data[0] == {"day": "2023-01-01", "sales": 0.0}
    assert line.data[-1]["day"] == "2023-02-19"


def test_larger_tables_classify_dates_as_categories():
    """With 8+ rows five samples always fit the categorical limit."""
    records = [{"day": f"2024-05-{i:02d}", "v": i} for i in range(1, 9)]

    assert _roles(Table.from_records(records))["day"] is ColumnRole.CATEGORICAL


def test_line_chart_from_profile_skips_blank_rows():
    records = [
        {"day": "2024-03-01", "v": 1},
        {"day": "2024-03-02", "v": None},
        {"day": "", "v": 5},
        {"day": "not a date at all", "v": 2},
        {"day": "2024-03-05", "v": 3},
        {"day": "2024-03-06", "v": 4},
    ]
    line = next(c for c in profile(Table.from_records(records)) if c.kind == "line")

    assert (line.xField, line.yField) == ("day", "v")
    assert [p["day"] for p in line.data] == ["2024-03-01", "2024-03-05", "2024-03-06", "not a date at all"]


def test_line_chart_needs_two_points():
    table = Table.from_records(
        [{"day": "2024-03-01", "v": 1}, {"day": "2024-03-02", "v": None}, {"day": "", "v": 3}]
    )

    assert line_chart(table, "day", "v") is None


def test_injected_date_parser_controls_temporal_role():
    records = [{"when": f"March {i}, 2024", "n": i} for i in range(1, 7)]
    table = Table.from_records(records)

    assert _roles(table)["when"] is ColumnRole.TEMPORAL
    assert _roles(table, date_parser=iso_date_only)["when"] is ColumnRole.UNCLASSIFIED


def test_top_n_bounds():
    """Bar keeps 10 groups and pie 8, however many categories exist."""
    records = [{"cat": "A", "n": 1}] * 5 + [{"cat": f"c{i}", "n": i} for i in range(2000)]
    charts = {c.kind: c for c in profile(Table.from_records(records))}

    assert len(charts["bar"].data) == 10
    assert charts["bar"].data[0] == {"cat": "c1999", "n": 1999.0}
    assert len(charts["pie"].data) == 8
    assert charts["pie"].data[0] == {"name": "A", "value": 5}


def test_bar_treats_non_numeric_as_zero():
    records = [
        {"team": "red", "pts": 5},
        {"team": "blue", "pts": "oops"},
        {"team": "red", "pts": 2},
        {"team": "blue", "pts": 1},
        {"team": "red", "pts": None},
    ]
    bar = profile(Table.from_records(records))[0]

    assert bar.data == [{"team": "red", "pts": 7.0}, {"team": "blue", "pts": 1.0}]


def test_scatter_only_for_all_numeric_table():
    records = [{"x": i, "y": i * 2, "z": 100 + i * 3} for i in range(1, 151)]
    charts = profile(Table.from_records(records))

    assert [c.kind for c in charts] == ["scatter"]
    scatter = charts[0]
    assert scatter.title == "x vs y"
    assert len(scatter.data) == 100
    assert scatter.data[0] == {"x": 1.0, "y": 2.0}


def test_scatter_skips_falsy_pairs():
    records = [{"x": 0, "y": 1}, {"x": 2, "y": 4}, {"x": 3, "y": 0}, {"x": 5, "y": 6}, {"x": 7, "y": 8}]
    scatter = profile(Table.from_records(records))[0]

    assert scatter.data == [{"x": 2.0, "y": 4.0}, {"x": 5.0, "y": 6.0}, {"x": 7.0, "y": 8.0}]


def test_single_numeric_column_gives_nothing():
    table = Table.from_records([{"v": i * 1.5} for i in range(20)])

    assert profile(table) == []


def test_empty_inputs_give_no_charts():
    assert profile(Table(columns=[], rows=[{"rowIndex": 1}])) == []
    assert profile(Table(columns=["a"], rows=[])) == []
    assert classify_columns(Table(columns=["a"], rows=[{"rowIndex": 1, "a": 1}]), sample_size=0) == []


def test_profile_is_deterministic_and_read_only():
    table = parse(b"region,sales,units\nN,10,1\nS,20,2\nN,5,3\nE,7,4\nS,1,5\n", "csv")
    before = [dict(r) for r in table.rows]

    first = [c.to_dict() for c in profile(table)]
    second = [c.to_dict() for c in profile(table)]

    assert first == second
    assert table.rows == before
    assert [c["kind"] for c in first] == ["bar", "pie", "scatter"]


def test_descriptor_to_dict_omits_missing_axes():
    pie = profile(parse(b"a,b\n1,x\n2,y\n3,x\n", "csv"))[1]

    assert pie.to_dict() == {
        "id": "pie-chart",
        "kind": "pie",
        "title": "Distribution of b",
        "data": [{"name": "x", "value": 2}, {"name": "y", "value": 1}],
    }


def test_integers_past_float_range_do_not_break_profiling():
    """Huge JSON integers are grouped as categories but never summed or counted as numbers."""
    huge = 10**400
    table = parse(
        f'[{{"id": {huge}, "v": 1}}, {{"id": {huge}, "v": 2}}, {{"id": 7, "v": 3}},'
        f' {{"id": 7, "v": 4}}, {{"id": {huge}, "v": 5}}]',
        "json",
    )

    assert _roles(table) == {"id": ColumnRole.CATEGORICAL, "v": ColumnRole.NUMERIC}

    bar, pie = profile(table)
    assert bar.data == [{"id": huge, "v": 8.0}, {"id": 7, "v": 7.0}]
    assert pie.data == [{"name": huge, "value": 3}, {"name": 7, "value": 2}]

    big_measure = Table.from_records([{"k": "a", "n": huge}, {"k": "a", "n": 1}, {"k": "b", "n": 2}, {"k": "b", "n": 3}])
    assert profile(big_measure)[0].data == [{"k": "b", "n": 5.0}, {"k": "a", "n": 1.0}]
