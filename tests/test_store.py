from insights import config
from insights.store import DatasetStore, get_store
from insights.table import ROW_INDEX_KEY, Table


def _table(n):
    return Table.from_records([{"id": i, "label": f"row {i}"} for i in range(n)])


def test_save_caps_rows_and_builds_preview():
    store = DatasetStore()
    dataset = store.save(name="big", file_name="big.csv", file_type="csv", table=_table(1500))

    assert dataset.row_count == 1500
    assert dataset.column_count == 2
    assert len(dataset.data) == config.STORED_ROW_LIMIT
    assert len(dataset.preview) == config.PREVIEW_ROWS
    assert dataset.preview[0] == {ROW_INDEX_KEY: 1, "id": 0, "label": "row 0"}
    assert store.get(dataset.id) is dataset


def test_stored_rows_are_copies():
    """Mutating the source table after saving does not change the stored copy."""
    store = DatasetStore()
    table = _table(3)
    dataset = store.save(name="t", file_name="t.json", file_type="json", table=table)

    table.rows[0]["label"] = "changed"

    assert dataset.data[0]["label"] == "row 0"
    assert dataset.to_table().columns == ["id", "label"]


def test_list_is_newest_first_and_delete():
    store = DatasetStore()
    first = store.save(name="a", file_name="a.csv", file_type="csv", table=_table(1))
    second = store.save(name="b", file_name="b.csv", file_type="csv", table=_table(1))

    assert [d.id for d in store.list()] == [second.id, first.id]
    assert store.delete(first.id) is True
    assert store.delete(first.id) is False
    assert store.get(first.id) is None


def test_get_store_is_a_singleton():
    assert get_store() is get_store()
