import pytest

from insights.store import get_store


@pytest.fixture(autouse=True)
def _reset_store():
    """Clear the process-wide dataset store so tests do not see each other's uploads."""
    get_store().clear()
    yield
    get_store().clear()
