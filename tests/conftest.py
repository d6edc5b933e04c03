import pytest

from partest import bootstrap


@pytest.fixture(scope="session", autouse=True)
def setup_partest_plugins() -> None:
    """Load plugins named in PARTEST_PLUGINS once for the entire test session."""

    bootstrap()
