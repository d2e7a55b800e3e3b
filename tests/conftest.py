import pytest

from jsontools.config import set_config


@pytest.fixture(autouse=True)
def reset_config():
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def example_doc():
    return {"a": {"b": {"c": "123!ABC"}}}
