import pytest

from ccpolicy import reset_policies


@pytest.fixture(autouse=True)
def reset_shared_policies():
    reset_policies()
    yield
    reset_policies()
