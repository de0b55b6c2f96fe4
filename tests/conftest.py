import pytest

from Brian.core import DiagnosticsRecorder
from fakes import fake_tools


@pytest.fixture
def recorder():
    """Fresh diagnostics recorder for one simulated request"""
    return DiagnosticsRecorder()


@pytest.fixture
def tools():
    """Healthy fake adapters for all four capabilities"""
    return fake_tools()
