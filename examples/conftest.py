"""Fixtures for the example route tables.

Each example directory holds an ``app.py`` that builds a ``Router`` and
freezes it at import time.  Freezing means a module-level router cannot
be extended or shared between tests, so ``example_router`` executes the
file again for every test and hands back the new router.
"""

import importlib.util
from pathlib import Path

import pytest


@pytest.fixture
def example_router(request: pytest.FixtureRequest):
    """The frozen ``router`` built by the app.py beside the requesting test."""
    app_path = Path(request.path).parent / "app.py"
    spec = importlib.util.spec_from_file_location(f"example_{app_path.parent.name}", app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.router
