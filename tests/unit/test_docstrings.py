"""Run the usage examples embedded in module docstrings."""

import doctest
import importlib
import pkgutil

import pytest

import feedhealth

MODULES = sorted(
    info.name for info in pkgutil.walk_packages(feedhealth.__path__, prefix="feedhealth.")
)


@pytest.mark.parametrize("module_name", ["feedhealth", *MODULES])
def test_docstring_examples(module_name, monkeypatch):
    """Every docstring example runs and matches its shown output."""
    for name in ("DEFAULT_SLOW_THRESHOLD", "MAX_FAILURES", "FAILURE_CUTOFF", "STORE_BACKEND"):
        monkeypatch.delenv(f"FEEDHEALTH_{name}", raising=False)
    module = importlib.import_module(module_name)

    result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)

    assert result.failed == 0
