"""
The test runner script must stay importable.
"""
import importlib.util
from pathlib import Path

RUNNER = Path(__file__).resolve().parent.parent / "run_tests.py"


def test_runner_loads():
    spec = importlib.util.spec_from_file_location("run_tests", RUNNER)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    assert callable(module.run_tests)
