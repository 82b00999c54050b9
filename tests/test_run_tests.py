"""Tests for the utils/run_tests.py runner script."""

import importlib.util
import unittest
from pathlib import Path

from tests.test_utils import TestCaseWithFullStackTrace

RUNNER_PATH = Path(__file__).resolve().parents[1] / "utils" / "run_tests.py"


def load_runner():
    spec = importlib.util.spec_from_file_location("run_tests", RUNNER_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestRunTests(TestCaseWithFullStackTrace):
    """Test cases for the command-line test runner."""

    def test_runner_sits_next_to_the_package(self):
        self.assertTrue(RUNNER_PATH.is_file())
        runner = load_runner()
        self.assertTrue((runner.PROJECT_ROOT / "trilattice" / "__init__.py").is_file())
        self.assertTrue((runner.PROJECT_ROOT / "tests" / "__init__.py").is_file())


if __name__ == '__main__':
    unittest.main()
