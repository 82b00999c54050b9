"""
Test package for the trilattice module.

This package contains tests for all components of the trilattice module,
organized into subdirectories that mirror the structure of the main package.

Subdirectories:
- core/access: Tests for the boundary access strategies
- core/interpolation: Tests for the scalar and batched interpolators

To run all tests:
    python -m unittest discover tests

To run tests in a specific directory:
    python -m unittest discover tests/core
"""

import sys
from pathlib import Path

# Add the project root to the path for proper imports
# This allows tests to be run from any directory
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.append(project_root)
