# conftest.py, package directory
#
# Ensures the repository root is on sys.path when pytest is invoked from
# either the root or this directory, so ``pyramid_path`` and the root-level
# ``runner`` module import without requiring a package install.
#
# Usage:
#   pytest pyramid_path/tests -v
#   pytest pyramid_path/tests/test_solver.py -v

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
