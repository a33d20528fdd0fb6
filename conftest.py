"""
pytest configuration

- modules live at the project root, make them importable from any cwd
- non-interactive matplotlib backend, set before pyplot is first imported
"""

import os
import sys

ROOT = os.path.abspath(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

os.environ.setdefault("MPLBACKEND", "Agg")
