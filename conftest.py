"""
Root conftest.py for pytest.

Sets up the Python path so ``import enrol_arlo`` works without installing.
"""
import os
import sys
from pathlib import Path

current_dir = Path(__file__).parent

if str(current_dir) not in sys.path:
    sys.path.insert(0, str(current_dir))

# Keep tests off the development database file
os.environ.setdefault("ARLO_DATABASE_URL", "sqlite:///:memory:")
