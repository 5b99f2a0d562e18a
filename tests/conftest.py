# ruff: noqa: INP001
"""Pytest configuration shared across tests."""

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are built at import time; pin a valid local-auth setup regardless of shell env.
os.environ["AUTH_MODE"] = "local"
os.environ["LOCAL_AUTH_TOKEN"] = "test-local-token-0123456789-0123456789-0123456789x"
os.environ["DEFAULT_TIMEZONE"] = "UTC"
os.environ["DB_AUTO_MIGRATE"] = "false"
