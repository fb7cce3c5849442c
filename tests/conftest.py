# tests/conftest.py
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# ---------------------------------------------------------
# Ensure project root is on PYTHONPATH BEFORE app imports
# ---------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest


@pytest.fixture
def fixed_now():
    """Tuesday, 2025-06-10 09:00 (ISO weekday 2)."""
    return datetime(2025, 6, 10, 9, 0)


@pytest.fixture
def make_agent():
    """
    Build a stand-in for the LLM agent whose run() resolves to a result
    carrying `output`, the way pydantic-ai's AgentRunResult does.
    """

    def _make(output=None, side_effect=None):
        agent = MagicMock()
        if side_effect is not None:
            agent.run = AsyncMock(side_effect=side_effect)
        else:
            agent.run = AsyncMock(return_value=MagicMock(output=output))
        return agent

    return _make
