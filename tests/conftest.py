from __future__ import annotations

import itertools
from collections.abc import Callable
from pathlib import Path

import pytest

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def counting_key_factory() -> Callable[[str], str]:
    """Deterministic synthetic keys: ``name_0``, ``name_1``, ..."""
    counter = itertools.count()
    return lambda name: f"{name}_{next(counter)}"
