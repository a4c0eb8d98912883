from __future__ import annotations

from typing import List

import pytest

from trends.models import RegionsSnapshot
from tests.helpers import snapshot


@pytest.fixture
def three_day_snapshots() -> List[RegionsSnapshot]:
    return [
        snapshot(0, {"lj": {"a": 1, "kraj": 3}, "mb": {"b": 5}}),
        snapshot(1, {"lj": {"a": 1}, "mb": {"b": 5, "tujina": 2}}),
        snapshot(2, {"lj": {"a": 2}, "mb": {"b": 5}}),
    ]
