import pytest

from backend.core.config import Settings
from backend.domain.models.observation import Observation


@pytest.fixture
def test_settings():
    return Settings(random_seed=42, debug_mode=False)


@pytest.fixture
def history():
    return [
        Observation(key=2019, count=5),
        Observation(key=2020, count=8),
        Observation(key=2021, count=13),
        Observation(key=2022, count=6),
    ]


@pytest.fixture
def placement_csv():
    rows = ["Name,Year"]
    for year, count in [(2019, 5), (2020, 8), (2021, 13), (2022, 6)]:
        rows += [f"Student{year}_{i},{year}" for i in range(count)]
    return ("\n".join(rows) + "\n").encode()
