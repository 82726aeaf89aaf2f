import threading

import pytest

from backend.application.services.placement_service import (
    PlacementService,
    format_percentage,
)
from backend.core.constants import ModelState
from backend.core.exceptions import (
    DataNotFoundException,
    InvalidInputException,
    NotTrainedException,
)


@pytest.fixture
def service(test_settings):
    return PlacementService(test_settings)


def test_requires_data_before_use(service):
    assert not service.has_data
    with pytest.raises(DataNotFoundException):
        service.chart_data()
    with pytest.raises(DataNotFoundException):
        service.train()
    with pytest.raises(DataNotFoundException):
        service.predict_year(2023)


def test_load_csv_builds_history(service, placement_csv):
    history = service.load_csv(placement_csv)

    assert [(o.key, o.count) for o in history] == [(2019, 5), (2020, 8), (2021, 13), (2022, 6)]
    assert service.has_data


def test_load_csv_without_rows_rejected(service):
    with pytest.raises(InvalidInputException):
        service.load_csv(b"Name,Year\n")


def test_chart_data_without_highlight(service, placement_csv):
    service.load_csv(placement_csv)
    chart = service.chart_data()

    assert chart["bars"][2] == {"year": 2021, "count": 13}
    assert chart["highlight"] is None
    assert chart["max_value"] == 33
    assert chart["y_ticks"] == [0, 6, 13, 19, 26, 33]


def test_train_summary(service, placement_csv):
    service.load_csv(placement_csv)
    summary = service.train()

    assert summary["examples"] == 3
    assert summary["epochs"] == 1000
    assert summary["state"] == ModelState.TRAINED.value
    assert summary["final_loss"] >= 0.0


def test_predict_known_year_highlights_actual(service, placement_csv):
    service.load_csv(placement_csv)
    result = service.predict_year(2020)

    assert result.count == 8
    highlight = service.chart_data()["highlight"]
    assert highlight == {"year": 2020, "count": 8, "source": "actual", "label": None}


def test_predict_future_year_highlights_model(service, placement_csv):
    service.load_csv(placement_csv)
    service.train()
    result = service.predict_year(2023)

    chart = service.chart_data()
    assert chart["highlight"]["source"] == "model"
    assert chart["highlight"]["label"] == format_percentage(result.percentage)
    assert chart["max_value"] == max(13, result.count) + 20


def test_reload_discards_trained_network(service, placement_csv):
    service.load_csv(placement_csv)
    service.train()

    service.load_csv(placement_csv)

    assert service.predictor.state == ModelState.UNTRAINED
    with pytest.raises(NotTrainedException):
        service.predict_year(2023)


@pytest.mark.parametrize(
    "percentage, label",
    [(None, None), (12.345, "+12.3%"), (-100.0, "-100.0%"), (0.0, "+0.0%")],
)
def test_format_percentage(percentage, label):
    assert format_percentage(percentage) == label


def test_upload_chart_is_taken_with_the_new_history(service, placement_csv):
    service.load_csv(placement_csv)
    service.predict_year(2021)

    history, chart = service.load_csv_with_chart(b"Name,Year\nAna,2030\n")

    assert [o.key for o in history] == [2030]
    assert chart["bars"] == [{"year": 2030, "count": 1}]
    assert chart["highlight"] is None


def test_predict_returns_matching_chart(service, placement_csv):
    service.load_csv(placement_csv)

    result, chart = service.predict_year_with_chart(2020)

    assert chart["highlight"]["year"] == result.key == 2020


def test_chart_data_waits_for_lock(service, placement_csv):
    service.load_csv(placement_csv)
    done = threading.Event()

    with service._lock:
        reader = threading.Thread(target=lambda: (service.chart_data(), done.set()))
        reader.start()
        assert not done.wait(0.2)

    reader.join(timeout=5)
    assert done.is_set()
