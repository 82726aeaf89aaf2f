import asyncio
import threading
import time

import pytest
from fastapi.testclient import TestClient

from backend.api.v1.dependencies import get_placement_service
from backend.api.v1.endpoints.predictions import forecast_year
from backend.application.services.placement_service import PlacementService
from backend.main import app


@pytest.fixture
def client(test_settings):
    service = PlacementService(test_settings)
    app.dependency_overrides[get_placement_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def upload(client, content):
    return client.post(
        "/api/v1/placements/upload",
        files={"file": ("placements.csv", content, "text/csv")},
    )


def test_health(client):
    assert client.get("/").json()["status"] == "operational"
    assert client.get("/api/v1/health").json()["status"] == "healthy"


def test_history_before_upload_is_404(client):
    assert client.get("/api/v1/placements").status_code == 404


def test_upload_and_fetch_history(client, placement_csv):
    response = upload(client, placement_csv)

    assert response.status_code == 200
    body = response.json()
    assert body["observations"][0] == {"key": 2019, "count": 5}
    assert len(body["chart_data"]["bars"]) == 4

    assert client.get("/api/v1/placements").json()["observations"] == body["observations"]


def test_upload_with_bad_year_is_400(client):
    response = upload(client, b"Name,Year\nAna,abc\n")
    assert response.status_code == 400


def test_train_and_forecast_future_year(client, placement_csv):
    upload(client, placement_csv)

    train = client.post("/api/v1/predictions/train")
    assert train.status_code == 200
    assert train.json()["state"] == "trained"

    response = client.get("/api/v1/predictions/2023")
    assert response.status_code == 200
    prediction = response.json()["prediction"]
    assert prediction["is_model_derived"] is True
    assert prediction["count"] >= 0
    assert -100 <= prediction["percentage"] <= 100
    assert response.json()["chart_data"]["highlight"]["year"] == 2023


def test_forecast_known_year_without_training(client, placement_csv):
    upload(client, placement_csv)

    response = client.get("/api/v1/predictions/2021")

    assert response.status_code == 200
    assert response.json()["prediction"] == {
        "key": 2021,
        "count": 13,
        "percentage": None,
        "is_model_derived": False,
    }
    assert response.json()["percentage_label"] is None


def test_forecast_future_year_before_training_is_409(client, placement_csv):
    upload(client, placement_csv)
    assert client.get("/api/v1/predictions/2023").status_code == 409


def test_forecast_past_year_is_422(client, placement_csv):
    upload(client, placement_csv)
    client.post("/api/v1/predictions/train")
    assert client.get("/api/v1/predictions/2010").status_code == 422


def test_forecast_non_numeric_year_is_400(client, placement_csv):
    upload(client, placement_csv)
    assert client.get("/api/v1/predictions/20x3").status_code == 400


def test_train_with_two_years_is_422(client):
    upload(client, b"Name,Year\nAna,2020\nLuis,2021\n")

    response = client.post("/api/v1/predictions/train")

    assert response.status_code == 422
    assert client.get("/api/v1/predictions/2022").status_code == 409


def test_forecast_waits_for_training_lock_off_the_event_loop(test_settings, placement_csv):
    service = PlacementService(test_settings)
    service.load_csv(placement_csv)
    locked = threading.Event()

    def hold_lock():
        with service._lock:
            locked.set()
            time.sleep(1.0)

    async def scenario():
        gaps = []

        async def heartbeat():
            last = time.monotonic()
            while True:
                await asyncio.sleep(0.05)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        beat = asyncio.create_task(heartbeat())
        holder = threading.Thread(target=hold_lock)
        holder.start()
        locked.wait()

        response = await forecast_year("2021", service)

        beat.cancel()
        holder.join()
        return response, max(gaps)

    response, max_gap = asyncio.run(scenario())

    assert response.prediction.count == 13
    assert max_gap < 0.3
