import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient

import main


@pytest.fixture
def client():
    main.sessions.clear()
    with TestClient(main.app) as test_client:
        yield test_client
    main.sessions.clear()


def _create(client, **config):
    config.setdefault("particle_count", 10)
    config.setdefault("seed", 5)
    response = client.post("/api/swarms", json={"config": config, "max_iter": 20})
    assert response.status_code == 200, response.text
    return response.json()


def test_create_swarm(client):
    body = _create(client)

    assert body["iteration"] == 0
    assert body["max_iter"] == 20
    assert body["stopped"] is False
    assert body["snapshot"]["status"] == "running"
    assert len(body["snapshot"]["particles"]) == 10
    assert body["session_id"] in main.sessions


def test_create_swarm_invalid_config(client):
    response = client.post("/api/swarms", json={"config": {"particle_count": 0}})

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidConfiguration"


def test_create_swarm_empty_landmarks(client):
    response = client.post("/api/swarms", json={"config": {"objective": "landmarks"}})

    assert response.status_code == 400
    assert response.json()["error"] == "EmptyLandmarkSet"


def test_step_and_get(client):
    session_id = _create(client)["session_id"]

    response = client.post(f"/api/swarms/{session_id}/step", params={"ticks": 5})
    assert response.status_code == 200
    assert response.json()["iteration"] == 5

    # capped by max_iter
    response = client.post(f"/api/swarms/{session_id}/step", params={"ticks": 50})
    assert response.json()["iteration"] == 20

    body = client.get(f"/api/swarms/{session_id}").json()
    assert body["iteration"] == 20
    runner = main.sessions[session_id]
    assert body["snapshot"]["global_best"]["score"] == runner.swarm.global_best_score


def test_step_rejects_zero_ticks(client):
    session_id = _create(client)["session_id"]
    response = client.post(f"/api/swarms/{session_id}/step", params={"ticks": 0})
    assert response.status_code == 400


def test_stop_and_reset(client):
    session_id = _create(client)["session_id"]
    client.post(f"/api/swarms/{session_id}/step", params={"ticks": 3})

    body = client.post(f"/api/swarms/{session_id}/stop").json()
    assert body["stopped"] is True
    body = client.post(f"/api/swarms/{session_id}/step").json()
    assert body["iteration"] == 3

    body = client.post(f"/api/swarms/{session_id}/reset").json()
    assert body["iteration"] == 0
    assert body["stopped"] is False


def test_unknown_session(client):
    assert client.get("/api/swarms/missing").status_code == 404
    assert client.post("/api/swarms/missing/step").status_code == 404


def test_delete_swarm(client):
    session_id = _create(client)["session_id"]

    assert client.delete(f"/api/swarms/{session_id}").status_code == 204
    assert session_id not in main.sessions
    assert client.delete(f"/api/swarms/{session_id}").status_code == 404


def test_update_landmarks(client):
    session_id = _create(
        client,
        objective="landmarks",
        landmarks=[{"x": 10, "y": 10}],
        max_position=50,
    )["session_id"]

    response = client.put(f"/api/swarms/{session_id}/landmarks", json=[{"x": -20, "y": 0, "name": "b"}])
    assert response.status_code == 200

    objective = main.sessions[session_id].swarm.objective
    assert objective.landmarks.tolist() == [[-20.0, 0.0]]

    response = client.put(f"/api/swarms/{session_id}/landmarks", json=[])
    assert response.status_code == 400
    assert response.json()["error"] == "EmptyLandmarkSet"


def test_update_landmarks_on_rastrigin_swarm(client):
    session_id = _create(client)["session_id"]
    response = client.put(f"/api/swarms/{session_id}/landmarks", json=[{"x": 0, "y": 0}])
    assert response.status_code == 400


def test_upload_csv_landmarks(client):
    content = b"x,y,name\n300,300,depot\n-10,5,\n"
    response = client.post(
        "/api/landmarks/upload",
        files={"file": ("landmarks.csv", content, "text/csv")},
    )

    assert response.status_code == 200
    assert response.json() == [
        {"x": 300.0, "y": 300.0, "name": "depot"},
        {"x": -10.0, "y": 5.0, "name": None},
    ]


def test_upload_excel_landmarks(client):
    buffer = io.BytesIO()
    pd.DataFrame({"x": [1.5], "y": [2.5]}).to_excel(buffer, index=False)

    response = client.post(
        "/api/landmarks/upload",
        files={"file": ("landmarks.xlsx", buffer.getvalue(), "application/octet-stream")},
    )

    assert response.status_code == 200
    assert response.json() == [{"x": 1.5, "y": 2.5, "name": None}]


def test_upload_rejects_other_files(client):
    response = client.post(
        "/api/landmarks/upload",
        files={"file": ("landmarks.txt", b"x y", "text/plain")},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidLandmarkFile"


def test_optimize_endpoint(client):
    response = client.post(
        "/api/optimize",
        json={"config": {"particle_count": 15, "seed": 1}, "iterations": 40},
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["history"]) == 40
    assert len(body["particles"]) == 15
    assert body["convergence_summary"]["iterations"] == 40
    assert body["global_best"]["score"] == body["history"][-1]


def test_optimize_rejects_negative_iterations(client):
    response = client.post("/api/optimize", json={"iterations": -1})
    assert response.status_code == 400
