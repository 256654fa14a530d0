def insert(client, value):
    return client.post("/api/insert", json={"value": value})


def test_status_starts_empty(client):
    r = client.get("/api/status")
    assert r.status_code == 200
    data = r.get_json()
    assert data["ok"] is True
    assert data["data"]["nodes"] == 0
    assert data["data"]["step_index"] == -1


def test_insert_returns_steps_and_final_tree(client):
    insert(client, 30)
    insert(client, 20)
    r = insert(client, 10)
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["finalTree"]["value"] == 20
    kinds = [step["actionType"] for step in data["steps"]]
    assert kinds[0] == "insert"
    assert kinds.count("rotate") == 2
    rotate = next(step for step in data["steps"] if step["actionType"] == "rotate")
    assert rotate["comparisonTree"]["value"] == 30
    assert rotate["baseTree"]["value"] == 30
    assert data["status"]["history"] == ["Insert 30", "Insert 20", "Insert 10"]


def test_insert_accepts_numeric_strings(client):
    r = insert(client, "15")
    assert r.status_code == 200
    assert r.get_json()["data"]["finalTree"]["value"] == 15


def test_insert_rejects_bad_values(client):
    for bad in ("abc", None, 2.5, True):
        r = insert(client, bad)
        assert r.status_code == 400
        assert r.get_json()["ok"] is False
    assert client.get("/api/status").get_json()["data"]["history"] == []


def test_delete_and_undo(client):
    for v in (20, 10, 30):
        insert(client, v)
    r = client.post("/api/delete", json={"value": 10})
    assert r.status_code == 200
    assert r.get_json()["data"]["finalTree"]["left"] is None

    r = client.post("/api/undo")
    assert r.status_code == 200
    assert r.get_json()["data"]["undone"] == "Delete 10"
    assert client.get("/api/status").get_json()["data"]["nodes"] == 3


def test_delete_absent_value_is_single_frame(client):
    insert(client, 1)
    r = client.post("/api/delete", json={"value": 99})
    steps = r.get_json()["data"]["steps"]
    assert len(steps) == 1
    assert steps[0]["actionType"] == "info"


def test_undo_without_history_conflicts(client):
    r = client.post("/api/undo")
    assert r.status_code == 409
    assert r.get_json()["error"] == "nothing to undo"


def test_step_tick_and_frame(client):
    insert(client, 1)
    r = client.post("/api/step", json={"delta": 1})
    assert r.get_json()["data"]["step_index"] == 1

    r = client.post("/api/step", json={"index": 0})
    assert r.get_json()["data"]["step"]["description"] == "Starting insertion of 1."

    r = client.post("/api/tick")
    data = r.get_json()["data"]
    assert data["moved"] is True
    assert data["step_index"] == 1

    r = client.get("/api/frame?offset=1")
    assert r.get_json()["data"]["comparison"]["label"] == "Insert 1"


def test_step_rejects_out_of_range_index(client):
    insert(client, 1)
    r = client.post("/api/step", json={"index": 50})
    assert r.status_code == 400


def test_frame_rejects_negative_offset(client):
    r = client.get("/api/frame?offset=-2")
    assert r.status_code == 400


def test_play_and_speed(client):
    r = client.post("/api/play")
    assert r.get_json()["data"]["playing"] is True
    r = client.post("/api/speed", json={"ms": 1})
    assert r.get_json()["data"]["speed_ms"] == 100
    r = client.post("/api/speed", json={"ms": "fast"})
    assert r.status_code == 400


def test_steps_listing(client):
    insert(client, 2)
    insert(client, 1)
    data = client.get("/api/steps").get_json()["data"]
    assert data["count"] == len(data["steps"])
    assert data["steps"][0]["description"] == "Starting insertion of 2."


def test_layout_endpoint(client):
    tree = {
        "id": "a", "value": 2, "height": 2, "balanceFactor": 0,
        "left": {"id": "b", "value": 1},
        "right": {"id": "c", "value": 3},
    }
    r = client.post("/api/layout", json={"tree": tree})
    assert r.status_code == 200
    laid = r.get_json()["data"]["tree"]
    assert laid["x"] == 50.0
    assert laid["left"]["x"] == 25.0
    assert laid["right"]["x"] == 75.0
    assert laid["left"]["id"] == "b"
    assert laid["left"]["y"] > laid["y"]


def test_layout_endpoint_rejects_malformed_tree(client):
    r = client.post("/api/layout", json={"tree": {"id": "a"}})
    assert r.status_code == 400
    r = client.post("/api/layout", json={"tree": {"value": "x"}})
    assert r.status_code == 400
    r = client.post("/api/layout", json={})
    assert r.status_code == 400


def test_reset(client):
    insert(client, 1)
    r = client.post("/api/reset")
    assert r.get_json()["data"]["nodes"] == 0


def test_home_page(client):
    r = client.get("/")
    assert r.status_code == 200
    assert b"AVL Trace" in r.data
