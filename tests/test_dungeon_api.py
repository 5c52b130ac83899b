from delve.routes.dungeon_api import coerce_seed, get_cached_dungeon


def test_map_shape(client):
    r = client.get("/api/dungeon/map?seed=42")
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 42
    assert data["boss"] is False
    assert (data["width"], data["height"]) == (100, 100)
    assert len(data["grid"]) == 100 and len(data["grid"][0]) == 100
    assert data["start_room"] == [2, 2, 25, 25]
    assert data["boss_room"] == [0, 0, 0, 0]
    # grid is indexed [y][x]; start center is open floor
    assert data["grid"][14][14] == 0
    assert data["grid"][0][0] == 1
    for x, y, w, h in data["rooms"]:
        assert data["grid"][y + h // 2][x + w // 2] == 0


def test_map_is_stable_for_seed(client):
    g1 = client.get("/api/dungeon/map?seed=777").get_json()["grid"]
    g2 = client.get("/api/dungeon/map?seed=777").get_json()["grid"]
    assert g1 == g2


def test_boss_map(client):
    data = client.get("/api/dungeon/map?seed=42&boss=1").get_json()
    assert data["boss"] is True
    assert data["boss_room"] == [36, 36, 28, 28]
    assert data["grid"][50][50] == 0


def test_string_seed_is_hashed(client):
    data = client.get("/api/dungeon/rooms?seed=dragon-lair").get_json()
    assert data["seed"] == coerce_seed("dragon-lair")
    assert data["seed"] == client.get("/api/dungeon/rooms?seed=dragon-lair").get_json()["seed"]


def test_rooms_endpoint_matches_engine(client):
    data = client.get("/api/dungeon/rooms?seed=5").get_json()
    d = get_cached_dungeon(5, False)
    assert data["rooms"] == [r.to_list() for r in d.get_rooms()]
    assert data["start_room"] == [2, 2, 25, 25]
    expected_exit = d.get_exit_location()
    assert data["exit"] == (list(expected_exit) if expected_exit else None)


def test_seed_remembered_in_session(client):
    first = client.get("/api/dungeon/rooms").get_json()
    with client.session_transaction() as sess:
        assert sess["dungeon_seed"] == first["seed"]
    again = client.get("/api/dungeon/rooms").get_json()
    assert again["seed"] == first["seed"]


def test_floor_query(client):
    r = client.get("/api/dungeon/floor?seed=8&x=14&y=14")
    assert r.status_code == 200
    assert r.get_json() == {"x": 14, "y": 14, "floor": True}
    outside = client.get("/api/dungeon/floor?seed=8&x=-5&y=500").get_json()
    assert outside["floor"] is False
    assert client.get("/api/dungeon/floor?seed=8&x=0&y=0").get_json()["floor"] is False


def test_floor_query_bad_coordinates(client):
    r = client.get("/api/dungeon/floor?x=abc&y=1")
    assert r.status_code == 400
    assert "error" in r.get_json()
    assert client.get("/api/dungeon/floor?x=1").status_code == 400


def test_regenerate_stores_seed_and_returns_metrics(client):
    r = client.post("/api/dungeon/regenerate", json={"seed": 99, "boss": True})
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 99 and data["boss"] is True
    assert data["metrics"]["boss_connections"] in (1, 4)
    assert "rooms_discarded" in data["metrics"]
    with client.session_transaction() as sess:
        assert sess["dungeon_seed"] == 99
    assert client.get("/api/dungeon/rooms").get_json()["seed"] == 99


def test_regenerate_without_body_picks_seed(client):
    r = client.post("/api/dungeon/regenerate")
    assert r.status_code == 200
    data = r.get_json()
    assert isinstance(data["seed"], int)
    assert data["boss"] is False


def test_generation_metrics_endpoint(client):
    data = client.get("/api/dungeon/gen/metrics?seed=17").get_json()
    assert data["seed"] == 17
    assert data["metrics"]["rooms_carved"] >= 1
    assert "phase_ms" in data["metrics"]


def test_coerce_seed_rules():
    assert coerce_seed(123) == 123
    assert coerce_seed("456") == 456
    assert coerce_seed("abc") == coerce_seed("abc")
    assert coerce_seed("abc") != coerce_seed("abd")
    assert isinstance(coerce_seed(None), int)
    assert isinstance(coerce_seed("   "), int)


def test_cache_is_bounded(test_app, monkeypatch):
    from delve.routes import dungeon_api

    monkeypatch.setitem(test_app.config, "DUNGEON_CACHE_MAX", 2)
    for seed in (1, 2, 3):
        get_cached_dungeon(seed, False)
    assert len(dungeon_api._dungeon_cache) == 2
    assert get_cached_dungeon(3, False) is get_cached_dungeon(3, False)


def test_truthy_flag_parsing():
    from delve.routes.dungeon_api import truthy

    assert truthy(True) is True and truthy(False) is False
    for raw in ("1", "true", "YES", " on "):
        assert truthy(raw) is True
    for raw in ("0", "false", "no", "", None, "maybe"):
        assert truthy(raw) is False
