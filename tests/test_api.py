import os

import pytest
from fastapi.testclient import TestClient

from dictserver.app import create_app
from dictserver.engine import build_engine

from .conftest import WORDS, write_shards


@pytest.fixture
def sharded_client(dict_path, shards_root):
    app = create_app(dict_path=dict_path, shards_root=shards_root,
                     manifest_path=os.path.join(shards_root, "_meta.json"))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def streaming_client(dict_path, empty_shards_root):
    app = create_app(dict_path=dict_path, shards_root=empty_shards_root,
                     manifest_path=os.path.join(empty_shards_root, "_meta.json"))
    with TestClient(app) as client:
        yield client


@pytest.fixture(params=["sharded", "streaming"])
def client(request, sharded_client, streaming_client):
    return sharded_client if request.param == "sharded" else streaming_client


def test_health_reports_mode(sharded_client, streaming_client):
    j = sharded_client.get("/health").json()
    assert j["ok"] is True
    assert j["mode"] == "sharded"
    assert j["shards_loaded"] == 0

    sharded_client.get("/word/cat")
    j = sharded_client.get("/health").json()
    assert j["shards_loaded"] == 1
    assert j["cache_size"] == 1

    j = streaming_client.get("/health").json()
    assert j["mode"] == "streaming"
    assert j["shards_loaded"] == 0


def test_word_returns_entry_verbatim(client):
    r = client.get("/word/cat")
    assert r.status_code == 200
    assert r.json() == WORDS["cat"]

    r = client.get("/word/élan")
    assert r.status_code == 200
    assert r.json() == WORDS["élan"]


def test_word_null_entry(client):
    r = client.get("/word/nothing")
    assert r.status_code == 200
    assert r.json() is None


def test_word_missing_is_404(client):
    r = client.get("/word/zzz_not_present")
    assert r.status_code == 404
    assert r.json() == {"detail": "Word not found"}


def test_search(client):
    r = client.get("/search", params={"q": "ca", "limit": 2})
    assert r.status_code == 200
    assert r.json() == {"matches": ["cat", "car"], "truncated": True}

    r = client.get("/search", params={"q": "ca", "limit": 10})
    assert r.json() == {"matches": ["cat", "car", "cactus", "café"], "truncated": False}


def test_search_default_limit(client):
    r = client.get("/search", params={"q": "c"})
    assert r.status_code == 200
    assert r.json()["truncated"] is False


def test_search_requires_query(client):
    assert client.get("/search").status_code == 400
    assert client.get("/search", params={"q": ""}).status_code == 400


def test_search_rejects_non_positive_limit(client):
    assert client.get("/search", params={"q": "ca", "limit": 0}).status_code == 422


def test_manifest_passthrough(sharded_client, streaming_client):
    r = sharded_client.get("/manifest")
    assert r.status_code == 200
    assert r.json()["keys"] == len(WORDS)

    assert streaming_client.get("/manifest").status_code == 404


def test_missing_shard_file_is_404(dict_path, tmp_path):
    root = write_shards(tmp_path / "partial", skip=("b",))
    engine = build_engine(dict_path, root, os.path.join(root, "_meta.json"))
    with TestClient(create_app(engine=engine)) as client:
        assert client.get("/word/bat").status_code == 404
        assert client.get("/search", params={"q": "ba"}).json() == {"matches": [], "truncated": False}


def test_corrupt_source_is_500_not_404(tmp_path, empty_shards_root):
    p = tmp_path / "broken.json"
    p.write_text('{"alpha": 1, "beta": ', encoding="utf-8")
    engine = build_engine(str(p), empty_shards_root, os.path.join(empty_shards_root, "_meta.json"))
    with TestClient(create_app(engine=engine)) as client:
        assert client.get("/word/alpha").json() == 1

        r = client.get("/word/gamma")
        assert r.status_code == 500
        body = r.json()
        assert body["error"] == "Server error"
        assert str(p) in body["detail"]

        r = client.get("/search", params={"q": "g"})
        assert r.status_code == 500


def test_non_object_source_is_500_not_404(tmp_path, empty_shards_root):
    p = tmp_path / "list.json"
    p.write_text('[{"cat": 1}]', encoding="utf-8")
    engine = build_engine(str(p), empty_shards_root, os.path.join(empty_shards_root, "_meta.json"))
    with TestClient(create_app(engine=engine)) as client:
        r = client.get("/word/cat")
        assert r.status_code == 500
        assert "expected a JSON object" in r.json()["detail"]
        assert client.get("/search", params={"q": "c"}).status_code == 500


def test_missing_source_is_500(tmp_path, empty_shards_root):
    engine = build_engine(str(tmp_path / "absent.json"), empty_shards_root,
                          os.path.join(empty_shards_root, "_meta.json"))
    with TestClient(create_app(engine=engine)) as client:
        r = client.get("/word/anything")
        assert r.status_code == 500
        assert "absent.json" in r.json()["detail"]


def test_cors_headers(sharded_client):
    r = sharded_client.get("/health", headers={"Origin": "http://example.com"})
    assert r.headers.get("access-control-allow-origin") == "*"
