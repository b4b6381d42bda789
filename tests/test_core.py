import pytest

from newsmood.core.cache import SQLiteCache, make_cache_key
from newsmood.core.config import get_api_key, load_config
from newsmood.core.retry import with_retries


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("output_dir: out\nnews:\n  query: climate\n  from: 2024-05-01\n", encoding="utf-8")

    config = load_config(path)

    assert config["output_dir"] == "out"
    assert config["news"]["query"] == "climate"
    assert str(config["news"]["from"]) == "2024-05-01"


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize("content", ["", "just a string\n"])
def test_load_config_empty_or_invalid(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_get_api_key(monkeypatch):
    monkeypatch.setenv("NEWS_API_KEY", "  abc123 ")
    assert get_api_key() == "abc123"

    monkeypatch.setenv("NEWS_API_KEY", "")
    with pytest.raises(ValueError):
        get_api_key()


def test_cache_round_trip_and_key_stability(tmp_path):
    cache = SQLiteCache(str(tmp_path / "nested" / "cache.db"))
    key = make_cache_key("everything", {"q": "x", "page": 1, "sources": None})

    assert key == make_cache_key("everything", {"page": 1, "q": "x"})
    assert key != make_cache_key("top-headlines", {"page": 1, "q": "x"})
    assert cache.get(key) is None

    cache.set(key, {"status": "ok", "articles": []})

    assert cache.get(key) == {"status": "ok", "articles": []}


def test_with_retries_retries_listed_exceptions_only(no_sleep):
    attempts = []

    @with_retries(max_retries=2, initial_delay=1, exceptions=(ConnectionError,))
    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionError("down")
        return "ok"

    assert flaky() == "ok"
    assert no_sleep == [1, 2]

    @with_retries(max_retries=2, initial_delay=1, exceptions=(ConnectionError,))
    def broken():
        raise KeyError("nope")

    with pytest.raises(KeyError):
        broken()


def test_with_retries_reraises_after_last_attempt(no_sleep):
    @with_retries(max_retries=1, initial_delay=1)
    def always_fails():
        raise RuntimeError("still down")

    with pytest.raises(RuntimeError):
        always_fails()
    assert no_sleep == [1]
