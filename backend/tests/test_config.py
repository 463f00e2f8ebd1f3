from app.core.config import Settings, merge_unique, parse_csv


def test_parse_csv_and_merge_unique():
    assert parse_csv(" https://a.example , ,https://b.example") == ["https://a.example", "https://b.example"]
    assert parse_csv(None) == []
    assert merge_unique(["x", "y", "x"]) == ["x", "y"]


def test_cors_origins_include_web_origin(monkeypatch):
    monkeypatch.setenv("ENV", "dev")
    monkeypatch.setenv("WEB_ORIGIN", "http://localhost:3000/")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173")

    s = Settings()
    assert s.WEB_ORIGIN == "http://localhost:3000"
    assert s.CORS_ORIGINS[0] == "http://localhost:5173"
    assert "http://localhost:3000" in s.CORS_ORIGINS
    assert len(s.CORS_ORIGINS) == len(set(s.CORS_ORIGINS))