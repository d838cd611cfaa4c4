import pytest

from crowdfund.core import config


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ("DATABASE_URL", "JWT_SECRET", "TOKEN_EXPIRE_MINUTES", "UPLOAD_DIR", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_missing_database_url_exits(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s")

    with pytest.raises(SystemExit) as exc:
        config.load_settings()

    assert exc.value.code == 1


def test_missing_secret_exits(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")

    with pytest.raises(SystemExit):
        config.load_settings()


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://crowd:pw@db:5432/crowdfund")
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("TOKEN_EXPIRE_MINUTES", "60")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = config.load_settings()

    assert settings.database_url == "postgresql://crowd:pw@db:5432/crowdfund"
    assert settings.jwt_secret == "s3cret"
    assert settings.token_expire_minutes == 60
    assert settings.cors_origins == ["http://a.example", "http://b.example"]
    assert settings.log_level == "DEBUG"
    assert settings.upload_dir == "uploads"


def test_defaults(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("JWT_SECRET", "s")

    settings = config.load_settings()

    assert settings.token_expire_minutes is None
    assert settings.jwt_algorithm == "HS256"
    assert "http://localhost:5173" in settings.cors_origins
