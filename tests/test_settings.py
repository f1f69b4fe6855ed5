import pytest

from todo_api.settings import DEFAULT_DATABASE_URL, get_settings

ENV_NAMES = (
    "DATABASE_URL",
    "DB_POOL_SIZE",
    "DB_ECHO",
    "CORS_ALLOW_ORIGINS",
    "APP_ENV",
    "HOST",
    "PORT",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Unset the settings variables and run from an empty directory.

    setenv first so monkeypatch also removes anything a .env file adds later.
    """
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.database_url == DEFAULT_DATABASE_URL
        assert s.db_pool_size == 5
        assert s.db_echo is False
        assert s.cors_allow_origins == ["*"]
        assert s.app_env == "development"
        assert (s.host, s.port) == ("127.0.0.1", 8080)

    def test_env_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///todos.db")
        monkeypatch.setenv("DB_POOL_SIZE", "12")
        monkeypatch.setenv("DB_ECHO", "yes")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("PORT", "9000")
        s = get_settings()
        assert s.database_url == "sqlite:///todos.db"
        assert s.db_pool_size == 12
        assert s.db_echo is True
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert s.app_env == "production"
        assert s.port == 9000

    def test_unparseable_values_fall_back(self, clean_env, monkeypatch):
        monkeypatch.setenv("DB_POOL_SIZE", "many")
        monkeypatch.setenv("DB_ECHO", "maybe")
        monkeypatch.setenv("APP_ENV", "staging")
        s = get_settings()
        assert s.db_pool_size == 5
        assert s.db_echo is False
        assert s.app_env == "development"


class TestDotenv:
    def test_values_are_read_from_env_file(self, clean_env):
        (clean_env / ".env").write_text(
            "DATABASE_URL=sqlite:///from_dotenv.db\nPORT=9123\n", encoding="utf-8"
        )
        s = get_settings()
        assert s.database_url == "sqlite:///from_dotenv.db"
        assert s.port == 9123

    def test_real_environment_wins_over_env_file(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text("PORT=9123\n", encoding="utf-8")
        monkeypatch.setenv("PORT", "7000")
        assert get_settings().port == 7000

    def test_explicit_env_file_path(self, clean_env):
        (clean_env / "service.env").write_text("HOST=0.0.0.0\n", encoding="utf-8")
        assert get_settings(env_file="service.env").host == "0.0.0.0"

    def test_env_file_can_be_skipped(self, clean_env):
        (clean_env / ".env").write_text("PORT=9123\n", encoding="utf-8")
        assert get_settings(env_file=None).port == 8080
