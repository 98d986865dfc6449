import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_QUESTION_FILE = Path(__file__).parent / "data" / "questions.json"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _database_url() -> str:
    url = os.getenv("RIVALRY_DATABASE_URL")
    if url:
        return url
    host = os.getenv("DB_HOST")
    if host:
        user = os.getenv("DB_USER")
        password = os.getenv("DB_PASSWORD")
        port = os.getenv("DB_PORT", "5432")
        db_name = os.getenv("DB_NAME")
        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"
    sqlite_path = Path.cwd() / "rivalry.sqlite3"
    return f"sqlite+aiosqlite:///{sqlite_path}"


@dataclass(frozen=True)
class Settings:
    database_url: str
    question_file: Path = DEFAULT_QUESTION_FILE
    total_time_seconds: int = 300
    deadline_hour: int = 20
    sabotage_penalty: int = 120
    max_name_length: int = 32
    time_grace_seconds: int = 120
    retention_days: int = 30
    store_backend: str = "sql"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    def __post_init__(self):
        if self.total_time_seconds <= 0:
            raise ValueError("RIVALRY_TOTAL_TIME_SECONDS must be positive")
        if not 0 <= self.deadline_hour <= 23:
            raise ValueError("RIVALRY_DEADLINE_HOUR must be between 0 and 23")
        if self.store_backend not in ("sql", "memory"):
            raise ValueError("RIVALRY_STORE must be 'sql' or 'memory'")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment (and .env, if present)."""
        return cls(
            database_url=_database_url(),
            question_file=Path(os.getenv("RIVALRY_QUESTION_FILE", str(DEFAULT_QUESTION_FILE))),
            total_time_seconds=_env_int("RIVALRY_TOTAL_TIME_SECONDS", 300),
            deadline_hour=_env_int("RIVALRY_DEADLINE_HOUR", 20),
            sabotage_penalty=_env_int("RIVALRY_SABOTAGE_PENALTY", 120),
            max_name_length=_env_int("RIVALRY_MAX_NAME_LENGTH", 32),
            time_grace_seconds=_env_int("RIVALRY_TIME_GRACE_SECONDS", 120),
            retention_days=_env_int("RIVALRY_RETENTION_DAYS", 30),
            store_backend=os.getenv("RIVALRY_STORE", "sql"),
            host=os.getenv("RIVALRY_HOST", "0.0.0.0"),
            port=_env_int("RIVALRY_PORT", 3000),
            log_level=os.getenv("RIVALRY_LOG_LEVEL", "INFO").upper(),
        )


if __name__ == "__main__":
    print(Settings.from_env())
