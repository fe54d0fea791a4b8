from pathlib import Path

from pydantic_settings import BaseSettings

# Find local.env from project root (parent of api/)
_env_file = Path(__file__).resolve().parent.parent.parent / "local.env"


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_key: str = ""

    # Bookmarks table + realtime feed
    bookmarks_table: str = "bookmarks"
    realtime_channel: str = "bookmarks_changes"

    # Where the dashboard sends signed-out users
    login_path: str = "/login"

    log_level: str = "INFO"
    environment: str = "development"

    model_config = {"env_file": str(_env_file), "extra": "ignore"}


settings = Settings()
