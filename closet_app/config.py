"""Configuration helpers for the Closet Curator app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_RECOMMENDATION_LIMIT = 5


@dataclass
class AppConfig:
    """Configuration values for the Closet Curator app.

    Collaborator settings (weather, storage) live here so the composition root
    can build every service explicitly instead of reaching for globals.
    """

    environment: str | None = None
    default_location: Optional[str] = None
    weather_api_key: Optional[str] = None
    wardrobe_db_path: Optional[str] = None
    preference_store_backend: str = "json"
    preference_store_path: Optional[str] = None
    recommendation_limit: int = DEFAULT_RECOMMENDATION_LIMIT

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment file.

        Environment specific files live in ``config/environments/<env>.yaml`` by
        default and are merged with environment variables so that secrets can be
        injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        file_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            file_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, file_config.get(key, default))

        raw_limit = get_value("recommendation_limit")
        try:
            limit = int(raw_limit) if raw_limit else DEFAULT_RECOMMENDATION_LIMIT
        except ValueError as exc:
            raise ValueError(f"recommendation_limit must be an integer, got {raw_limit!r}") from exc

        return cls(
            environment=env_name,
            default_location=get_value("default_location"),
            weather_api_key=get_value("openweather_api_key"),
            wardrobe_db_path=get_value("wardrobe_db_path"),
            preference_store_backend=str(get_value("preference_store_backend", "json") or "json"),
            preference_store_path=get_value("preference_store_path"),
            recommendation_limit=limit,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` config file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
