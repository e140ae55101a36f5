from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
import json
import logging
import os

from autologin.constants import (
    BROWSER_USER_AGENT,
    DEFAULT_CONFIG_FILE,
    FETCH_TIMEOUT,
    SUBMIT_TIMEOUT,
    MAX_REDIRECTS,
)

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)


def config_file_path() -> str:
    """Path of the JSON configuration file (``AUTOLOGIN_CONFIG`` or ``config.json``)."""
    return os.getenv("AUTOLOGIN_CONFIG", DEFAULT_CONFIG_FILE)


@dataclass
class Config:
    """Runtime configuration for the login service."""
    host: str = "127.0.0.1"
    port: int = 3000
    environment: str = "production"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    public_dir: Optional[str] = "public"
    user_agent: str = BROWSER_USER_AGENT
    fetch_timeout: float = FETCH_TIMEOUT
    submit_timeout: float = SUBMIT_TIMEOUT
    max_redirects: int = MAX_REDIRECTS

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config: Configuration instance with values from environment
        """
        return cls(
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "3000")),
            environment=os.getenv("ENVIRONMENT", "production"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE"),
            public_dir=os.getenv("PUBLIC_DIR", "public"),
            user_agent=os.getenv("USER_AGENT", BROWSER_USER_AGENT),
            fetch_timeout=float(os.getenv("FETCH_TIMEOUT", str(FETCH_TIMEOUT))),
            submit_timeout=float(os.getenv("SUBMIT_TIMEOUT", str(SUBMIT_TIMEOUT))),
            max_redirects=int(os.getenv("MAX_REDIRECTS", str(MAX_REDIRECTS))),
        )

    @classmethod
    def from_file(cls, path: str, base: Optional["Config"] = None) -> "Config":
        """Load configuration from a JSON file.

        Keys in the file override ``base`` (environment values by default).
        A missing file leaves the base configuration untouched.

        Args:
            path: Path to JSON configuration file
            base: Configuration to start from

        Returns:
            Config with values from file
        """
        config = base or cls.from_env()
        file_path = Path(path)

        if not file_path.exists():
            logger.info("No config file found. Using defaults.")
            return config

        with open(file_path, 'r') as f:
            data = json.load(f)

        for field_name in config.__dataclass_fields__:
            if field_name in data:
                setattr(config, field_name, data[field_name])

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }
