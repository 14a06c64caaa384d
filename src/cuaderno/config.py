"""Notebook configuration.

Loaded from ~/.cuaderno/config.json when present, with environment variables
taking priority. A .env file in the working directory (or a parent) is
loaded into the environment by the entry point.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".cuaderno"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.json"
DEFAULT_STORAGE_KEY = "crush_book_v1"


@dataclass
class NotebookConfig:
    """Configuration for the notebook.

    Attributes:
        data_dir: Directory holding the local document and logs.
        storage_key: Fixed key (file stem) of the local document.
        remote_url: Base URL of the remote mirror, without trailing slash.
            Empty disables the mirror.
        remote_path: Path of the document under remote_url.
        remote_timeout: Seconds before a remote request is abandoned.
        password: Shared secret for the gate. Empty disables the gate.
        log_dir: Directory for the activity log (data_dir/logs if None).
        log_level: Level for diagnostic logging.
    """

    data_dir: Path = DEFAULT_DATA_DIR
    storage_key: str = DEFAULT_STORAGE_KEY
    remote_url: str = ""
    remote_path: str = "data.json"
    remote_timeout: float = 10.0
    password: str = ""
    log_dir: Path | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir).expanduser()
        self.remote_url = (self.remote_url or "").strip().rstrip("/")
        if self.log_dir is None:
            self.log_dir = self.data_dir / "logs"
        if self.remote_timeout <= 0:
            raise ValueError("remote_timeout must be positive")

    @property
    def store_path(self) -> Path:
        return self.data_dir / f"{self.storage_key}.json"

    @property
    def remote_enabled(self) -> bool:
        return bool(self.remote_url)


def load_config(config_path: Path | None = None) -> NotebookConfig:
    """Load NotebookConfig from a JSON file and the environment.

    The config file should have this structure:
    ```json
    {
      "notebook": {"data_dir": "~/.cuaderno", "storage_key": "crush_book_v1"},
      "remote": {"url": "https://example-rtdb.firebaseio.com", "timeout": 10},
      "gate": {"password": "..."},
      "log_level": "INFO"
    }
    ```

    Priority: environment variables > config file > defaults.

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        NotebookConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    data: dict[str, Any] = {}

    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                data = loaded
            else:
                logger.warning("Config in %s is not an object. Using defaults.", path)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", path, e)
    else:
        logger.debug("No config file at %s, using defaults", path)

    return _parse_config(data)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def _parse_config(data: dict[str, Any]) -> NotebookConfig:
    notebook = _section(data, "notebook")
    remote = _section(data, "remote")
    gate = _section(data, "gate")

    timeout_raw = os.getenv("CUADERNO_REMOTE_TIMEOUT", remote.get("timeout", 10.0))
    try:
        timeout = float(timeout_raw)
    except (TypeError, ValueError):
        logger.warning("Invalid remote timeout %r, using 10s", timeout_raw)
        timeout = 10.0
    if timeout <= 0:
        timeout = 10.0

    data_dir = Path(
        os.getenv("CUADERNO_DATA_DIR", notebook.get("data_dir", str(DEFAULT_DATA_DIR)))
    )
    log_dir = notebook.get("log_dir")

    return NotebookConfig(
        data_dir=data_dir,
        storage_key=os.getenv(
            "CUADERNO_STORAGE_KEY", notebook.get("storage_key", DEFAULT_STORAGE_KEY)
        ),
        remote_url=os.getenv("CUADERNO_REMOTE_URL", remote.get("url", "")),
        remote_path=remote.get("path", "data.json"),
        remote_timeout=timeout,
        password=os.getenv("CUADERNO_PASSWORD", gate.get("password", "")),
        log_dir=Path(log_dir).expanduser() if log_dir else None,
        log_level=os.getenv("CUADERNO_LOG_LEVEL", data.get("log_level", "WARNING")),
    )
