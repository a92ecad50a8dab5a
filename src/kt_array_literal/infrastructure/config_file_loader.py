"""Load [tool.kt-array-literal] from pyproject.toml. Infrastructure I/O only."""

import logging
import tomllib
from pathlib import Path

from kt_array_literal.domain.constants import CONFIG_SECTION

logger = logging.getLogger(__name__)


class ConfigFileLoader:
    """Loads config from the nearest pyproject.toml."""

    @staticmethod
    def load_config_from_fs(start: Path | None = None) -> dict[str, object]:
        """Walk up from start (default CWD) and return the [tool.kt-array-literal] table, or {}."""
        current_path = (start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if not config_file.exists():
                continue
            try:
                with config_file.open("rb") as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logger.warning("Ignoring unreadable %s: %s", config_file, exc)
                continue
            section = data.get("tool", {}).get(CONFIG_SECTION)
            if isinstance(section, dict):
                logger.debug("Loaded configuration from %s", config_file)
                return dict(section)
        return {}
