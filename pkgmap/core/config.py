"""Settings for the resolver.

pkg-map runs inside image build hooks where the target distro and
release are exported as environment variables. An optional TOML file
can provide the same values for hosts that run the tool by hand:

    [pkg-map]
    distro = "ubuntu"
    release = "noble"
    map_dir = "/usr/share/pkg-map"

Precedence, highest first: command line, environment, settings file,
built-in defaults. Command-line values are applied by the CLI layer
with :meth:`Settings.override`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Settings",
    "ConfigError",
    "load_settings",
    "load_settings_file",
    "DEFAULT_MAP_DIR",
    "DEFAULT_CONFIG_PATH",
    "ENV_DISTRO",
    "ENV_RELEASE",
    "ENV_MAP_DIR",
    "ENV_CONFIG",
]

DEFAULT_MAP_DIR = Path("/usr/share/pkg-map")
DEFAULT_CONFIG_PATH = Path("/etc/pkg-map/config.toml")

ENV_DISTRO = "DISTRO_NAME"
ENV_RELEASE = "DIB_RELEASE"
ENV_MAP_DIR = "PKG_MAP_DIR"
ENV_CONFIG = "PKG_MAP_CONFIG"

_TABLE = "pkg-map"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the settings file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved process-wide defaults."""

    distro: str | None = None
    release: str | None = None
    map_dir: Path = DEFAULT_MAP_DIR

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Settings:
        """Create Settings from a parsed settings file."""
        table: StrDict = get_table(data, _TABLE) or {}
        map_dir = get_str(table, "map_dir")
        return cls(
            distro=get_str(table, "distro"),
            release=get_str(table, "release"),
            map_dir=Path(map_dir).expanduser() if map_dir else DEFAULT_MAP_DIR,
        )

    def with_env(self, env: Mapping[str, str]) -> Settings:
        """Overlay environment variables; empty variables count as unset."""
        map_dir = get_str(env, ENV_MAP_DIR)
        return Settings(
            distro=get_str(env, ENV_DISTRO) or self.distro,
            release=get_str(env, ENV_RELEASE) or self.release,
            map_dir=Path(map_dir).expanduser() if map_dir else self.map_dir,
        )

    def override(
        self,
        *,
        distro: str | None = None,
        release: str | None = None,
        map_dir: Path | None = None,
    ) -> Settings:
        """Apply explicit values (command line); None keeps the current one."""
        return replace(
            self,
            distro=distro or self.distro,
            release=release or self.release,
            map_dir=map_dir or self.map_dir,
        )


def load_settings_file(path: Path) -> Result[Settings, ConfigError]:
    """Load settings from a TOML file.

    Returns:
        Ok(Settings) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(Settings.from_dict(result.value))


def load_settings(env: Mapping[str, str] | None = None) -> Result[Settings, ConfigError]:
    """Build settings from the settings file and the environment.

    The default settings file is optional. A file named explicitly
    through ``PKG_MAP_CONFIG`` must exist.
    """
    if env is None:
        env = os.environ

    explicit = get_str(env, ENV_CONFIG)
    path = Path(explicit).expanduser() if explicit else DEFAULT_CONFIG_PATH

    if explicit or path.is_file():
        loaded = load_settings_file(path)
        if isinstance(loaded, Err):
            return loaded
        base = loaded.value
    else:
        base = Settings()

    return Ok(base.with_env(env))


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Settings root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Settings file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax in {path}: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading {path}: {e}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading {path}: {e}", path=path))
