"""Persistent photognome settings.

Settings live in ``$XDG_CONFIG_HOME/photognome/config.toml`` (default
``~/.config/photognome/config.toml``) and are read with tomli and written with
tomli-w. The undo ledger sits next to the config file.

Every setting can be overridden from the environment (``PHOTOGNOME_`` prefix,
dots become underscores) or from the command line; see ``resolve_setting``.

Example config::

    [rename]
    template = "{year}{month}{day}_{orig_name}"
    exclusions = ["-NR", "-DxO_DeepPRIME 3"]
    dedupe_same_maker = true
    max_filename_len = 240

    [apply]
    backup_originals = false
"""

import contextlib
import os
from pathlib import Path
from typing import Any, TypeVar, cast

import tomli
import tomli_w

ENV_PREFIX = "PHOTOGNOME_"
LEDGER_FILENAME = "undo-last.json"

T = TypeVar("T")

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def get_config_dir() -> Path:
    """Return the config directory, respecting ``XDG_CONFIG_HOME``."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "photognome"


def get_config_file() -> Path:
    """Return the path of ``config.toml``."""
    return get_config_dir() / "config.toml"


def get_ledger_path() -> Path:
    """Return the path of the persisted undo ledger."""
    return get_config_dir() / LEDGER_FILENAME


def get_photognome_home() -> Path:
    """Return the data directory holding saved plans (``~/.photognome``).

    ``PHOTOGNOME_HOME`` overrides the location.
    """
    override = os.environ.get(f"{ENV_PREFIX}HOME")
    if override:
        return Path(override)
    return Path.home() / ".photognome"


def load_config() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""
    config_file = get_config_file()
    if not config_file.exists():
        return {}
    with config_file.open("rb") as f:
        return tomli.load(f)


def save_config(data: dict[str, Any]) -> Path:
    """Write *data* to the TOML config file, creating the folder if needed."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with config_file.open("wb") as f:
        tomli_w.dump(data, f)
    return config_file


def set_setting(key: str, value: Any) -> Path:  # noqa: ANN401
    """Persist a single dotted *key* (e.g. ``"rename.template"``)."""
    data = load_config()
    parts = key.split(".")
    section = data
    for part in parts[:-1]:
        section = section.setdefault(part, {})
    section[parts[-1]] = value
    return save_config(data)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve a nested value from *data* given a dotted key path.

    Example: dotted_key="rename.template" will attempt
    ``data["rename"]["template"]`` returning None if any level is missing.
    """
    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _make_env_var_name(dotted_key: str, prefix: str = ENV_PREFIX) -> str:
    """Convert a dotted key path to an uppercase ENV var name.

    Example: "rename.max_filename_len" -> "PHOTOGNOME_RENAME_MAX_FILENAME_LEN".
    """
    return prefix + dotted_key.replace(".", "_").upper()


def _coerce(value: Any, default: T) -> T:  # noqa: ANN401
    """Coerce an env/config *value* to the type of *default* when possible."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            return cast(T, value.strip().lower() in _TRUTHY)
        return default
    if isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return cast(T, int(value))
        return default
    if isinstance(default, list):
        if isinstance(value, list):
            return cast(T, [str(v) for v in value])
        if isinstance(value, str):
            # Env lists are comma separated.
            return cast(T, [part for part in value.split(",") if part])
        return default
    if isinstance(default, str):
        return cast(T, str(value))
    return cast(T, value)


def parse_setting(raw: str, default: T) -> T:
    """Parse a value typed on the command line for a key defaulting to *default*.

    Unlike env and config coercion, malformed booleans and integers are errors
    here rather than silently falling back to the default.

    Raises:
        ValueError: If *raw* is not valid for the type of *default*.
    """
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUTHY:
            return cast(T, True)
        if lowered in _FALSY:
            return cast(T, False)
        raise ValueError(f"expected true or false, got {raw!r}")
    if isinstance(default, int):
        return cast(T, int(raw))
    return _coerce(raw, default)


def resolve_setting(
    key: str,
    *,
    default: T,
    cli_value: T | None = None,
) -> T:
    """Resolve a configuration *key* using precedence CLI > env > config > default.

    Args:
        key: Dotted key path, e.g. ``"rename.template"``.
        default: Value to fall back to when no overrides found; its type drives
            coercion of env and config values.
        cli_value: Value passed from a CLI option (``None`` when not provided).

    Returns:
        The resolved value with type matching *default* (or *cli_value*).
    """
    # 1. CLI value wins if provided (and not ``None`` to mimic Typer semantics).
    if cli_value is not None:
        return cli_value

    # 2. Environment variable
    env_var = _make_env_var_name(key)
    if env_var in os.environ:
        return _coerce(os.environ[env_var], default)

    # 3. Config file lookup
    file_val = _lookup_nested(load_config(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    # 4. Default
    return default
