"""Configuration loading, merging, and interactive creation."""

from __future__ import annotations

from dupescan.hasher import DEFAULT_CHUNK_SIZE

import logging
import os
import pathlib
import tomllib


logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"

_DEFAULTS: dict[str, object] = {
    "skip_hidden": False,
    "progress": True,
    "chunk_size": DEFAULT_CHUNK_SIZE,
    "format": "text",
    "exclude": [],
    "exclude_dir": [],
}

_BOOL_KEYS = {"skip_hidden", "progress"}
_LIST_KEYS = {"exclude", "exclude_dir"}
_VALID_FORMATS = {"text", "json"}


def _config_dir() -> pathlib.Path:
    """Return the dupescan config directory."""
    base = pathlib.Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
    d = base / "dupescan"
    d.mkdir(parents=True, exist_ok=True)
    return d


def load_config(config_dir: pathlib.Path | None = None) -> dict:
    """Load config.toml and return its contents as a dict.

    Returns {} if no file exists or on parse error.
    """
    if config_dir is None:
        config_dir = _config_dir()
    path = config_dir / CONFIG_FILENAME
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning(f"Ignoring unreadable config {path}: {exc}")
        return {}


def merge_config_into_args(args, config: dict) -> None:
    """Three-layer merge: CLI > config > hardcoded defaults.

    Mutates *args* in place.
    """
    for key in _BOOL_KEYS:
        cli_val = getattr(args, key, None)
        if cli_val is not None:
            continue
        cfg_val = config.get(key)
        if cfg_val is not None:
            setattr(args, key, bool(cfg_val))
        else:
            setattr(args, key, _DEFAULTS[key])

    # chunk_size — must be a positive int
    if getattr(args, "chunk_size", None) is None:
        cfg_val = config.get("chunk_size")
        if isinstance(cfg_val, int) and not isinstance(cfg_val, bool) and cfg_val > 0:
            args.chunk_size = cfg_val
        else:
            args.chunk_size = _DEFAULTS["chunk_size"]

    if getattr(args, "format", None) is None:
        cfg_val = config.get("format")
        if cfg_val in _VALID_FORMATS:
            args.format = cfg_val
        else:
            args.format = _DEFAULTS["format"]

    # List fields — merge CLI + config
    for key in _LIST_KEYS:
        cli_val = getattr(args, key, None) or []
        cfg_val = config.get(key) or []
        setattr(args, key, cli_val + [v for v in cfg_val if v not in cli_val])


def create_config_interactive(
    config_dir: pathlib.Path | None = None,
    input_fn=input,
    print_fn=print,
) -> pathlib.Path:
    """Interactively create or update config.toml.

    Returns the path to the written config file.
    """
    if config_dir is None:
        config_dir = _config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    existing = load_config(config_dir)

    settings: list[tuple[str, str, str]] = [
        ("skip_hidden", "Skip hidden files and directories (true/false)", str(_DEFAULTS["skip_hidden"]).lower()),
        ("progress", "Show progress bar (true/false)", str(_DEFAULTS["progress"]).lower()),
        ("chunk_size", "Read chunk size in bytes", str(_DEFAULTS["chunk_size"])),
        ("format", "Output format (text/json)", str(_DEFAULTS["format"])),
        ("exclude", "File patterns to exclude (comma-separated)", ""),
        ("exclude_dir", "Directory patterns to exclude (comma-separated)", ""),
    ]

    result: dict[str, object] = {}

    for key, label, hardcoded_default in settings:
        current = existing.get(key, hardcoded_default)
        if key in _LIST_KEYS and isinstance(current, list):
            current = ", ".join(current)
        elif isinstance(current, bool):
            current = str(current).lower()
        default = str(current)
        value = input_fn(f"  {label} [{default}]: ").strip()
        if not value:
            value = default
        if key in _BOOL_KEYS:
            result[key] = value.lower() in ("true", "1", "yes")
        elif key in _LIST_KEYS:
            result[key] = [v.strip() for v in value.split(",") if v.strip()]
        elif key == "chunk_size":
            try:
                result[key] = int(value)
            except ValueError:
                print_fn(f"  Invalid chunk size {value!r}, using {DEFAULT_CHUNK_SIZE}")
                result[key] = DEFAULT_CHUNK_SIZE
        else:
            result[key] = value

    # Drop values equal to the defaults to keep config clean
    for key in list(result):
        if result[key] == _DEFAULTS[key]:
            del result[key]

    path = config_dir / CONFIG_FILENAME
    path.write_text(_to_toml(result))
    print_fn(f"Configuration saved to {path}")
    return path


def _toml_string(value: str) -> str:
    """Quote *value* as a TOML basic string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _to_toml(data: dict) -> str:
    """Serialize a flat dict to TOML format."""
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, bool):
            lines.append(f"{key} = {str(value).lower()}")
        elif isinstance(value, list):
            items = ", ".join(_toml_string(str(v)) for v in value)
            lines.append(f"{key} = [{items}]")
        elif isinstance(value, str):
            lines.append(f"{key} = {_toml_string(value)}")
        elif value is None:
            continue
        else:
            lines.append(f"{key} = {value}")
    return "\n".join(lines) + "\n" if lines else ""
