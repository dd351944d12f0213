"""Load PreviewConfig from mdpreview.yaml / mdpreview.toml if present.

Config files are looked up next to the watched file. Merges file config
with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

from pathlib import Path

from mdpreview._errors import ConfigError
from mdpreview.config import PreviewConfig

_KNOWN_KEYS = frozenset({"host", "port", "poll_interval", "open_browser", "plugins"})


def load_config(file: str | Path, **overrides: object) -> PreviewConfig:
    """Load PreviewConfig for *file*, optionally merging a config file.

    Looks for mdpreview.yaml, mdpreview.yml, or mdpreview.toml in the
    watched file's directory. Overrides whose value is None are ignored so
    unset CLI options fall back to the file (or the defaults).

    Raises:
        ConfigError: A config file exists but cannot be parsed.

    """
    path = Path(file)
    file_config = _read_preview_config(path.resolve().parent)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    return PreviewConfig(file=path, **_coerce(merged))


def _read_preview_config(directory: Path) -> dict[str, object]:
    """Read config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("mdpreview.yaml", "mdpreview.yml"):
        path = directory / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = directory / "mdpreview.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    import yaml

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at top level"
        raise ConfigError(msg)
    return _flatten_preview_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_preview_section(data)


def _flatten_preview_section(data: dict[str, object]) -> dict[str, object]:
    """Extract mdpreview.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _KNOWN_KEYS:
            result[k] = v
    section = data.get("mdpreview")
    if isinstance(section, dict):
        for k, v in section.items():
            if k not in _KNOWN_KEYS:
                msg = f"Unknown mdpreview config key: {k!r}"
                raise ConfigError(msg)
            result[k] = v
    return result


def _coerce(values: dict[str, object]) -> dict[str, object]:
    """Normalize value types coming from config files."""
    result = dict(values)
    try:
        if "port" in result:
            result["port"] = int(result["port"])  # type: ignore[arg-type]
        if "poll_interval" in result:
            result["poll_interval"] = float(result["poll_interval"])  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"Invalid config value: {exc}"
        raise ConfigError(msg) from exc
    if "plugins" in result:
        plugins = result["plugins"]
        if isinstance(plugins, str):
            plugins = [plugins]
        if not isinstance(plugins, (list, tuple)):
            msg = f"plugins must be a list of names, got {plugins!r}"
            raise ConfigError(msg)
        result["plugins"] = tuple(str(p) for p in plugins)
    if "open_browser" in result and not isinstance(result["open_browser"], bool):
        msg = f"open_browser must be true or false, got {result['open_browser']!r}"
        raise ConfigError(msg)
    return result
