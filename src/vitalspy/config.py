"""Monitor configuration and loading from TOML files.

Configuration lives either in a standalone TOML file or in the
``[tool.vitalspy]`` table of ``pyproject.toml``::

    [tool.vitalspy]
    label = "shop-frontend"
    inp_alert_ms = 250

    [tool.vitalspy.thresholds]
    LCP = { good = 2500, needsImprovement = 4000 }

    [tool.vitalspy.weights]
    LCP = 0.5
    CLS = 0.5

    [tool.vitalspy.long_tasks]
    triage_ms = 50
    minor_ms = 125
    moderate_ms = 200
"""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vitalspy.core.errors import ConfigurationError
from vitalspy.core.scoring import ScoringTable
from vitalspy.core.session import DEFAULT_LABEL, SessionOptions
from vitalspy.core.triage import LongTaskTriage

_PROJECT_FILENAME = "pyproject.toml"
_TOOL_SECTION = "vitalspy"


@dataclass(frozen=True)
class MonitorConfig:
    """Complete configuration of a performance monitor.

    Attributes:
        scoring: Threshold and weight table.
        options: Session tunables.
    """

    scoring: ScoringTable = field(default_factory=ScoringTable.default)
    options: SessionOptions = field(default_factory=SessionOptions)


def _number(section: Mapping[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{key}: expected a number, got {value!r}")
    return float(value)


def _integer(section: Mapping[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{key}: expected an integer, got {value!r}")
    return value


def config_from_mapping(payload: Mapping[str, Any]) -> MonitorConfig:
    """Build a MonitorConfig from a parsed configuration table.

    Missing keys fall back to the defaults.

    Raises:
        ConfigurationError: On malformed or invalid values.
    """
    defaults = SessionOptions()

    long_tasks = payload.get("long_tasks", {})
    if not isinstance(long_tasks, Mapping):
        raise ConfigurationError("long_tasks must be a table")
    triage_defaults = LongTaskTriage()
    triage = LongTaskTriage(
        triage_ms=_number(long_tasks, "triage_ms", triage_defaults.triage_ms),
        minor_ms=_number(long_tasks, "minor_ms", triage_defaults.minor_ms),
        moderate_ms=_number(long_tasks, "moderate_ms", triage_defaults.moderate_ms),
    )

    label = payload.get("label", DEFAULT_LABEL)
    if not isinstance(label, str):
        raise ConfigurationError(f"label: expected a string, got {label!r}")

    options = SessionOptions(
        label=label,
        long_tasks=triage,
        inp_alert_ms=_number(payload, "inp_alert_ms", defaults.inp_alert_ms),
        fid_alert_ms=_number(payload, "fid_alert_ms", defaults.fid_alert_ms),
        attribution_limit=_integer(
            payload, "attribution_limit", defaults.attribution_limit
        ),
        cls_source_limit=_integer(payload, "cls_source_limit", defaults.cls_source_limit),
    )
    return MonitorConfig(scoring=ScoringTable.from_mapping(payload), options=options)


def _load_toml_mapping(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid TOML ({exc})") from exc


def load_config(path: str | Path) -> MonitorConfig:
    """Load configuration from a TOML file or a project directory.

    A directory is resolved to its ``pyproject.toml``. For ``pyproject.toml``
    files the ``[tool.vitalspy]`` table is used (defaults when absent); any
    other file is read as a standalone configuration table.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file or its values are invalid.
    """
    candidate = Path(path).expanduser()
    if candidate.is_dir():
        candidate = candidate / _PROJECT_FILENAME

    payload = _load_toml_mapping(candidate)
    if candidate.name == _PROJECT_FILENAME:
        tool_section = payload.get("tool", {})
        section = tool_section.get(_TOOL_SECTION, {}) if isinstance(tool_section, Mapping) else {}
        if not isinstance(section, Mapping):
            raise ConfigurationError(f"{candidate}: [tool.{_TOOL_SECTION}] must be a table")
        payload = dict(section)

    return config_from_mapping(payload)


__all__ = [
    "MonitorConfig",
    "config_from_mapping",
    "load_config",
]
