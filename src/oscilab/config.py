# src/oscilab/config.py
"""
TOML configuration for session defaults.

Lookup order for `load_config()`:
  1. explicit path argument
  2. $OSCILAB_CONFIG
  3. built-in defaults (no file)

Schema::

    [display]
    color = "#aabbcc"
    line_width = 2.0

    [oscillator]            # and/or [averaged]
    method = "rk4"
    eps = 0.05
    alpha = 1.0
    beta = 0.9
    dt = 0.001
    int_time = 10.0
    step_count = 500        # optional, overrides int_time
    ic = [1.0, 0.0, 0.0]
"""
from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import warnings

import tomllib

from oscilab.errors import ConfigError, InvalidMethodError, InvalidParameterError
from oscilab.runtime.params import Parameters
from oscilab.runtime.session import DEFAULT_COLOR, DEFAULT_LINE_WIDTH, TrajectorySession
from oscilab.runtime.types import Method, Variant
from oscilab.systems import get_system

__all__ = ["ENV_VAR", "SystemDefaults", "Config", "load_config", "parse_config"]

ENV_VAR = "OSCILAB_CONFIG"

_PARAM_KEYS = ("eps", "alpha", "beta", "dt", "int_time", "step_count")
_SYSTEM_KEYS = frozenset(_PARAM_KEYS + ("method", "ic"))
_DISPLAY_KEYS = frozenset(("color", "line_width"))


@dataclass(frozen=True)
class SystemDefaults:
    params: Parameters = field(default_factory=Parameters)
    method: Method = Method.EULER
    ic: Optional[tuple[float, ...]] = None


@dataclass(frozen=True)
class Config:
    color: str = DEFAULT_COLOR
    line_width: float = DEFAULT_LINE_WIDTH
    systems: Dict[Variant, SystemDefaults] = field(default_factory=dict)
    source: Optional[Path] = None

    def defaults_for(self, variant: Variant) -> SystemDefaults:
        return self.systems.get(variant, SystemDefaults())

    def make_session(self, variant: Variant | str, *, jit: bool = False) -> TrajectorySession:
        """Build a TrajectorySession seeded with this configuration."""
        variant = Variant.parse(variant)
        d = self.defaults_for(variant)
        return TrajectorySession(
            variant,
            params=d.params,
            method=d.method,
            initial_state=d.ic,
            color=self.color,
            line_width=self.line_width,
            jit=jit,
        )


def load_config(path: str | os.PathLike | None = None) -> Config:
    """Load configuration from `path`, $OSCILAB_CONFIG, or built-in defaults."""
    if path is None:
        env = os.environ.get(ENV_VAR)
        if not env:
            return Config()
        path = env
    p = Path(path).expanduser()
    if not p.is_file():
        raise ConfigError(f"Config file not found: {p}")
    try:
        with open(p, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config {p}: {e}") from e
    return parse_config(data, source=p)


def parse_config(data: Mapping[str, Any], *, source: Optional[Path] = None) -> Config:
    where = f" in {source}" if source is not None else ""
    known_tables = {"display"} | {v.value for v in Variant}
    unknown = set(data) - known_tables
    if unknown:
        warnings.warn(
            f"Ignoring unknown config tables{where}: {sorted(unknown)}",
            UserWarning,
            stacklevel=3,
        )

    display = _table(data, "display", where)
    _warn_unknown(display, _DISPLAY_KEYS, "display", where)
    color = display.get("color", DEFAULT_COLOR)
    if not isinstance(color, str):
        raise ConfigError(f"[display].color must be a string{where}")
    line_width = display.get("line_width", DEFAULT_LINE_WIDTH)
    if isinstance(line_width, bool) or not isinstance(line_width, (int, float)) or line_width <= 0:
        raise ConfigError(f"[display].line_width must be a positive number{where}")

    systems: Dict[Variant, SystemDefaults] = {}
    for variant in Variant:
        table = _table(data, variant.value, where)
        if table:
            systems[variant] = _system_defaults(variant, table, where)

    return Config(color=color, line_width=float(line_width), systems=systems, source=source)


def _table(data: Mapping[str, Any], name: str, where: str) -> Mapping[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, Mapping):
        raise ConfigError(f"[{name}] must be a table{where}")
    return table


def _warn_unknown(table: Mapping[str, Any], known: frozenset, name: str, where: str) -> None:
    unknown = set(table) - known
    if unknown:
        warnings.warn(
            f"Ignoring unknown keys in [{name}]{where}: {sorted(unknown)}",
            UserWarning,
            stacklevel=4,
        )


def _system_defaults(variant: Variant, table: Mapping[str, Any], where: str) -> SystemDefaults:
    _warn_unknown(table, _SYSTEM_KEYS, variant.value, where)
    try:
        params = Parameters(**{k: table[k] for k in _PARAM_KEYS if k in table})
    except InvalidParameterError as e:
        raise ConfigError(f"[{variant.value}] {e}{where}") from e

    try:
        method = Method.parse(table.get("method", Method.EULER))
    except InvalidMethodError as e:
        raise ConfigError(f"[{variant.value}] {e}{where}") from e

    ic = table.get("ic")
    if ic is not None:
        n_state = get_system(variant).n_state
        if (
            not isinstance(ic, list)
            or len(ic) != n_state
            or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in ic)
        ):
            raise ConfigError(f"[{variant.value}].ic must be a list of {n_state} numbers{where}")
        ic = tuple(float(v) for v in ic)

    return SystemDefaults(params=params, method=method, ic=ic)
