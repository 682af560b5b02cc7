"""
Description:
    YAML configuration for headless runs.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence, Tuple

import yaml

from .chain import resolve_algorithm
from .datatypes import Algorithm, GMMComponent, Point, SimulationParams
from .target import DEFAULT_GMM
from .validation import validate_components, validate_params


@dataclass
class RunConfig:
    """Which sampler to run, for how long, and from where."""

    algorithm: Algorithm = Algorithm.MH
    seed: int = 0
    samples: int = 100
    start: Point = Point(0.0, 0.0)


@dataclass
class LoggingConfig:
    """Logging verbosity and formatting options."""

    level: str = "INFO"
    rich_tracebacks: bool = True


@dataclass
class AppConfig:
    """Top-level configuration object composed of sub-configurations."""

    run: RunConfig = field(default_factory=RunConfig)
    sampler: SimulationParams = SimulationParams(step_size=0.5, num_steps=10)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    components: Tuple[GMMComponent, ...] = DEFAULT_GMM


def _coerce_component(index: int, raw: Mapping[str, Any]) -> GMMComponent:
    sigma = raw["sigma"]
    return GMMComponent(
        id=int(raw.get("id", index + 1)),
        mu=(float(raw["mu"][0]), float(raw["mu"][1])),
        sigma=(
            (float(sigma[0][0]), float(sigma[0][1])),
            (float(sigma[1][0]), float(sigma[1][1])),
        ),
        weight=float(raw.get("weight", 1.0)),
    )


def _coerce_components(raw: Sequence[Mapping[str, Any]]) -> Tuple[GMMComponent, ...]:
    return tuple(_coerce_component(i, item) for i, item in enumerate(raw))


def load_yaml(path: Path) -> Mapping[str, Any]:
    """Load a YAML document and return a mapping."""

    with Path(path).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def config_from_mapping(raw: Mapping[str, Any]) -> AppConfig:
    """Build and validate an :class:`AppConfig` from a parsed document."""

    run = raw.get("run", {}) or {}
    sampler = raw.get("sampler", {}) or {}
    logging_cfg = raw.get("logging", {}) or {}
    start = run.get("start", [0.0, 0.0])

    components = raw.get("components")
    app_config = AppConfig(
        run=RunConfig(
            algorithm=resolve_algorithm(run.get("algorithm", "mh")),
            seed=int(run.get("seed", 0)),
            samples=int(run.get("samples", 100)),
            start=Point(float(start[0]), float(start[1])),
        ),
        sampler=SimulationParams(
            step_size=float(sampler.get("step_size", 0.5)),
            num_steps=int(sampler.get("num_steps", 10)),
            friction=sampler.get("friction"),
        ),
        logging=LoggingConfig(
            level=str(logging_cfg.get("level", "INFO")),
            rich_tracebacks=bool(logging_cfg.get("rich_tracebacks", True)),
        ),
        components=DEFAULT_GMM if components is None else _coerce_components(components),
    )
    if app_config.run.samples < 0:
        raise ValueError(f"run.samples must be >= 0, got {app_config.run.samples}")
    validate_params(app_config.sampler)
    validate_components(app_config.components)
    return app_config


def load_app_config(path: Path) -> AppConfig:
    """Load :class:`AppConfig` from ``path``."""

    return config_from_mapping(load_yaml(path))


__all__ = [
    "RunConfig",
    "LoggingConfig",
    "AppConfig",
    "load_yaml",
    "config_from_mapping",
    "load_app_config",
]
