"""Pipeline settings resolved from arguments, YAML and environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from ..zk.exceptions import ConfigurationError
from ..zk.types import ProvingScheme
from .constants import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROVER_TIMEOUT,
    DEFAULT_WORK_DIR,
    DEFAULT_ZOKRATES_BIN,
)

ENV_ZOKRATES_BIN = "ZENEKA_ZOKRATES_BIN"
ENV_PROVER_TIMEOUT = "ZENEKA_PROVER_TIMEOUT"

_KNOWN_KEYS = frozenset(
    {"zokrates_bin", "schemes", "work_dir", "output_dir", "prover_timeout", "parallel"}
)


@dataclass(frozen=True)
class PipelineSettings:
    """
    Settings for one pipeline run.

    Attributes:
        zokrates_bin: ZoKrates executable name or path
        schemes: Proving schemes to produce artifacts for, in export order
        work_dir: Directory for the rendered circuit and prover outputs
        output_dir: Directory receiving the exported documents
        prover_timeout: Seconds allowed for each external prover step
        parallel: Run the per-scheme prover steps concurrently
    """

    zokrates_bin: str = DEFAULT_ZOKRATES_BIN
    schemes: Tuple[ProvingScheme, ...] = field(default_factory=lambda: tuple(ProvingScheme))
    work_dir: Path = Path(DEFAULT_WORK_DIR)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    prover_timeout: float = DEFAULT_PROVER_TIMEOUT
    parallel: bool = True

    def __post_init__(self) -> None:
        if not self.zokrates_bin:
            raise ConfigurationError("zokrates_bin cannot be empty")
        if not self.schemes:
            raise ConfigurationError("at least one proving scheme is required")
        if len(set(self.schemes)) != len(self.schemes):
            raise ConfigurationError("proving schemes must be unique")
        if self.prover_timeout <= 0:
            raise ConfigurationError("prover_timeout must be positive")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PipelineSettings":
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigurationError(
                f"Unknown settings: {', '.join(sorted(unknown))}"
            )
        kwargs: Dict[str, Any] = {}
        try:
            if "zokrates_bin" in data:
                kwargs["zokrates_bin"] = str(data["zokrates_bin"])
            if "schemes" in data:
                schemes = data["schemes"]
                if isinstance(schemes, str):
                    schemes = [schemes]
                kwargs["schemes"] = tuple(ProvingScheme.parse(s) for s in schemes)
            if "work_dir" in data:
                kwargs["work_dir"] = Path(data["work_dir"])
            if "output_dir" in data:
                kwargs["output_dir"] = Path(data["output_dir"])
            if "prover_timeout" in data:
                kwargs["prover_timeout"] = float(data["prover_timeout"])
            if "parallel" in data:
                if not isinstance(data["parallel"], bool):
                    raise ValueError("parallel must be a boolean")
                kwargs["parallel"] = data["parallel"]
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from exc
        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "PipelineSettings":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if environ.get(ENV_ZOKRATES_BIN):
        data["zokrates_bin"] = environ[ENV_ZOKRATES_BIN]
    if environ.get(ENV_PROVER_TIMEOUT):
        data["prover_timeout"] = environ[ENV_PROVER_TIMEOUT]
    return data


def load_settings(
    config_path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PipelineSettings:
    """
    Resolve settings: YAML file over environment over defaults.

    Raises:
        ConfigurationError: If the file is unreadable or holds invalid values
    """
    data = _from_env(os.environ if environ is None else environ)

    if config_path is not None:
        path = Path(config_path)
        try:
            with path.open("r", encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle)
        except OSError as exc:
            raise ConfigurationError(f"Unable to read config {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config {path} must be a mapping")
        data.update(loaded)

    return PipelineSettings.from_mapping(data)
