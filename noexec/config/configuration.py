# Copyright 2026 Cisco Systems, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Detector configuration model.

A configuration is built by deep-merging a (possibly partial) override onto
the packaged defaults, validating the result, and freezing it into
read-only mappings so it can be shared across detector calls::

    config = Configuration.from_override({
        "detectors": {"credential-leak": {"minEntropy": 4.0}},
    })
    config.detector("credential-leak")["customPatterns"]  # [] from defaults
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from ..core.models import Severity
from ..data import DATA_DIR
from .validator import validate_config

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = DATA_DIR / "default_config.yaml"

_ENABLED: Mapping[str, Any] = MappingProxyType({"enabled": True})


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*.

    Nested mappings merge key by key. Lists and scalars in the override
    replace the base value wholesale, so a list can be narrowed without
    repeating every entry. ``None`` values in the override are skipped.
    Neither argument is mutated.
    """
    result = {key: _thaw(value) for key, value in base.items()}
    for key, val in override.items():
        if val is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(val, Mapping):
            result[key] = deep_merge(result[key], val)
        else:
            result[key] = _thaw(val)
    return result


@lru_cache(maxsize=4)
def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    logger.debug("Loaded default configuration from %s", path)
    return data


def load_default_config() -> dict[str, Any]:
    """Return a fresh, mutable copy of the packaged default configuration."""
    return copy.deepcopy(_load_yaml(_DEFAULT_CONFIG_PATH))


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(val) for key, val in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class Configuration:
    """Validated, read-only detector configuration."""

    detectors: Mapping[str, Mapping[str, Any]]
    global_settings: Mapping[str, Any]
    sections: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    @classmethod
    def default(cls) -> Configuration:
        """The packaged defaults."""
        return cls.from_dict(load_default_config())

    @classmethod
    def from_override(cls, override: Mapping[str, Any] | None = None) -> Configuration:
        """Merge *override* onto the defaults, validate, then freeze.

        Raises:
            ConfigValidationError: when the merged configuration is invalid
        """
        merged = deep_merge(load_default_config(), override or {})
        return cls.from_dict(merged)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Configuration:
        """Validate a complete configuration mapping and freeze it."""
        validate_config(data)
        sections = {key: val for key, val in data.items() if key not in ("detectors", "globalSettings")}
        return cls(
            detectors=_freeze(data["detectors"]),
            global_settings=_freeze(data["globalSettings"]),
            sections=_freeze(sections),
        )

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def detector(self, detector_id: str) -> Mapping[str, Any]:
        """Configuration of one detector; ``{"enabled": True}`` when absent."""
        return self.detectors.get(detector_id, _ENABLED)

    def is_enabled(self, detector_id: str) -> bool:
        return bool(self.detector(detector_id).get("enabled", True))

    @property
    def min_severity(self) -> Severity:
        return Severity.parse(self.global_settings["minSeverity"])

    @property
    def exit_on_detection(self) -> bool:
        return bool(self.global_settings["exitOnDetection"])

    @property
    def json_output(self) -> bool:
        return bool(self.global_settings["jsonOutput"])

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-ready copy of the configuration."""
        data = _thaw(self.sections)
        data["detectors"] = _thaw(self.detectors)
        data["globalSettings"] = _thaw(self.global_settings)
        return data
