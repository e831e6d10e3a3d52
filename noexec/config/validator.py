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
Fail-fast validation of a configuration mapping.

The first problem found raises :class:`ConfigValidationError` carrying the
dotted path of the offending field. Top-level sections other than
``detectors`` and ``globalSettings`` are left alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.exceptions import ConfigValidationError
from .constants import NoExecConstants

STRING_LIST = "string_list"
BOOLEAN = "boolean"
NON_NEGATIVE_NUMBER = "non_negative_number"

# Detector-specific fields; every listed field is required.
DETECTOR_FIELDS: dict[str, dict[str, str]] = {
    "credential-leak": {
        "customPatterns": STRING_LIST,
        "minEntropy": NON_NEGATIVE_NUMBER,
        "ignorePlaceholders": BOOLEAN,
    },
    "destructive-commands": {
        "safePaths": STRING_LIST,
        "additionalPatterns": STRING_LIST,
    },
    "git-force-operations": {
        "protectedBranches": STRING_LIST,
        "allowForceWithLease": BOOLEAN,
    },
    "env-var-leak": {
        "sensitiveVars": STRING_LIST,
    },
    "binary-download-execute": {
        "trustedDomains": STRING_LIST,
    },
    "network-exfiltration": {
        "trustedDomains": STRING_LIST,
    },
    "container-escape": {
        "allowPrivilegedForCI": BOOLEAN,
    },
}

_SEVERITY_CHOICES = ", ".join(NoExecConstants.SEVERITIES)


def _is_severity(value: Any) -> bool:
    return isinstance(value, str) and value in NoExecConstants.SEVERITIES


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_field(detector_id: str, name: str, kind: str, value: Any) -> None:
    path = f"detectors.{detector_id}.{name}"
    if kind == STRING_LIST:
        if not isinstance(value, list):
            raise ConfigValidationError(f"{detector_id}.{name} must be an array", path)
        if not all(isinstance(item, str) for item in value):
            raise ConfigValidationError(f"{detector_id}.{name} must contain only strings", path)
    elif kind == BOOLEAN:
        if not isinstance(value, bool):
            raise ConfigValidationError(f"{detector_id}.{name} must be a boolean", path)
    elif kind == NON_NEGATIVE_NUMBER:
        if not _is_number(value) or value < 0:
            raise ConfigValidationError(f"{detector_id}.{name} must be a non-negative number", path)


def validate_detector(detector_id: str, detector: Any) -> None:
    """Validate one detector section."""
    if not isinstance(detector, Mapping):
        raise ConfigValidationError(f"Detector {detector_id} must be an object", f"detectors.{detector_id}")

    if not isinstance(detector.get("enabled"), bool):
        raise ConfigValidationError(
            f"Detector {detector_id}.enabled must be a boolean",
            f"detectors.{detector_id}.enabled",
        )

    if "severity" in detector and not _is_severity(detector["severity"]):
        raise ConfigValidationError(
            f"Detector {detector_id}.severity must be one of: {_SEVERITY_CHOICES}",
            f"detectors.{detector_id}.severity",
        )

    for name, kind in DETECTOR_FIELDS.get(detector_id, {}).items():
        if name not in detector:
            raise ConfigValidationError(
                f"Detector {detector_id} is missing required field: {name}",
                f"detectors.{detector_id}.{name}",
            )
        _check_field(detector_id, name, kind, detector[name])


def validate_detectors(detectors: Any) -> None:
    if not isinstance(detectors, Mapping):
        raise ConfigValidationError("detectors must be an object", "detectors")

    for key in detectors:
        if key not in NoExecConstants.DETECTOR_IDS:
            raise ConfigValidationError(
                f"Unknown detector: {key}. Valid detectors: {', '.join(NoExecConstants.DETECTOR_IDS)}",
                f"detectors.{key}",
            )

    for detector_id in NoExecConstants.DETECTOR_IDS:
        if detector_id in detectors:
            validate_detector(detector_id, detectors[detector_id])


def validate_global_settings(settings: Any) -> None:
    if not isinstance(settings, Mapping):
        raise ConfigValidationError("globalSettings must be an object", "globalSettings")

    if not _is_severity(settings.get("minSeverity")):
        raise ConfigValidationError(
            f"globalSettings.minSeverity must be one of: {_SEVERITY_CHOICES}",
            "globalSettings.minSeverity",
        )
    for name in ("exitOnDetection", "jsonOutput"):
        if not isinstance(settings.get(name), bool):
            raise ConfigValidationError(f"globalSettings.{name} must be a boolean", f"globalSettings.{name}")


def validate_config(config: Any) -> None:
    """
    Validate a full configuration mapping.

    Raises:
        ConfigValidationError: on the first invalid field
    """
    if not isinstance(config, Mapping):
        raise ConfigValidationError("Config must be an object")
    if "detectors" not in config:
        raise ConfigValidationError('Config must have a "detectors" field')
    if "globalSettings" not in config:
        raise ConfigValidationError('Config must have a "globalSettings" field')

    validate_detectors(config["detectors"])
    validate_global_settings(config["globalSettings"])
