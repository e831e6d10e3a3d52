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
Classification pipeline.

Runs every enabled detector over one command record and collects their
findings in registration order::

    from noexec.core.engine import analyze, should_block

    findings = analyze({"command": "rm -rf /"})
    if should_block(findings):
        ...
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..config.configuration import Configuration
from ..config.settings import EngineSettings
from .detector_factory import default_detectors
from .detectors.base import BaseDetector
from .exceptions import InputParseError
from .models import Finding, Severity

logger = logging.getLogger(__name__)


class ExitCode:
    """Process exit codes for hook integrations."""

    ALLOW = 0
    BLOCK = 2


def analyze(
    context: Mapping[str, Any],
    config: Configuration | None = None,
    detectors: Sequence[BaseDetector] | None = None,
) -> list[Finding]:
    """
    Classify one command record with every enabled detector.

    A detector that raises is logged and skipped; the others still run.

    Args:
        context: The command record (``command`` plus any other fields)
        config: Validated configuration. Defaults to the packaged defaults.
        detectors: Detectors to run. Defaults to all, in registration order.

    Returns:
        Findings in detector registration order
    """
    config = config or Configuration.default()
    findings: list[Finding] = []

    for detector in detectors if detectors is not None else default_detectors():
        detector_config = config.detector(detector.detector_id)
        if not detector_config.get("enabled", True):
            continue
        try:
            finding = detector.classify(context, detector_config)
        except Exception as e:
            logger.warning("Detector %s failed, skipping: %s", detector.get_name(), e)
            continue
        if finding is not None:
            findings.append(finding)

    logger.debug("Analysis produced %d finding(s)", len(findings))
    return findings


def parse_input(raw: str, settings: EngineSettings | None = None) -> dict[str, Any] | None:
    """
    Parse a raw JSON command record.

    Returns:
        The record, or None for blank input

    Raises:
        InputParseError: If the input is too long, not JSON, or not an object
    """
    if not raw or not raw.strip():
        return None

    settings = settings or EngineSettings()
    if len(raw) > settings.max_input_length:
        raise InputParseError(f"Input of {len(raw)} characters exceeds the limit of {settings.max_input_length}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InputParseError(f"Input is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InputParseError(f"Input must be a JSON object, got {type(data).__name__}")
    return data


def analyze_input(
    raw: str,
    config: Configuration | None = None,
    settings: EngineSettings | None = None,
) -> list[Finding]:
    """
    Parse a raw JSON command record and classify it.

    Blank input has nothing to classify and yields no findings. Findings
    below the configured ``minSeverity`` are dropped. Input that
    cannot be parsed raises instead, so callers can tell "not analyzable"
    apart from "nothing found".

    Raises:
        InputParseError: If the input cannot be parsed into a record
    """
    context = parse_input(raw, settings)
    if context is None:
        return []
    config = config or Configuration.default()
    return filter_by_min_severity(analyze(context, config), config.min_severity)


def filter_by_min_severity(findings: Iterable[Finding], min_severity: Severity | str) -> list[Finding]:
    """Keep findings at or above *min_severity*."""
    threshold = Severity.parse(min_severity)
    return [finding for finding in findings if finding.severity.at_least(threshold)]


def should_block(findings: Iterable[Finding], config: Configuration | None = None) -> bool:
    """True when ``exitOnDetection`` is set and a finding meets ``minSeverity``."""
    config = config or Configuration.default()
    if not config.exit_on_detection:
        return False
    return bool(filter_by_min_severity(findings, config.min_severity))
