# Copyright 2026 Cisco Systems, Inc. and its affiliates
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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import load_dotenv

from noexec.config.configuration import Configuration
from noexec.core.detector_factory import build_detector
from noexec.core.engine import analyze

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

project_root = Path(__file__).parent.parent
env_file = project_root / ".env"

if env_file.exists():
    load_dotenv(env_file)


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config():
    """Factory fixture for a merged, validated :class:`Configuration`.

    Usage::

        config = make_config({"detectors": {"credential-leak": {"minEntropy": 4.0}}})
        config = make_config(detectors={"magic-string": {"enabled": False}})
    """

    def _make(override: dict | None = None, **sections) -> Configuration:
        merged = dict(override or {})
        merged.update(sections)
        return Configuration.from_override(merged)

    return _make


@pytest.fixture
def classify(make_config):
    """Factory fixture that classifies one command with one detector.

    Keyword arguments override that detector's defaults::

        finding = classify("git-force-operations", "git push --force-with-lease",
                           allowForceWithLease=False)
    """
    detectors: dict = {}

    def _classify(detector_id: str, command: str, context: dict | None = None, **detector_overrides):
        if detector_id not in detectors:
            detectors[detector_id] = build_detector(detector_id)
        config = make_config(detectors={detector_id: detector_overrides}) if detector_overrides else make_config()
        record = {"command": command, **(context or {})}
        return detectors[detector_id].classify(record, config.detector(detector_id))

    return _classify


@pytest.fixture
def run_analysis(make_config):
    """Factory fixture that runs the whole pipeline over one command."""

    def _run(command: str, override: dict | None = None, **fields):
        return analyze({"command": command, **fields}, make_config(override))

    return _run


@pytest.fixture
def assert_flags(classify):
    """Assert that every command produces a finding from *detector_id*."""

    def _check(detector_id: str, commands: list[str], category: str | None = None, **detector_overrides):
        for cmd in commands:
            finding = classify(detector_id, cmd, **detector_overrides)
            assert finding is not None, f"Expected {detector_id} to flag '{cmd}'"
            if category is not None:
                assert finding.category == category, f"Expected category {category} for '{cmd}', got {finding.category}"

    return _check


@pytest.fixture
def assert_allows(classify):
    """Assert that no command produces a finding from *detector_id*."""

    def _check(detector_id: str, commands: list[str], **detector_overrides):
        for cmd in commands:
            finding = classify(detector_id, cmd, **detector_overrides)
            assert finding is None, f"Expected {detector_id} to allow '{cmd}', got {finding}"

    return _check
