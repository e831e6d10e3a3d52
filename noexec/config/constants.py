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
Constants for noexec.
"""

try:
    from .._version import __version__ as PACKAGE_VERSION
except Exception:  # pragma: no cover
    PACKAGE_VERSION = "0.0.0-dev"


class NoExecConstants:
    """Constants used throughout the engine."""

    VERSION = PACKAGE_VERSION

    # Detector ids, in registration order
    DETECTOR_IDS = (
        "destructive-commands",
        "git-force-operations",
        "credential-leak",
        "env-var-leak",
        "magic-string",
        "binary-download-execute",
        "package-poisoning",
        "security-tool-disabling",
        "network-exfiltration",
        "backdoor-persistence",
        "credential-harvesting",
        "code-injection",
        "container-escape",
        "archive-bomb",
        "process-manipulation",
    )

    # Severity levels
    SEVERITY_HIGH = "high"
    SEVERITY_MEDIUM = "medium"
    SEVERITY_LOW = "low"
    SEVERITIES = (SEVERITY_HIGH, SEVERITY_MEDIUM, SEVERITY_LOW)

    # Environment variables read by EngineSettings
    ENV_LOG_LEVEL = "NOEXEC_LOG_LEVEL"
    ENV_MAX_INPUT_LENGTH = "NOEXEC_MAX_INPUT_LENGTH"

    # Default values
    DEFAULT_LOG_LEVEL = "WARNING"
    DEFAULT_MAX_INPUT_LENGTH = 1_000_000
