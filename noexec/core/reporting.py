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
Helpers for handing findings to a reporting sink.

The network client that delivers reports lives outside the engine. These
helpers only shape what it sends: the command itself is replaced by its
SHA-256 digest so raw command text never leaves the machine.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Any

from ..config.constants import NoExecConstants
from .models import Finding

# Remediation tips keyed by finding id
_SUGGESTIONS = {
    "git-force-operation": "Consider using --force-with-lease instead of --force for safer force-pushing.",
    "destructive-command": "Review the command carefully. Consider using trash/mv for safer file deletion.",
    "credential-leak": "Never hardcode credentials. Use environment variables or secret managers instead.",
    "env-var-leak": "Avoid exporting sensitive variables. Consider using .env files or vaults.",
    "magic-string": "Hardcoded sensitive data detected. Use configuration files or environment variables.",
    "binary-download-execute": (
        "Avoid piping downloaded content directly to shell. Review and save scripts before executing."
    ),
    "package-poisoning": "Verify package integrity. Use official package managers and check package signatures.",
    "security-tool-disabling": "Disabling security tools is dangerous. Reconsider if this is necessary.",
    "network-exfiltration": "Suspicious data exfiltration detected. Verify the destination and data being sent.",
    "backdoor-persistence": "Persistence mechanism detected. Ensure this is intentional and authorized.",
    "credential-harvesting": "Credential access detected. Use secure credential management systems.",
    "code-injection": "Code injection technique detected. Review for security implications.",
    "container-escape": "Container escape attempt detected. Review privileged operations carefully.",
    "archive-bomb": "Zip bomb or archive bomb detected. Decompress with limits and monitoring.",
    "process-manipulation": "Process manipulation detected. Ensure debugging/profiling is intentional.",
}


def hash_command(command: str) -> str:
    """SHA-256 hex digest of *command*."""
    return hashlib.sha256(command.encode("utf-8")).hexdigest()


def suggestion_for(detector_id: str) -> str | None:
    """Remediation tip for a finding id, if one exists."""
    return _SUGGESTIONS.get(detector_id)


def build_report_payload(finding: Finding, command: str, *, platform: str = "claude") -> dict[str, Any]:
    """
    Build the block-event payload for one finding.

    Args:
        finding: The finding to report
        command: The command that produced it; only its hash is included
        platform: Name of the agent integration that intercepted the command

    Returns:
        A JSON-ready dict
    """
    return {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "severity": finding.severity.value,
        "detector": finding.detector_id,
        "message": finding.message,
        "command_hash": hash_command(command),
        "metadata": {
            "cli_version": NoExecConstants.VERSION,
            "platform": platform,
        },
    }
