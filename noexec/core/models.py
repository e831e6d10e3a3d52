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
Data models for command records and classification findings.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Severity labels that exist in other tools' vocabularies but not in ours.
_SEVERITY_ALIASES = {
    "critical": "high",
    "info": "low",
}

_RANKS = {"low": 1, "medium": 2, "high": 3}


class Severity(str, Enum):
    """Severity levels for findings, ordered ``low < medium < high``."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _RANKS[self.value]

    @classmethod
    def parse(cls, value: str | Severity) -> Severity:
        """Parse a severity label, clamping foreign labels into range.

        ``critical`` becomes ``high`` and ``info`` becomes ``low``; anything
        else that is not one of the three levels raises ``ValueError``.
        """
        if isinstance(value, Severity):
            return value
        label = str(value).strip().lower()
        if label in _SEVERITY_ALIASES:
            logger.debug("Clamping severity '%s' to '%s'", value, _SEVERITY_ALIASES[label])
            label = _SEVERITY_ALIASES[label]
        return cls(label)

    def at_least(self, threshold: Severity) -> bool:
        return self.rank >= threshold.rank


@dataclass(frozen=True)
class Finding:
    """A classified risk reported by one detector for one command."""

    severity: Severity
    message: str
    detector_id: str
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert finding to the wire shape used at the reporting boundary."""
        return {
            "severity": self.severity.value,
            "message": self.message,
            "detector": self.detector_id,
        }


# Which text a rule is evaluated against.
SCAN_CONTEXT = "context"
SCAN_COMMAND = "command"
SCAN_TARGETS = (SCAN_CONTEXT, SCAN_COMMAND)


@dataclass(frozen=True)
class ScanInput:
    """Canonical text forms of one command record.

    ``context`` is the compact JSON serialization of the whole record, so
    that fields other than ``command`` are inspected too. ``command`` is the
    stripped ``command`` field alone (empty when absent or not a string).
    """

    context: str
    command: str

    @classmethod
    def from_context(cls, context: Mapping[str, Any]) -> ScanInput:
        serialized = json.dumps(
            dict(context),
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
        command = context.get("command")
        return cls(context=serialized, command=command.strip() if isinstance(command, str) else "")

    def text(self, target: str) -> str:
        return self.command if target == SCAN_COMMAND else self.context
