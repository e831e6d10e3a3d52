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
Code injection detector.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import ScanInput
from ..rules.patterns import RuleHit
from .base import BaseDetector

_COMMENT_PREFIXES = ("#", "//", "*", '"""', "'''")


def is_comment_only(text: str) -> bool:
    """True when every non-blank line of *text* is a comment or docstring line."""
    lines = [line.strip() for line in text.splitlines()]
    code = [line for line in lines if line]
    return bool(code) and all(line.startswith(_COMMENT_PREFIXES) for line in code)


class CodeInjectionDetector(BaseDetector):
    """Flags eval/exec sinks, injectable queries and unsafe deserialization."""

    detector_id = "code-injection"

    def command_is_comment_only(self, scan: ScanInput, config: Mapping[str, Any], hit: RuleHit | None) -> bool:
        return is_comment_only(scan.command)
