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
Credential leak detector: secrets and API keys written into a command.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from ..models import ScanInput
from ..rules.patterns import PatternRule, RuleHit, any_match, compile_custom_patterns
from .base import BaseDetector


def shannon_entropy(value: str) -> float:
    """Bits of entropy per character of *value*."""
    if not value:
        return 0.0
    length = len(value)
    return -sum((count / length) * math.log2(count / length) for count in Counter(value).values())


class CredentialLeakDetector(BaseDetector):
    """Flags literal secrets; generic ``key=value`` hits must look random."""

    detector_id = "credential-leak"

    def config_rules(self, config: Mapping[str, Any]) -> Mapping[str, Sequence[PatternRule]]:
        custom = tuple(config.get("customPatterns") or ())
        if not custom:
            return {}
        group = self.taxonomy.group("custom-pattern")
        return {group.category: compile_custom_patterns(custom, group.category, group.priority, self.detector_id)}

    def is_placeholder(self, value: str) -> bool:
        return any_match(self.taxonomy.pattern_set("placeholders"), value)

    def has_real_secret_value(self, scan: ScanInput, config: Mapping[str, Any], hit: RuleHit | None) -> bool:
        """Accept when any assigned value passes the entropy and placeholder checks."""
        if hit is None:
            return False
        min_entropy = float(config.get("minEntropy", 0.0))
        ignore_placeholders = config.get("ignorePlaceholders", True)
        for match in hit.rule.finditer(scan.context):
            value = match.group(1)
            if ignore_placeholders and self.is_placeholder(value):
                continue
            if shannon_entropy(value) < min_entropy:
                continue
            return True
        return False
