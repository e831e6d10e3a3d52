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
Environment variable leak detector.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

import re2

from ..rules.patterns import PatternRule, compile_custom_patterns
from .base import BaseDetector


@lru_cache(maxsize=64)
def _sensitive_names_pattern(names: tuple[str, ...]) -> str:
    alternatives = "|".join(re2.escape(name) for name in names)
    return rf"\$\{{?(?:{alternatives})\b"


class EnvVarLeakDetector(BaseDetector):
    """Flags references to secret-bearing variables and environment dumps.

    Names listed in ``sensitiveVars`` are matched as ``$NAME`` / ``${NAME}``
    on top of the built-in variable patterns.
    """

    detector_id = "env-var-leak"

    def config_rules(self, config: Mapping[str, Any]) -> Mapping[str, Sequence[PatternRule]]:
        names = tuple(name for name in config.get("sensitiveVars") or () if name)
        if not names:
            return {}
        group = self.taxonomy.group("sensitive-variable")
        source = _sensitive_names_pattern(names)
        return {group.category: compile_custom_patterns((source,), group.category, group.priority, self.detector_id)}
