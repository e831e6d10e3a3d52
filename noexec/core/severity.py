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
Severity resolution for a matched category.

Precedence, highest first:

1. ``severity`` set explicitly in the detector configuration.
2. The category's escalation block, when one of its context patterns
   matches the scanned text.
3. The category's default severity.

The escalation message replaces the category message whenever the
escalation context matches, even when the configured severity wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import ScanInput, Severity
from .rules.patterns import CategoryGroup


def resolve_severity(
    group: CategoryGroup,
    scan: ScanInput,
    config: Mapping[str, Any],
) -> tuple[Severity, str]:
    """Return the severity and message template for a matched *group*."""
    escalated = group.escalation is not None and group.escalation.applies(scan.text(group.scan))
    message = group.escalation.message if escalated else group.message

    configured = config.get("severity")
    if configured:
        return Severity.parse(configured), message
    if escalated:
        return group.escalation.severity, message
    return group.severity, message
