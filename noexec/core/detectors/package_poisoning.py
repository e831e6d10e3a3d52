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
Package poisoning detector.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import ScanInput
from ..rules.patterns import RuleHit
from ..typosquat import find_command_typosquat
from .base import BaseDetector


class PackagePoisoningDetector(BaseDetector):
    """Flags untrusted package sources, registry tampering and typosquats."""

    detector_id = "package-poisoning"

    def typosquatted_package(
        self, scan: ScanInput, config: Mapping[str, Any], hit: RuleHit | None
    ) -> dict[str, str] | None:
        found = find_command_typosquat(scan.command)
        if found is None:
            return None
        package, legitimate = found
        return {"package": package, "legitimate": legitimate}
