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
Network exfiltration detector.

Every rule of this detector looks at the command text only, never at the
other fields of the record.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import ScanInput
from ..rules.patterns import RuleHit, any_match
from .base import BaseDetector, TrustedDomainsMixin


class NetworkExfiltrationDetector(TrustedDomainsMixin, BaseDetector):
    """Flags data leaving the machine: reverse shells, DNS tunnels, uploads."""

    detector_id = "network-exfiltration"

    def pipes_data_to_network(self, scan: ScanInput, config: Mapping[str, Any], hit: RuleHit | None) -> bool:
        """True when a segment that reads data is piped straight into a network client."""
        segments = scan.command.split("|")
        if len(segments) < 2:
            return False

        readers = self.taxonomy.pattern_set("file_read_commands") + self.taxonomy.pattern_set("sensitive_files")
        senders = self.taxonomy.pattern_set("network_commands")
        for current, following in zip(segments, segments[1:]):
            if any_match(readers, current) and any_match(senders, following):
                return True
        return False
