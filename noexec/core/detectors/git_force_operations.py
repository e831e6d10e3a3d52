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
Git force operation detector.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import ScanInput
from ..rules.patterns import RuleHit
from .base import BaseDetector

_DELETE_FLAGS = frozenset(["-d", "--delete"])
_FORCE_FLAGS = frozenset(["-f", "--force"])


def is_forced_branch_delete(flags: list[str]) -> bool:
    """``-D``, ``-d -f``, ``--delete --force`` or a combined ``-df``."""
    if "-D" in flags:
        return True
    if _DELETE_FLAGS.intersection(flags) and _FORCE_FLAGS.intersection(flags):
        return True
    return any(not flag.startswith("--") and {"d", "f"} <= set(flag[1:]) for flag in flags)


class GitForceOperationsDetector(BaseDetector):
    """Flags git operations that discard work or overwrite shared history.

    Whether ``--force-with-lease`` is acceptable is controlled by
    ``allowForceWithLease``; force-deleting a local branch is only reported
    for branches listed in ``protectedBranches``.
    """

    detector_id = "git-force-operations"

    def deletes_protected_branch(
        self, scan: ScanInput, config: Mapping[str, Any], hit: RuleHit | None
    ) -> dict[str, str] | None:
        if hit is None:
            return None
        protected = set(config.get("protectedBranches") or ())
        for match in hit.rule.finditer(scan.command):
            args = match.group(1).split()
            flags = [arg for arg in args if arg.startswith("-")]
            if not is_forced_branch_delete(flags):
                continue
            for branch in args:
                if not branch.startswith("-") and branch in protected:
                    return {"branch": branch}
        return None
