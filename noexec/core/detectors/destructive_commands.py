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
Destructive command detector.

``rm -r`` of build output and scratch directories is routine during
development, so a command is suppressed when it consists only of recursive
deletes whose targets are all configured ``safePaths`` entries or built-in
scratch locations (``tmp/``, ``temp/``, dot-directories of the working tree).
Any other segment chained onto such a delete leaves the command to the
taxonomy.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import re2

from ..models import ScanInput
from ..rules.patterns import PatternRule, RuleHit, compile_custom_patterns
from .base import BaseDetector

_SEGMENT_SPLIT = re2.compile(r"&&|\|\||[;|&\n]")
_RECURSIVE_FLAG = re2.compile(r"^(?:-[a-zA-Z]*[rR][a-zA-Z]*|--recursive)$")

_SCRATCH_PATH = re2.compile(r"^(?:\./|/)?(?:tmp|temp)/|^(?:\./)?\.[\w-][^/]*(?:/.*)?$")


def _normalize(path: str) -> str:
    path = path.strip("'\"")
    while path.startswith("./"):
        path = path[2:]
    return path.rstrip("/") or path


def rm_targets(segment: str) -> list[str] | None:
    """Targets of *segment* if it is a recursive ``rm``, else ``None``."""
    tokens = segment.split()
    if tokens[:1] == ["sudo"]:
        tokens = tokens[1:]
    if tokens[:1] != ["rm"]:
        return None
    args = tokens[1:]
    if not any(_RECURSIVE_FLAG.search(arg) for arg in args):
        return None
    return [arg for arg in args if not arg.startswith("-")]


def is_safe_path(path: str, safe_paths: Sequence[str]) -> bool:
    if _SCRATCH_PATH.search(path.strip("'\"")):
        return True
    normalized = _normalize(path)
    for safe in safe_paths:
        base = _normalize(safe)
        if base and (normalized == base or normalized.startswith(base + "/")):
            return True
    return False


def is_safe_rm_command(command: str, safe_paths: Sequence[str]) -> bool:
    """True when every segment of *command* is a recursive ``rm`` of safe paths."""
    segments = [segment for segment in _SEGMENT_SPLIT.split(command) if segment.strip()]
    if not segments:
        return False
    for segment in segments:
        targets = rm_targets(segment)
        if not targets or not all(is_safe_path(target, safe_paths) for target in targets):
            return False
    return True


class DestructiveCommandsDetector(BaseDetector):
    """Flags commands that can destroy data or take the machine down."""

    detector_id = "destructive-commands"

    def config_rules(self, config: Mapping[str, Any]) -> Mapping[str, Sequence[PatternRule]]:
        extra = tuple(config.get("additionalPatterns") or ())
        if not extra:
            return {}
        group = self.taxonomy.group("custom-pattern")
        return {group.category: compile_custom_patterns(extra, group.category, group.priority, self.detector_id)}

    def rm_targets_safe_paths(self, scan: ScanInput, config: Mapping[str, Any], hit: RuleHit | None) -> bool:
        return is_safe_rm_command(scan.command, config.get("safePaths") or ())
