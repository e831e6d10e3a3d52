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
Typosquat matching for package installation commands.

Package names are pulled out of a command per ecosystem and compared, by
edit distance, against curated lists of popular legitimate packages
(``data/typosquat/legitimate_packages.yaml``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from types import MappingProxyType

import re2
import yaml

from ..data import TYPOSQUAT_DIR
from .exceptions import TaxonomyLoadError

logger = logging.getLogger(__name__)

LEGITIMATE_PACKAGES_PATH = TYPOSQUAT_DIR / "legitimate_packages.yaml"

ECOSYSTEMS = ("npm", "pip", "cargo", "gem")

MAX_DISTANCE = 2
MIN_NAME_LENGTH = 3

# Words that appear in install commands but are never package names.
_KEYWORDS = frozenset(
    ["install", "add", "i", "npm", "yarn", "pnpm", "pip", "pip3", "cargo", "gem", "go", "get", "workspace"]
)
_NPM_SKIP_FLAGS = frozenset(["-g", "-D"])
_NPM_SKIP_PREFIXES = ("--", "http://", "https://", "git+", "file:", "/")
_PIP_SKIP_PREFIXES = ("-", "http://", "https://", "git+", "/")

_NPM_INSTALL = re2.compile(r"\b(?:npm|yarn|pnpm)\s+(?:workspace\s+[\w-]+\s+)?(?:install|add|i)\b")
_PIP_INSTALL = re2.compile(r"\bpip3?\s+install\b")
_NPM_TOKEN = re2.compile(r"(?i)^(@[a-z0-9-]+/[a-z0-9-]+|[a-z0-9][a-z0-9._/-]*)(?:@[0-9][0-9A-Za-z_.-]*)?$")
_PIP_TOKEN = re2.compile(r"(?i)^([a-z0-9][a-z0-9_-]*)(?:==[A-Za-z0-9_.-]+)?$")
_CARGO_INSTALL = re2.compile(r"(?i)\bcargo\s+(?:install|add)\s+(?:--[A-Za-z0-9_-]+\s+)*([a-z0-9_-]+)")
_GEM_INSTALL = re2.compile(r"(?i)\bgem\s+install\s+(?:--[A-Za-z0-9_-]+\s+)*([a-z0-9_-]+)")


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance with unit costs for insert, delete and substitute."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j], current[j - 1], previous[j - 1]))
        previous = current
    return previous[-1]


def find_typosquat(name: str, legitimate: Sequence[str], max_distance: int = MAX_DISTANCE) -> str | None:
    """Return the legitimate package *name* imitates, or None.

    Scoped names (``@scope/pkg``), names shorter than three characters and
    names that are themselves legitimate are never typosquats. Otherwise the
    first legitimate name (in list order) within *max_distance* edits and
    within two characters of length is returned.
    """
    if name.startswith("@") or len(name) < MIN_NAME_LENGTH:
        return None

    lowered = name.lower()
    if any(lowered == legit.lower() for legit in legitimate):
        return None

    for legit in legitimate:
        # Length gate first: it bounds the work for long hostile tokens.
        if abs(len(name) - len(legit)) > 2:
            continue
        distance = levenshtein(lowered, legit.lower())
        if 0 < distance <= max_distance:
            return legit
    return None


@lru_cache(maxsize=1)
def load_legitimate_packages() -> Mapping[str, tuple[str, ...]]:
    """Load the curated per-ecosystem package lists."""
    try:
        with open(LEGITIMATE_PACKAGES_PATH, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise TaxonomyLoadError(f"Failed to load package lists from {LEGITIMATE_PACKAGES_PATH}: {e}") from e

    if not isinstance(data, dict):
        raise TaxonomyLoadError(f"Failed to load package lists from {LEGITIMATE_PACKAGES_PATH}: expected a mapping")

    lists = {}
    for ecosystem in ECOSYSTEMS:
        lists[ecosystem] = tuple(str(name) for name in data.get(ecosystem) or [])
    logger.debug("Loaded legitimate package lists: %s", {k: len(v) for k, v in lists.items()})
    return MappingProxyType(lists)


def extract_package_names(command: str, ecosystem: str) -> list[str]:
    """Pull candidate package names for *ecosystem* out of *command*.

    npm covers the npm, yarn and pnpm clients. Only install commands yield
    names. Extraction is token based for npm and pip (every token of the
    command that looks like a name counts), and anchored on the install verb
    for cargo and gem.
    """
    if ecosystem == "npm":
        if not _NPM_INSTALL.search(command):
            return []
        packages = []
        for token in command.split():
            if token in _NPM_SKIP_FLAGS or token.startswith(_NPM_SKIP_PREFIXES):
                continue
            if token.lower() in _KEYWORDS:
                continue
            match = _NPM_TOKEN.search(token)
            if match:
                packages.append(match.group(1))
        return packages

    if ecosystem == "pip":
        if not _PIP_INSTALL.search(command):
            return []
        packages = []
        for token in command.split():
            if token.startswith(_PIP_SKIP_PREFIXES) or token.lower() in _KEYWORDS:
                continue
            match = _PIP_TOKEN.search(token)
            if match:
                packages.append(match.group(1))
        return packages

    if ecosystem == "cargo":
        return [m.group(1) for m in _CARGO_INSTALL.finditer(command)]
    if ecosystem == "gem":
        return [m.group(1) for m in _GEM_INSTALL.finditer(command)]

    raise ValueError(f"Unknown ecosystem '{ecosystem}'. Known: {', '.join(ECOSYSTEMS)}")


def find_command_typosquat(command: str) -> tuple[str, str] | None:
    """Return ``(package, legitimate)`` for the first typosquat in *command*."""
    lists = load_legitimate_packages()
    for ecosystem in ECOSYSTEMS:
        for package in extract_package_names(command, ecosystem):
            legitimate = find_typosquat(package, lists[ecosystem])
            if legitimate:
                return package, legitimate
    return None
