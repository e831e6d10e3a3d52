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
Pattern taxonomy data types and the YAML taxonomy loader.

Every expression is compiled with RE2, which matches in time linear in the
input and rejects backtracking-only constructs (lookaround, backreferences).
A rule that would need a negative lookahead lists the vetoing expressions
under ``unless`` instead.

Taxonomy file layout (``data/taxonomy/<detector-id>.yaml``)::

    detector: credential-leak        # config id
    finding_id: credential-leak      # id reported on findings
    scan: context                    # default scan target (context|command)
    ignore_case: false               # default for every expression below
    pattern_sets:                    # named lists, for predicates and all_of
      placeholders: [...]
    safe_patterns:                   # suppressor rules, any match -> no finding
      - id: ...
        patterns: [...]
        predicate: method_name       # optional detector method
        enabled_when: {flag: true}   # optional config gate
    categories:                      # priority = list position
      - category: aws-access-key
        severity: high
        message: ...
        patterns: ["...", {pattern: "...", unless: ["..."]}]
        all_of: [[...], [...]]       # every list must match
        predicate: method_name
        enabled_when: {flag: false}
        escalation: {severity: high, message: ..., patterns: [...]}
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import re2
import yaml

from ...data import TAXONOMY_DIR
from ..exceptions import TaxonomyLoadError
from ..models import SCAN_CONTEXT, SCAN_TARGETS, ScanInput, Severity

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def compile_expression(source: str, ignore_case: bool = False) -> Any:
    """Compile *source* with RE2. Raises ``re2.error`` when RE2 rejects it."""
    if ignore_case:
        source = f"(?i){source}"
    return re2.compile(source)


# ---------------------------------------------------------------------------
# Rule data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternRule:
    """One compiled expression plus the expressions that veto it."""

    source: str
    expression: Any
    category: str
    priority: int
    exclusions: tuple[Any, ...] = ()

    def search(self, text: str) -> Any:
        match = self.expression.search(text)
        if match is None:
            return None
        if any(exclusion.search(text) for exclusion in self.exclusions):
            return None
        return match

    def finditer(self, text: str) -> Iterator[Any]:
        if any(exclusion.search(text) for exclusion in self.exclusions):
            return iter(())
        return self.expression.finditer(text)


@dataclass(frozen=True)
class RuleHit:
    """The rule that matched and its match object."""

    rule: PatternRule
    match: Any


def first_hit(rules: Iterable[PatternRule], text: str) -> RuleHit | None:
    for rule in rules:
        match = rule.search(text)
        if match is not None:
            return RuleHit(rule, match)
    return None


def any_match(rules: Iterable[PatternRule], text: str) -> bool:
    return first_hit(rules, text) is not None


def _gate_open(gate: Mapping[str, Any], config: Mapping[str, Any]) -> bool:
    return all(config.get(key) == value for key, value in gate.items())


@dataclass(frozen=True)
class Escalation:
    """Context patterns that raise a category's severity."""

    severity: Severity
    message: str
    rules: tuple[PatternRule, ...]

    def applies(self, text: str) -> bool:
        return any_match(self.rules, text)


@dataclass(frozen=True)
class CategoryGroup:
    """A named category of a detector's taxonomy.

    The group fires when one of ``rules`` matches (if it has any), every
    ``all_of`` set matches, and the optional detector predicate accepts.
    """

    category: str
    priority: int
    severity: Severity
    message: str
    rules: tuple[PatternRule, ...] = ()
    all_of: tuple[tuple[PatternRule, ...], ...] = ()
    scan: str = SCAN_CONTEXT
    predicate: str | None = None
    enabled_when: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    escalation: Escalation | None = None

    def is_active(self, config: Mapping[str, Any]) -> bool:
        return _gate_open(self.enabled_when, config)

    def requirements_met(self, text: str) -> bool:
        return all(any_match(rule_set, text) for rule_set in self.all_of)


@dataclass(frozen=True)
class SafeRule:
    """An allow-list rule; a match forces "no finding" for the detector."""

    id: str
    rules: tuple[PatternRule, ...] = ()
    scan: str = SCAN_CONTEXT
    predicate: str | None = None
    enabled_when: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)


Predicate = Callable[[ScanInput, Mapping[str, Any], "RuleHit | None"], Any]


class Suppressor:
    """Evaluates a detector's safe rules before its taxonomy."""

    def __init__(self, safe_rules: Iterable[SafeRule] = ()):
        self.safe_rules = tuple(safe_rules)

    def __len__(self) -> int:
        return len(self.safe_rules)

    def suppresses(
        self,
        scan: ScanInput,
        config: Mapping[str, Any],
        resolve: Callable[[str], Predicate],
    ) -> str | None:
        """Return the id of the first safe rule that matches, else ``None``.

        A safe rule with patterns needs one of them to match; a safe rule with
        a predicate needs the predicate to accept as well.
        """
        for safe in self.safe_rules:
            if not _gate_open(safe.enabled_when, config):
                continue
            hit = None
            if safe.rules:
                hit = first_hit(safe.rules, scan.text(safe.scan))
                if hit is None:
                    continue
            if safe.predicate and not resolve(safe.predicate)(scan, config, hit):
                continue
            return safe.id
        return None


@dataclass(frozen=True)
class Taxonomy:
    """The compiled taxonomy of one detector."""

    detector_id: str
    finding_id: str
    groups: tuple[CategoryGroup, ...]
    suppressor: Suppressor
    pattern_sets: Mapping[str, tuple[PatternRule, ...]] = field(default_factory=lambda: _EMPTY)

    @property
    def categories(self) -> list[str]:
        return [group.category for group in self.groups]

    def group(self, category: str) -> CategoryGroup:
        for group in self.groups:
            if group.category == category:
                return group
        raise KeyError(f"{self.detector_id} has no category '{category}'")

    def pattern_set(self, name: str) -> tuple[PatternRule, ...]:
        return self.pattern_sets[name]


# ---------------------------------------------------------------------------
# User-supplied patterns
# ---------------------------------------------------------------------------


@lru_cache(maxsize=256)
def compile_custom_patterns(
    expressions: tuple[str, ...],
    category: str,
    priority: int,
    owner: str,
) -> tuple[PatternRule, ...]:
    """Compile configuration-supplied expressions, skipping invalid ones.

    Results are cached on the expression tuple, so an invalid pattern is
    reported once rather than on every classification.
    """
    rules = []
    for source in expressions:
        try:
            expression = compile_expression(source)
        except (re2.error, TypeError) as e:
            logger.warning("Skipping invalid custom pattern '%s' for detector %s: %s", source, owner, e)
            continue
        rules.append(PatternRule(source=source, expression=expression, category=category, priority=priority))
    return tuple(rules)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TaxonomyLoader:
    """Loads detector taxonomies from YAML files."""

    def __init__(self, taxonomy_dir: Path | None = None):
        """
        Initialize taxonomy loader.

        Args:
            taxonomy_dir: Directory holding ``<detector-id>.yaml`` files.
                Defaults to the packaged ``data/taxonomy`` directory.
        """
        self.taxonomy_dir = Path(taxonomy_dir) if taxonomy_dir is not None else TAXONOMY_DIR

    def load(self, detector_id: str) -> Taxonomy:
        path = self.taxonomy_dir / f"{detector_id}.yaml"
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise TaxonomyLoadError(f"Failed to load taxonomy from {path}: {e}") from e

        if not isinstance(data, dict):
            raise TaxonomyLoadError(f"Failed to load taxonomy from {path}: expected a YAML mapping")
        if data.get("detector") != detector_id:
            raise TaxonomyLoadError(f"Taxonomy {path} declares detector '{data.get('detector')}'")

        try:
            taxonomy = self._build(detector_id, data)
        except (KeyError, TypeError, ValueError) as e:
            raise TaxonomyLoadError(f"Malformed taxonomy {path}: {e}") from e

        logger.debug(
            "Loaded taxonomy %s: %d categories, %d safe rules",
            detector_id,
            len(taxonomy.groups),
            len(taxonomy.suppressor),
        )
        return taxonomy

    # -----------------------------------------------------------------------
    # Internal parsing
    # -----------------------------------------------------------------------

    def _build(self, detector_id: str, data: dict[str, Any]) -> Taxonomy:
        default_scan = self._scan_target(data.get("scan", SCAN_CONTEXT))
        ignore_case = bool(data.get("ignore_case", False))

        pattern_sets = {
            name: self._compile_rules(specs, f"set:{name}", -1, ignore_case, detector_id)
            for name, specs in (data.get("pattern_sets") or {}).items()
        }

        safe_rules = []
        for entry in data.get("safe_patterns") or []:
            entry_case = bool(entry.get("ignore_case", ignore_case))
            safe_rules.append(
                SafeRule(
                    id=entry["id"],
                    rules=self._compile_rules(entry.get("patterns") or [], "safe", -1, entry_case, detector_id),
                    scan=self._scan_target(entry.get("scan", default_scan)),
                    predicate=entry.get("predicate"),
                    enabled_when=MappingProxyType(dict(entry.get("enabled_when") or {})),
                )
            )

        groups = []
        for priority, entry in enumerate(data.get("categories") or []):
            category = entry["category"]
            entry_case = bool(entry.get("ignore_case", ignore_case))
            escalation = None
            if entry.get("escalation"):
                esc = entry["escalation"]
                escalation = Escalation(
                    severity=Severity.parse(esc["severity"]),
                    message=esc["message"],
                    rules=self._compile_rules(esc["patterns"], category, priority, entry_case, detector_id),
                )
            groups.append(
                CategoryGroup(
                    category=category,
                    priority=priority,
                    severity=Severity.parse(entry["severity"]),
                    message=entry["message"],
                    rules=self._compile_rules(entry.get("patterns") or [], category, priority, entry_case, detector_id),
                    all_of=tuple(
                        self._compile_rules(specs, category, priority, entry_case, detector_id)
                        for specs in entry.get("all_of") or []
                    ),
                    scan=self._scan_target(entry.get("scan", default_scan)),
                    predicate=entry.get("predicate"),
                    enabled_when=MappingProxyType(dict(entry.get("enabled_when") or {})),
                    escalation=escalation,
                )
            )

        return Taxonomy(
            detector_id=detector_id,
            finding_id=data.get("finding_id", detector_id),
            groups=tuple(groups),
            suppressor=Suppressor(safe_rules),
            pattern_sets=MappingProxyType(pattern_sets),
        )

    @staticmethod
    def _scan_target(value: str) -> str:
        if value not in SCAN_TARGETS:
            raise ValueError(f"unknown scan target '{value}'")
        return value

    @staticmethod
    def _compile_rules(
        specs: list[Any],
        category: str,
        priority: int,
        ignore_case: bool,
        detector_id: str,
    ) -> tuple[PatternRule, ...]:
        rules = []
        for item in specs:
            if isinstance(item, str):
                source, unless = item, []
            else:
                source, unless = item["pattern"], item.get("unless") or []
            try:
                expression = compile_expression(source, ignore_case)
                exclusions = tuple(compile_expression(u, ignore_case) for u in unless)
            except re2.error as e:
                logger.warning("Failed to compile pattern '%s' for %s/%s: %s", source, detector_id, category, e)
                continue
            rules.append(
                PatternRule(
                    source=source,
                    expression=expression,
                    category=category,
                    priority=priority,
                    exclusions=exclusions,
                )
            )
        return tuple(rules)


@lru_cache(maxsize=None)
def load_taxonomy(detector_id: str) -> Taxonomy:
    """Load and cache the packaged taxonomy of *detector_id*."""
    return TaxonomyLoader().load(detector_id)
