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
Base detector: interprets one taxonomy against one command record.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from types import MappingProxyType
from typing import Any

import re2

from ..exceptions import TaxonomyLoadError
from ..models import Finding, ScanInput
from ..rules.patterns import (
    CategoryGroup,
    PatternRule,
    Predicate,
    RuleHit,
    Taxonomy,
    compile_expression,
    first_hit,
    load_taxonomy,
)
from ..severity import resolve_severity

logger = logging.getLogger(__name__)

_ENABLED: Mapping[str, Any] = MappingProxyType({"enabled": True})


class BaseDetector:
    """Classifies a command record against a detector taxonomy.

    Subclasses contribute behavior the YAML data cannot express:

    * predicate methods, named by ``predicate:`` in the taxonomy, with the
      signature ``(scan, config, hit) -> bool | dict``. A dict is used to
      format the category message.
    * :meth:`config_rules`, for patterns that come from the detector
      configuration (custom patterns, sensitive variable names).
    """

    detector_id: str = ""

    def __init__(self, detector_id: str | None = None, taxonomy: Taxonomy | None = None):
        """
        Initialize detector.

        Args:
            detector_id: Config id of the detector. Subclasses set it as a
                class attribute instead.
            taxonomy: Pre-built taxonomy. If None, loads the packaged one.
        """
        self.taxonomy = taxonomy or load_taxonomy(detector_id or self.detector_id)
        self.detector_id = self.taxonomy.detector_id
        self.finding_id = self.taxonomy.finding_id
        self._check_predicates()

    def get_name(self) -> str:
        """Get the detector config id."""
        return self.detector_id

    def classify(self, context: Mapping[str, Any], config: Mapping[str, Any] | None = None) -> Finding | None:
        """
        Classify a command record.

        Args:
            context: The command record (``command`` plus any other fields)
            config: This detector's configuration. If None, the detector is
                enabled with category defaults.

        Returns:
            The finding of the highest-priority matching category, or None
        """
        config = config if config is not None else _ENABLED
        if not config.get("enabled", True):
            return None

        scan = ScanInput.from_context(context)
        safe_id = self.taxonomy.suppressor.suppresses(scan, config, self.resolve_predicate)
        if safe_id is not None:
            logger.debug("%s: suppressed by safe rule %s", self.detector_id, safe_id)
            return None

        extra_rules = self.config_rules(config)
        for group in self.taxonomy.groups:
            if not group.is_active(config):
                continue
            params = self._match_group(group, scan, config, extra_rules.get(group.category, ()))
            if params is None:
                continue

            severity, template = resolve_severity(group, scan, config)
            logger.debug("%s: matched category %s (%s)", self.detector_id, group.category, severity.value)
            return Finding(
                severity=severity,
                message=template.format(**params) if params else template,
                detector_id=self.finding_id,
                category=group.category,
            )

        return None

    def config_rules(self, config: Mapping[str, Any]) -> Mapping[str, Sequence[PatternRule]]:
        """Rules built from *config*, keyed by the category they extend."""
        return {}

    def resolve_predicate(self, name: str) -> Predicate:
        return getattr(self, name)

    def _match_group(
        self,
        group: CategoryGroup,
        scan: ScanInput,
        config: Mapping[str, Any],
        extra_rules: Sequence[PatternRule],
    ) -> dict[str, Any] | None:
        text = scan.text(group.scan)
        rules = group.rules + tuple(extra_rules)

        hit = None
        if rules:
            hit = first_hit(rules, text)
            if hit is None:
                return None
        elif not group.all_of and not group.predicate:
            return None

        if not group.requirements_met(text):
            return None

        if group.predicate:
            accepted = self.resolve_predicate(group.predicate)(scan, config, hit)
            if not accepted:
                return None
            return dict(accepted) if isinstance(accepted, Mapping) else {}
        return {}

    def _check_predicates(self) -> None:
        names = [group.predicate for group in self.taxonomy.groups]
        names += [safe.predicate for safe in self.taxonomy.suppressor.safe_rules]
        for name in filter(None, names):
            if not callable(getattr(self, name, None)):
                raise TaxonomyLoadError(f"{self.detector_id}: taxonomy names unknown predicate '{name}'")


@lru_cache(maxsize=256)
def _trusted_domain_expression(domain: str) -> Any:
    return compile_expression(f"https?://[^/]*{re2.escape(domain)}", ignore_case=True)


class TrustedDomainsMixin:
    """Safe-rule predicate for detectors with a ``trustedDomains`` setting."""

    def mentions_trusted_domain(self, scan: ScanInput, config: Mapping[str, Any], hit: RuleHit | None) -> bool:
        """True when a URL in the record points at a configured trusted domain."""
        for domain in config.get("trustedDomains") or ():
            if domain and _trusted_domain_expression(domain).search(scan.context):
                return True
        return False
