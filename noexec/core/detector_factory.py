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
Centralized detector construction.

Every entry point builds detectors through :func:`build_detectors` so that
registration order, which is also the order findings are reported in, is
defined in one place. Adding a detector only requires a taxonomy file, an
id in :class:`NoExecConstants`, and (when it needs code) an entry in
``_DETECTOR_CLASSES``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import lru_cache

from ..config.constants import NoExecConstants
from .detectors import (
    BaseDetector,
    BinaryDownloadExecuteDetector,
    CodeInjectionDetector,
    CredentialLeakDetector,
    DestructiveCommandsDetector,
    EnvVarLeakDetector,
    GitForceOperationsDetector,
    NetworkExfiltrationDetector,
    PackagePoisoningDetector,
)

logger = logging.getLogger(__name__)

_DETECTOR_CLASSES: dict[str, type[BaseDetector]] = {
    cls.detector_id: cls
    for cls in (
        DestructiveCommandsDetector,
        GitForceOperationsDetector,
        CredentialLeakDetector,
        EnvVarLeakDetector,
        BinaryDownloadExecuteDetector,
        PackagePoisoningDetector,
        NetworkExfiltrationDetector,
        CodeInjectionDetector,
    )
}


def build_detector(detector_id: str) -> BaseDetector:
    """Build one detector by its config id.

    Raises:
        KeyError: If *detector_id* is not a known detector
    """
    if detector_id not in NoExecConstants.DETECTOR_IDS:
        raise KeyError(f"Unknown detector: {detector_id}")
    cls = _DETECTOR_CLASSES.get(detector_id)
    if cls is not None:
        return cls()
    return BaseDetector(detector_id)


def build_detectors(detector_ids: Iterable[str] | None = None) -> list[BaseDetector]:
    """Build detectors in registration order.

    Args:
        detector_ids: Subset of ids to build. Defaults to all of them. The
            result follows registration order regardless of the order given.

    Returns:
        A list of detector instances
    """
    wanted = set(NoExecConstants.DETECTOR_IDS if detector_ids is None else detector_ids)
    unknown = wanted.difference(NoExecConstants.DETECTOR_IDS)
    if unknown:
        raise KeyError(f"Unknown detector: {', '.join(sorted(unknown))}")

    detectors = [build_detector(detector_id) for detector_id in NoExecConstants.DETECTOR_IDS if detector_id in wanted]
    logger.debug("Built %d detectors", len(detectors))
    return detectors


@lru_cache(maxsize=1)
def default_detectors() -> tuple[BaseDetector, ...]:
    """All detectors, built once per process and shared."""
    return tuple(build_detectors())
