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

"""noexec exceptions.

This module defines custom exceptions for noexec operations.
All exceptions inherit from NoExecError for easy catching.

Example:
    >>> from noexec.core.engine import analyze_input
    >>> from noexec.core.exceptions import ConfigValidationError, InputParseError
    >>> from noexec.config.configuration import Configuration
    >>>
    >>> try:
    ...     config = Configuration.from_override(user_overrides)
    ...     findings = analyze_input(raw_hook_payload, config)
    ... except ConfigValidationError as e:
    ...     print(f"Bad configuration at {e.path}: {e}")
    ... except InputParseError as e:
    ...     print(f"Input is not analyzable: {e}")
"""


class NoExecError(Exception):
    """Base exception for all noexec errors."""

    pass


class ConfigValidationError(NoExecError):
    """Raised when a configuration mapping fails validation.

    This can indicate:
    - Missing ``detectors`` or ``globalSettings`` sections
    - Unknown detector ids
    - Wrongly typed detector fields (``enabled``, ``minEntropy``, lists)
    - Invalid severity names

    The dotted location of the offending field is kept on ``path``
    (``None`` when the root object itself is malformed).
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class InputParseError(NoExecError):
    """Raised when a raw hook payload cannot be analyzed.

    This typically indicates:
    - Malformed JSON
    - A top-level value that is not an object
    - Input longer than the configured maximum length

    It means "not analyzable", which callers must not confuse with
    "no findings".
    """

    pass


class TaxonomyLoadError(NoExecError):
    """Raised when a packaged taxonomy file is missing or malformed."""

    pass
