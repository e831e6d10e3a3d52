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
noexec - attack-pattern classification for shell commands run by coding agents.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"

__author__ = "Cisco Systems, Inc."


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Importing the package does not compile any taxonomy; that happens the
    first time a detector is built.
    """
    _lazy_map = {
        "NoExecConstants": (".config.constants", "NoExecConstants"),
        "Configuration": (".config.configuration", "Configuration"),
        "deep_merge": (".config.configuration", "deep_merge"),
        "load_default_config": (".config.configuration", "load_default_config"),
        "validate_config": (".config.validator", "validate_config"),
        "EngineSettings": (".config.settings", "EngineSettings"),
        "Finding": (".core.models", "Finding"),
        "Severity": (".core.models", "Severity"),
        "NoExecError": (".core.exceptions", "NoExecError"),
        "ConfigValidationError": (".core.exceptions", "ConfigValidationError"),
        "InputParseError": (".core.exceptions", "InputParseError"),
        "TaxonomyLoadError": (".core.exceptions", "TaxonomyLoadError"),
        "build_detectors": (".core.detector_factory", "build_detectors"),
        "analyze": (".core.engine", "analyze"),
        "analyze_input": (".core.engine", "analyze_input"),
        "filter_by_min_severity": (".core.engine", "filter_by_min_severity"),
        "should_block": (".core.engine", "should_block"),
        "ExitCode": (".core.engine", "ExitCode"),
        "find_typosquat": (".core.typosquat", "find_typosquat"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "analyze",
    "analyze_input",
    "filter_by_min_severity",
    "should_block",
    "ExitCode",
    "build_detectors",
    "Finding",
    "Severity",
    "Configuration",
    "deep_merge",
    "load_default_config",
    "validate_config",
    "EngineSettings",
    "NoExecConstants",
    "find_typosquat",
    "NoExecError",
    "ConfigValidationError",
    "InputParseError",
    "TaxonomyLoadError",
]
