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
Detector modules, one per attack category.

Detectors whose behavior is fully described by their taxonomy use
:class:`BaseDetector` directly; the classes below add predicates or
configuration-driven rules.
"""

from .base import BaseDetector, TrustedDomainsMixin
from .binary_download_execute import BinaryDownloadExecuteDetector
from .code_injection import CodeInjectionDetector
from .credential_leak import CredentialLeakDetector
from .destructive_commands import DestructiveCommandsDetector
from .env_var_leak import EnvVarLeakDetector
from .git_force_operations import GitForceOperationsDetector
from .network_exfiltration import NetworkExfiltrationDetector
from .package_poisoning import PackagePoisoningDetector

__all__ = [
    "BaseDetector",
    "TrustedDomainsMixin",
    "BinaryDownloadExecuteDetector",
    "CodeInjectionDetector",
    "CredentialLeakDetector",
    "DestructiveCommandsDetector",
    "EnvVarLeakDetector",
    "GitForceOperationsDetector",
    "NetworkExfiltrationDetector",
    "PackagePoisoningDetector",
]
