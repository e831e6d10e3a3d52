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
Engine settings for noexec.

These are process-level knobs that sit outside the detector configuration:
how verbose the library logs and how large an input it agrees to parse.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .constants import NoExecConstants

logger = logging.getLogger(__name__)


@dataclass
class EngineSettings:
    """
    Settings for the classification engine.

    Values left at their defaults are taken from ``NOEXEC_*`` environment
    variables when those are set.
    """

    log_level: str = NoExecConstants.DEFAULT_LOG_LEVEL
    max_input_length: int = NoExecConstants.DEFAULT_MAX_INPUT_LENGTH

    def __post_init__(self):
        """Load settings from environment variables if not provided."""

        if self.log_level == NoExecConstants.DEFAULT_LOG_LEVEL:
            if env_level := os.getenv(NoExecConstants.ENV_LOG_LEVEL):
                self.log_level = env_level
        self.log_level = self.log_level.strip().upper()

        if self.max_input_length == NoExecConstants.DEFAULT_MAX_INPUT_LENGTH:
            if env_length := os.getenv(NoExecConstants.ENV_MAX_INPUT_LENGTH):
                try:
                    self.max_input_length = int(env_length)
                except ValueError:
                    logger.warning(
                        "Ignoring %s=%r: not an integer", NoExecConstants.ENV_MAX_INPUT_LENGTH, env_length
                    )

        if self.max_input_length <= 0:
            raise ValueError(f"max_input_length must be positive, got {self.max_input_length}")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """
        Create settings from environment variables.

        Returns:
            EngineSettings instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "EngineSettings":
        """
        Load settings from a .env file.

        Variables already present in the environment win over the file.

        Args:
            config_file: Path to .env file

        Returns:
            EngineSettings instance
        """
        if Path(config_file).exists():
            load_dotenv(config_file, override=False)
        return cls.from_env()

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the ``noexec`` logger hierarchy."""
        level = logging.getLevelName(self.log_level)
        if not isinstance(level, int):
            logger.warning("Unknown log level '%s', keeping current level", self.log_level)
            return
        logging.getLogger("noexec").setLevel(level)
