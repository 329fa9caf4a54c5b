# Copyright 2026 TIER IV, inc.
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

"""Configuration management for the record validator."""

import os
import logging
from dataclasses import dataclass
from pathlib import Path

from .utils.logging_utils import configure_report_logging, level_from_name

ENV_PREFIX = "CTG_VALIDATOR_"


@dataclass
class ValidatorConfig:
    """Configuration class for validating a dataset checkout."""
    log_level: str = "INFO"
    print_level: str = "WARNING"
    cache_enabled: bool = False
    jobs: int = 1

    # paths; relative ones resolve against data_root
    data_root: str = "../closing-the-gap"
    keywords_file: str = "KEYWORDS/KEYWORDS.json"
    index_file: str = "PROJECTS.json"
    template_file: str = "TEMPLATES/project.json"

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        defaults = cls()
        return cls(
            log_level=os.getenv(f'{ENV_PREFIX}LOG_LEVEL', defaults.log_level),
            print_level=os.getenv(f'{ENV_PREFIX}PRINT_LEVEL', defaults.print_level),
            cache_enabled=os.getenv(f'{ENV_PREFIX}CACHE_ENABLED', 'false').lower() == 'true',
            jobs=max(1, int(os.getenv(f'{ENV_PREFIX}JOBS', str(defaults.jobs)))),
            data_root=os.getenv(f'{ENV_PREFIX}DATA_ROOT', defaults.data_root),
            keywords_file=os.getenv(f'{ENV_PREFIX}KEYWORDS_FILE', defaults.keywords_file),
            index_file=os.getenv(f'{ENV_PREFIX}INDEX_FILE', defaults.index_file),
            template_file=os.getenv(f'{ENV_PREFIX}TEMPLATE_FILE', defaults.template_file),
        )

    def resolve(self, path: str) -> Path:
        """Resolve a configured path against the data root."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return Path(self.data_root).expanduser() / candidate

    @property
    def keywords_path(self) -> Path:
        return self.resolve(self.keywords_file)

    @property
    def index_path(self) -> Path:
        return self.resolve(self.index_file)

    @property
    def template_path(self) -> Path:
        return self.resolve(self.template_file)

    def set_logging(self, machine_output: bool = False) -> logging.Logger:
        """Setup logging based on configuration.

        Args:
            machine_output: Send every record to stderr; stdout carries
                only the report
        """
        level = level_from_name(self.log_level, logging.INFO)
        stderr_level = level_from_name(self.print_level, logging.WARNING)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        configure_report_logging(
            level=level,
            stderr_level=stderr_level,
            formatter=formatter,
            machine_output=machine_output,
        )

        return logging.getLogger('ctg_record_validator')
