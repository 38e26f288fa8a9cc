"""
Runtime settings for the graph code generator.

Settings resolve in two tiers: an environment variable when it is set and
non-empty, otherwise the hard-coded default.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_LANGUAGE_ENV = 'GRAPH_CODEGEN_DEFAULT_LANGUAGE'
HEADER_TEMPLATE_ENV = 'GRAPH_CODEGEN_HEADER'
LOG_LEVEL_ENV = 'GRAPH_CODEGEN_LOG_LEVEL'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_setting(env_var: str, default: str) -> str:
    """Two-tier resolution: env -> default."""
    # 1. Environment variable
    env_val = os.environ.get(env_var, '').strip()
    if env_val:
        return env_val
    # 2. Hard-coded default
    return default


@dataclass
class CodegenSettings:
    """Tunable behaviour of a ``CodeGenerator``."""
    default_language: str = 'Python'
    # formatted with the target language's display name
    header_template: str = 'Generated {language} code'
    empty_graph_message: str = 'No nodes in the graph'
    log_level: str = 'WARNING'

    @classmethod
    def from_env(cls) -> 'CodegenSettings':
        defaults = cls()
        return cls(
            default_language=resolve_setting(DEFAULT_LANGUAGE_ENV, defaults.default_language),
            header_template=resolve_setting(HEADER_TEMPLATE_ENV, defaults.header_template),
            log_level=resolve_setting(LOG_LEVEL_ENV, defaults.log_level),
        )

    def header_for(self, language_name: str) -> str:
        return self.header_template.replace('{language}', language_name)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for command-line and server use."""
    level_name = (level or resolve_setting(LOG_LEVEL_ENV, 'WARNING')).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=LOG_FORMAT
    )
