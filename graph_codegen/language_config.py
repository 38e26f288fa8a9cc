"""
Language configuration for the graph code generator.

A ``LanguageConfig`` is pure data: statement templates with ``$placeholder``
slots, operator templates, block and statement formatting, literal spellings,
string escapes and the boilerplate that opens and closes a program. The
traversal engine never branches on the target language; everything
language-specific flows through one of these records.

Placeholders understood by the built-in node handlers:
``$condition``, ``$variable``, ``$start``, ``$end``, ``$step``, ``$name``,
``$value``, ``$left``, ``$right``, ``$parameters``, ``$arguments``,
``$prompt``, ``$type``.
"""

import logging
import math
from dataclasses import dataclass, field
from string import Template
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .exceptions import LanguageConfigError


REQUIRED_STATEMENTS = (
    'if', 'else', 'for', 'while', 'function_definition', 'function_call',
    'return', 'variable_definition', 'print', 'input',
)

REQUIRED_OPERATORS = (
    'add', 'subtract', 'multiply', 'divide', 'and', 'or',
    'greater_than', 'less_than', 'equal', 'not_equal',
)

DEFAULT_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}


def substitute(template: str, **values: str) -> str:
    """Fill ``$placeholders`` in a template, leaving unknown ones untouched."""
    return Template(template).safe_substitute(values)


@dataclass(frozen=True)
class Formatting:
    """Layout rules for statements and blocks."""
    indent: str = '    '
    statement_end: str = ''
    block_start: str = ''
    block_end: str = ''
    # indent depth of the program body (deeper when a main wrapper is open)
    body_indent: int = 0
    # statement emitted into an otherwise empty block, e.g. ``pass``
    empty_block: str = ''
    # closes a function body when it differs from ``block_end``
    function_end: Optional[str] = None


@dataclass(frozen=True)
class LanguageConfig:
    """Everything the generator needs to know about one target language."""
    name: str
    file_extension: str
    syntax_id: str
    statements: Mapping[str, str]
    operators: Mapping[str, str]
    formatting: Formatting = field(default_factory=Formatting)
    line_comment: str = '# $comment'
    block_comment: Optional[Tuple[str, str]] = None
    literals: Mapping[str, str] = field(default_factory=lambda: {'true': 'true', 'false': 'false', 'null': 'null'})
    escapes: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_ESCAPES))
    string_quote: str = '"'
    # 'escape' keeps one literal with \n escapes, 'concat' joins one literal per line
    multiline_strings: str = 'escape'
    string_concat: str = '$left + $right'
    type_names: Mapping[str, str] = field(default_factory=dict)
    standard_header: Tuple[str, ...] = ()
    standard_footer: Tuple[str, ...] = ()
    # when False, expression nodes are bound to temporaries before use
    inline_expressions: bool = False
    aliases: Tuple[str, ...] = ()

    def __post_init__(self):
        for attr in ('statements', 'operators', 'literals', 'escapes', 'type_names'):
            object.__setattr__(self, attr, MappingProxyType(dict(getattr(self, attr))))
        object.__setattr__(self, 'standard_header', tuple(self.standard_header))
        object.__setattr__(self, 'standard_footer', tuple(self.standard_footer))
        object.__setattr__(self, 'aliases', tuple(self.aliases))

        missing = [key for key in REQUIRED_STATEMENTS if key not in self.statements]
        if missing:
            raise LanguageConfigError(
                f"Language {self.name} is missing statement templates: {', '.join(missing)}",
                self.name, {'missing_statements': missing}
            )
        missing = [key for key in REQUIRED_OPERATORS if key not in self.operators]
        if missing:
            raise LanguageConfigError(
                f"Language {self.name} is missing operator templates: {', '.join(missing)}",
                self.name, {'missing_operators': missing}
            )
        if self.multiline_strings not in ('escape', 'concat'):
            raise LanguageConfigError(
                f"Unknown multiline string strategy: {self.multiline_strings}", self.name
            )

    # Templates

    def statement(self, key: str) -> str:
        """Return a statement template; ``assignment`` defaults to ``$name = $value``."""
        if key == 'assignment':
            return self.statements.get('assignment', '$name = $value')
        return self.statements[key]

    def operator(self, key: str) -> Optional[str]:
        return self.operators.get(key)

    def type_name(self, hint: str) -> str:
        """Map an inferred value type (int, float, string, boolean, any) to a type name."""
        return self.type_names.get(hint, self.type_names.get('any', ''))

    @property
    def function_end(self) -> str:
        if self.formatting.function_end is not None:
            return self.formatting.function_end
        return self.formatting.block_end

    # Comments

    def comment(self, text: str) -> List[str]:
        """Render text as line comments, one per line of text."""
        return [substitute(self.line_comment, comment=line).rstrip() for line in str(text).split('\n')]

    def multiline_comment(self, text: str) -> List[str]:
        """Render text with the block comment pair, or line comments without one."""
        if self.block_comment is None:
            return self.comment(text)
        opening, closing = self.block_comment
        return [opening] + str(text).split('\n') + [closing]

    # Literals

    def render_bool(self, value: bool) -> str:
        return self.literals['true'] if value else self.literals['false']

    def render_null(self) -> str:
        return self.literals['null']

    def render_number(self, value: Any) -> str:
        """Render a number, keeping integers integral and decimals decimal."""
        if isinstance(value, bool):
            return self.render_bool(value)
        if isinstance(value, int):
            return str(value)
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            logging.getLogger(__name__).debug("Non-finite number %r rendered as 0", value)
            return '0'
        return repr(value)

    def quote_string(self, text: str) -> str:
        """Render text as a string literal using this language's escapes."""
        if '\n' in text and self.multiline_strings == 'concat':
            pieces = text.split('\n')
            parts = [self._quote(piece + '\n') for piece in pieces[:-1]]
            if pieces[-1]:
                parts.append(self._quote(pieces[-1]))
            result = parts[0]
            for part in parts[1:]:
                result = substitute(self.string_concat, left=result, right=part)
            return result
        return self._quote(text)

    def _quote(self, text: str) -> str:
        escaped = ''.join(self.escapes.get(ch, ch) for ch in text)
        return f"{self.string_quote}{escaped}{self.string_quote}"

    def render_literal(self, value: Any) -> str:
        """Render a Python value as a literal of this language."""
        if value is None:
            return self.render_null()
        if isinstance(value, bool):
            return self.render_bool(value)
        if isinstance(value, (int, float)):
            return self.render_number(value)
        return self.quote_string(str(value))

    def describe(self) -> Dict[str, Any]:
        """Summary used by the HTTP adapter's language listing."""
        return {
            'name': self.name,
            'file_extension': self.file_extension,
            'syntax_id': self.syntax_id,
            'aliases': list(self.aliases),
        }


class LanguageRegistry:
    """Name-indexed set of language configurations.

    Lookups are case-insensitive and honour each config's aliases. Unknown
    names resolve to the registry's default language.
    """

    def __init__(self, default_language: str = 'Python'):
        self.logger = logging.getLogger(__name__)
        self.default_language = default_language
        self._configs: Dict[str, LanguageConfig] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, config: LanguageConfig, replace: bool = False) -> LanguageConfig:
        """Register a configuration under its name and aliases."""
        key = config.name.lower()
        if key in self._configs and not replace:
            raise LanguageConfigError(f"Language {config.name} is already registered", config.name)
        self._configs[key] = config
        for alias in config.aliases:
            self._aliases[alias.lower()] = key
        self.logger.debug("Registered language %s", config.name)
        return config

    def get(self, name: Optional[str]) -> Optional[LanguageConfig]:
        if not name:
            return None
        key = str(name).strip().lower()
        key = self._aliases.get(key, key)
        return self._configs.get(key)

    def resolve(self, name: Optional[str]) -> Tuple[LanguageConfig, bool]:
        """Return the config for ``name`` and whether the default was substituted."""
        config = self.get(name)
        if config is not None:
            return config, False
        fallback = self.get(self.default_language)
        if fallback is None:
            if not self._configs:
                raise LanguageConfigError("No languages registered", str(name))
            fallback = next(iter(self._configs.values()))
        self.logger.info("Unknown language %r, using %s", name, fallback.name)
        return fallback, True

    def names(self) -> List[str]:
        return [config.name for config in self._configs.values()]

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[LanguageConfig]:
        return iter(list(self._configs.values()))

    def __len__(self) -> int:
        return len(self._configs)
