"""
Unit tests for language configurations and the language registry.
"""

import dataclasses
import pytest
from hypothesis import given, strategies as st
from graph_codegen.exceptions import LanguageConfigError
from graph_codegen.language_catalog import (
    BUILTIN_LANGUAGES, PYTHON, JAVA, LUA, RUBY, GO, CPP, build_default_language_registry
)
from graph_codegen.language_config import LanguageConfig, LanguageRegistry, substitute


class TestLanguageConfig:
    """Test cases for LanguageConfig."""

    def test_builtin_configs_are_complete(self):
        """Every built-in language carries the required templates."""
        for config in BUILTIN_LANGUAGES:
            for key in ('if', 'else', 'for', 'while', 'print', 'input', 'variable_definition'):
                assert config.statement(key)
            assert config.file_extension.startswith('.')
            assert config.syntax_id

    def test_missing_statement_raises(self):
        """A config without a required statement template is rejected."""
        statements = {k: v for k, v in PYTHON.statements.items() if k != 'print'}
        with pytest.raises(LanguageConfigError) as exc:
            dataclasses.replace(PYTHON, name='Broken', statements=statements)
        assert exc.value.language == 'Broken'
        assert exc.value.details['missing_statements'] == ['print']

    def test_missing_operator_raises(self):
        operators = {k: v for k, v in PYTHON.operators.items() if k != 'add'}
        with pytest.raises(LanguageConfigError):
            dataclasses.replace(PYTHON, operators=operators)

    def test_config_mappings_are_read_only(self):
        """Configurations cannot be mutated after construction."""
        with pytest.raises(TypeError):
            PYTHON.statements['print'] = 'echo $value'
        with pytest.raises(dataclasses.FrozenInstanceError):
            PYTHON.name = 'Other'

    def test_assignment_defaults(self):
        """Languages without an assignment template assign with '='."""
        assert PYTHON.statement('assignment') == '$name = $value'
        assert GO.statement('variable_definition') == '$name := $value'

    def test_function_end_defaults_to_block_end(self):
        assert GO.function_end == '}'
        assert CPP.function_end == '};'
        assert PYTHON.function_end == ''

    def test_comments(self):
        """Line comments use each language's own token."""
        assert PYTHON.comment('hello') == ['# hello']
        assert LUA.comment('a\nb') == ['-- a', '-- b']
        assert JAVA.multiline_comment('a\nb') == ['/*', 'a', 'b', '*/']


class TestLiteralRendering:
    """Test cases for literal rendering."""

    def test_booleans_and_null(self):
        assert PYTHON.render_literal(True) == 'True'
        assert JAVA.render_literal(False) == 'false'
        assert GO.render_literal(None) == 'nil'

    def test_numbers_keep_integer_or_decimal_form(self):
        assert PYTHON.render_number(10) == '10'
        assert PYTHON.render_number(10.0) == '10.0'
        assert PYTHON.render_number(2.5) == '2.5'
        assert PYTHON.render_number(float('nan')) == '0'

    def test_quote_escapes(self):
        """Quotes, backslashes and newlines are escaped."""
        assert PYTHON.quote_string('say "hi"\n') == '"say \\"hi\\"\\n"'
        assert PYTHON.quote_string('C:\\temp') == '"C:\\\\temp"'

    def test_ruby_escapes_interpolation(self):
        assert RUBY.quote_string('#{x}') == '"\\#{x}"'

    def test_multiline_concatenation(self):
        """Java joins one literal per line; Python keeps one escaped literal."""
        assert JAVA.quote_string('a\nb') == '"a\\n" + "b"'
        assert PYTHON.quote_string('a\nb') == '"a\\nb"'

    def test_multiline_concatenation_uses_language_operator(self):
        assert LUA.quote_string('a\nb') == '"a\\n" .. "b"'
        assert LUA.quote_string('a\n') == '"a\\n"'


class TestLanguageRegistry:
    """Test cases for LanguageRegistry."""

    def setup_method(self):
        self.registry = build_default_language_registry()

    def test_lookup_is_case_insensitive(self):
        assert self.registry.get('python') is PYTHON
        assert self.registry.get('JAVA') is JAVA

    def test_aliases(self):
        assert self.registry.get('py') is PYTHON
        assert self.registry.get('c++') is CPP
        assert self.registry.get('golang') is GO

    def test_unknown_language_falls_back(self):
        """Unknown names resolve to the default language."""
        config, fallback = self.registry.resolve('klingon')
        assert config is PYTHON
        assert fallback is True

        config, fallback = self.registry.resolve('Java')
        assert config is JAVA
        assert fallback is False

    def test_custom_default(self):
        registry = build_default_language_registry('Go')
        assert registry.resolve(None)[0] is GO

    def test_duplicate_registration_raises(self):
        with pytest.raises(LanguageConfigError):
            self.registry.register(PYTHON)

    def test_replace_registration(self):
        custom = dataclasses.replace(PYTHON, inline_expressions=True)
        self.registry.register(custom, replace=True)
        assert self.registry.get('Python') is custom

    def test_empty_registry_cannot_resolve(self):
        with pytest.raises(LanguageConfigError):
            LanguageRegistry().resolve('Python')

    def test_names_keep_registration_order(self):
        assert self.registry.names() == [c.name for c in BUILTIN_LANGUAGES]
        assert len(self.registry) == len(BUILTIN_LANGUAGES)
        assert 'rust' in self.registry


@given(st.text(alphabet=st.characters(blacklist_categories=('Cs',)), max_size=40))
def test_quoted_strings_escape_every_special_character(text):
    """Property test: the body of a quoted literal never contains a raw quote or newline."""
    rendered = PYTHON.quote_string(text)
    body = rendered[1:-1]

    assert rendered.startswith('"') and rendered.endswith('"')
    assert '\n' not in body
    assert body.replace('\\\\', '').replace('\\"', '').count('"') == 0


def test_substitute_leaves_unknown_placeholders():
    assert substitute('$name = $value', name='x') == 'x = $value'
