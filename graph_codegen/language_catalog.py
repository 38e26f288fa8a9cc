"""
Built-in language configurations.

Each target language is described purely as data. Adding a language means
writing one more ``LanguageConfig`` and registering it; the traversal engine
does not change.
"""

from typing import Optional

from .language_config import LanguageConfig, LanguageRegistry, Formatting, DEFAULT_ESCAPES


C_STYLE_OPERATORS = {
    'add': '$left + $right',
    'subtract': '$left - $right',
    'multiply': '$left * $right',
    'divide': '$left / $right',
    'modulo': '$left % $right',
    'and': '$left && $right',
    'or': '$left || $right',
    'not': '!$value',
    'greater_than': '$left > $right',
    'less_than': '$left < $right',
    'equal': '$left == $right',
    'not_equal': '$left != $right',
}

BRACE_FORMATTING = Formatting(indent='    ', statement_end=';', block_start='{', block_end='}')


PYTHON = LanguageConfig(
    name='Python',
    file_extension='.py',
    syntax_id='python',
    statements={
        'if': 'if $condition:',
        'else': 'else:',
        'for': 'for $variable in range($start, $end, $step):',
        'while': 'while $condition:',
        'function_definition': 'def $name($parameters):',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': '$name = $value',
        'print': 'print($value)',
        'input': '$variable = input($prompt)',
    },
    operators=dict(C_STYLE_OPERATORS, **{
        'and': '$left and $right',
        'or': '$left or $right',
        'not': 'not $value',
    }),
    formatting=Formatting(indent='    ', empty_block='pass'),
    line_comment='# $comment',
    block_comment=('"""', '"""'),
    literals={'true': 'True', 'false': 'False', 'null': 'None'},
    aliases=('py', 'python3'),
)

JAVASCRIPT = LanguageConfig(
    name='JavaScript',
    file_extension='.js',
    syntax_id='javascript',
    statements={
        'if': 'if ($condition) {',
        'else': '} else {',
        'for': 'for (let $variable = $start; $variable < $end; $variable += $step) {',
        'while': 'while ($condition) {',
        'function_definition': 'function $name($parameters) {',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': 'let $name = $value',
        'print': 'console.log($value)',
        'input': 'let $variable = prompt($prompt)',
    },
    operators=dict(C_STYLE_OPERATORS, equal='$left === $right', not_equal='$left !== $right'),
    formatting=Formatting(indent='  ', statement_end=';', block_start='{', block_end='}'),
    line_comment='// $comment',
    block_comment=('/*', '*/'),
    aliases=('js', 'node'),
)

TYPESCRIPT = LanguageConfig(
    name='TypeScript',
    file_extension='.ts',
    syntax_id='typescript',
    statements={
        'if': 'if ($condition) {',
        'else': '} else {',
        'for': 'for (let $variable = $start; $variable < $end; $variable += $step) {',
        'while': 'while ($condition) {',
        'function_definition': 'function $name($parameters): any {',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': 'let $name: $type = $value',
        'print': 'console.log($value)',
        'input': 'let $variable: string = prompt($prompt) ?? ""',
    },
    operators=dict(C_STYLE_OPERATORS, equal='$left === $right', not_equal='$left !== $right'),
    formatting=Formatting(indent='  ', statement_end=';', block_start='{', block_end='}'),
    line_comment='// $comment',
    block_comment=('/*', '*/'),
    type_names={'int': 'number', 'float': 'number', 'string': 'string', 'boolean': 'boolean', 'any': 'any'},
    aliases=('ts',),
)

CPP = LanguageConfig(
    name='C++',
    file_extension='.cpp',
    syntax_id='cpp',
    statements={
        'if': 'if ($condition) {',
        'else': '} else {',
        'for': 'for (int $variable = $start; $variable < $end; $variable += $step) {',
        'while': 'while ($condition) {',
        'function_definition': 'auto $name = [&]($parameters) {',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': '$type $name = $value',
        'print': 'std::cout << $value << std::endl',
        'input': 'std::string $variable\nstd::cout << $prompt\nstd::getline(std::cin, $variable)',
    },
    operators=C_STYLE_OPERATORS,
    formatting=Formatting(indent='    ', statement_end=';', block_start='{', block_end='}',
                          body_indent=1, function_end='};'),
    line_comment='// $comment',
    block_comment=('/*', '*/'),
    literals={'true': 'true', 'false': 'false', 'null': 'nullptr'},
    type_names={'int': 'int', 'float': 'double', 'string': 'std::string', 'boolean': 'bool', 'any': 'auto'},
    standard_header=('#include <iostream>', '#include <string>', '', 'int main() {'),
    standard_footer=('    return 0;', '}'),
    aliases=('cpp', 'c++', 'cplusplus'),
)

JAVA = LanguageConfig(
    name='Java',
    file_extension='.java',
    syntax_id='java',
    statements={
        'if': 'if ($condition) {',
        'else': '} else {',
        'for': 'for (int $variable = $start; $variable < $end; $variable += $step) {',
        'while': 'while ($condition) {',
        'function_definition': 'static void $name($parameters) {',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': '$type $name = $value',
        'print': 'System.out.println($value)',
        'input': 'System.out.print($prompt)\nString $variable = scanner.nextLine()',
    },
    operators=C_STYLE_OPERATORS,
    formatting=Formatting(indent='    ', statement_end=';', block_start='{', block_end='}', body_indent=2),
    line_comment='// $comment',
    block_comment=('/*', '*/'),
    multiline_strings='concat',
    type_names={'int': 'int', 'float': 'double', 'string': 'String', 'boolean': 'boolean', 'any': 'var'},
    standard_header=(
        'import java.util.Scanner;',
        'import java.io.*;',
        'import java.util.*;',
        '',
        'public class GeneratedCode {',
        '    private static Scanner scanner = new Scanner(System.in);',
        '',
        '    public static void main(String[] args) {',
    ),
    standard_footer=('    }', '}'),
)

GO = LanguageConfig(
    name='Go',
    file_extension='.go',
    syntax_id='go',
    statements={
        'if': 'if $condition {',
        'else': '} else {',
        'for': 'for $variable := $start; $variable < $end; $variable += $step {',
        'while': 'for $condition {',
        'function_definition': '$name := func($parameters) {',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': '$name := $value',
        'assignment': '$name = $value',
        'print': 'fmt.Println($value)',
        'input': "fmt.Print($prompt)\n$variable, _ := reader.ReadString('\\n')\n$variable = strings.TrimSpace($variable)",
    },
    operators=C_STYLE_OPERATORS,
    formatting=Formatting(indent='\t', block_start='{', block_end='}', body_indent=1),
    line_comment='// $comment',
    block_comment=('/*', '*/'),
    literals={'true': 'true', 'false': 'false', 'null': 'nil'},
    standard_header=(
        'package main',
        '',
        'import (',
        '\t"bufio"',
        '\t"fmt"',
        '\t"os"',
        '\t"strings"',
        ')',
        '',
        'func main() {',
        '\treader := bufio.NewReader(os.Stdin)',
    ),
    standard_footer=('}',),
    aliases=('golang',),
)

RUST = LanguageConfig(
    name='Rust',
    file_extension='.rs',
    syntax_id='rust',
    statements={
        'if': 'if $condition {',
        'else': '} else {',
        'for': 'for $variable in ($start..$end).step_by($step as usize) {',
        'while': 'while $condition {',
        'function_definition': 'fn $name($parameters) {',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': 'let mut $name = $value',
        'print': 'println!("{}", $value)',
        'input': '\n'.join((
            'print!("{}", $prompt)',
            'io::stdout().flush().unwrap()',
            'let mut $variable = String::new()',
            'io::stdin().read_line(&mut $variable).unwrap()',
            'let $variable = $variable.trim().to_string()',
        )),
    },
    operators=C_STYLE_OPERATORS,
    formatting=Formatting(indent='    ', statement_end=';', block_start='{', block_end='}', body_indent=1),
    line_comment='// $comment',
    block_comment=('/*', '*/'),
    literals={'true': 'true', 'false': 'false', 'null': 'None'},
    standard_header=('use std::io::{self, Write};', '', 'fn main() {'),
    standard_footer=('}',),
    aliases=('rs',),
)

LUA = LanguageConfig(
    name='Lua',
    file_extension='.lua',
    syntax_id='lua',
    statements={
        'if': 'if $condition then',
        'else': 'else',
        'for': 'for $variable = $start, $end - 1, $step do',
        'while': 'while $condition do',
        'function_definition': 'local function $name($parameters)',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': 'local $name = $value',
        'print': 'print($value)',
        'input': 'io.write($prompt)\nlocal $variable = io.read()',
    },
    operators=dict(C_STYLE_OPERATORS, **{
        'and': '$left and $right',
        'or': '$left or $right',
        'not': 'not $value',
        'not_equal': '$left ~= $right',
    }),
    formatting=Formatting(indent='    ', block_end='end'),
    line_comment='-- $comment',
    block_comment=('--[[', ']]'),
    literals={'true': 'true', 'false': 'false', 'null': 'nil'},
    multiline_strings='concat',
    string_concat='$left .. $right',
)

RUBY = LanguageConfig(
    name='Ruby',
    file_extension='.rb',
    syntax_id='ruby',
    statements={
        'if': 'if $condition',
        'else': 'else',
        'for': '($start...$end).step($step) do |$variable|',
        'while': 'while $condition',
        'function_definition': 'def $name($parameters)',
        'function_call': '$name($arguments)',
        'return': 'return $value',
        'variable_definition': '$name = $value',
        'print': 'puts $value',
        'input': 'print $prompt\n$variable = gets.chomp',
    },
    operators=C_STYLE_OPERATORS,
    formatting=Formatting(indent='  ', block_end='end'),
    line_comment='# $comment',
    block_comment=('=begin', '=end'),
    literals={'true': 'true', 'false': 'false', 'null': 'nil'},
    escapes=dict(DEFAULT_ESCAPES, **{'#': '\\#'}),
    aliases=('rb',),
)


BUILTIN_LANGUAGES = (PYTHON, JAVASCRIPT, TYPESCRIPT, CPP, JAVA, GO, RUST, LUA, RUBY)


def build_default_language_registry(default_language: Optional[str] = None) -> LanguageRegistry:
    """Create a registry holding every built-in language."""
    registry = LanguageRegistry(default_language or PYTHON.name)
    for config in BUILTIN_LANGUAGES:
        registry.register(config)
    return registry
