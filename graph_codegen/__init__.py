"""
Graph Codegen - multi-language source generation from visual node graphs.

This package turns a graph of computation nodes (branches, loops, arithmetic,
logic, variables, I/O, functions) into source code for any registered target
language, driven entirely by per-language configuration data.
"""

__version__ = "0.1.0"
__author__ = "Graph Codegen Development Team"

from .sockets import Socket, SocketType, SocketDirection, create_socket, are_compatible
from .models import Graph, GraphNode, Edge, NodeKind
from .exceptions import GraphCodegenError, LanguageConfigError, RegistryError, GraphFormatError
from .config import CodegenSettings, configure_logging, resolve_setting

# Languages
from .language_config import LanguageConfig, LanguageRegistry, Formatting
from .language_catalog import BUILTIN_LANGUAGES, build_default_language_registry

# Nodes
from .node_registry import NodeRegistry, NodeSpec, NodeCategory, build_default_registry

# Validation and generation
from .graph_validator import GraphValidator, ValidationResult, ValidationIssue, IssueType, validate
from .code_generator import (
    CodeGenerator, GenerationSession, GenerationResult, find_entry_points, generate_code
)
