# --- Tree-sitter plumbing ----------------------------------------------------
from enum import Enum


class NodeKind(Enum):
    CALL = "call"
    CONSTRUCTION = "construction"
    ASSIGNMENT = "assignment"
    SCOPE = "scope"
    IMPORT = "import"
    OTHER = "other"


# tree-sitter-php node types for each kind. Older grammar releases used a few
# different names, so both spellings are listed where they differ.
_KIND_BY_TYPE = {
    "scoped_call_expression": NodeKind.CALL,
    "object_creation_expression": NodeKind.CONSTRUCTION,
    "assignment_expression": NodeKind.ASSIGNMENT,
    "function_definition": NodeKind.SCOPE,
    "method_declaration": NodeKind.SCOPE,
    "anonymous_function": NodeKind.SCOPE,
    "anonymous_function_creation_expression": NodeKind.SCOPE,
    "arrow_function": NodeKind.SCOPE,
    "namespace_use_declaration": NodeKind.IMPORT,
}

CLASS_REFERENCE_TYPES = ("name", "qualified_name")

NAMESPACE_SEPARATOR = "\\"


def node_kind(node) -> NodeKind:
    return _KIND_BY_TYPE.get(node.type, NodeKind.OTHER)


def node_text(source_bytes: bytes, node) -> str:
    """
    Converts a node's [start_byte:end_byte] into the corresponding string.
    Tree-sitter nodes only store byte offsets, so we slice the original source.
    """
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def node_point(node) -> tuple[int, int]:
    """
    Returns the (line, column) of a node's start in 0-based coordinates.
    Handy for displaying where a call was found.
    """
    return (node.start_point[0], node.start_point[1])


def strip_leading_separator(name: str) -> str:
    return name.lstrip(NAMESPACE_SEPARATOR)


def short_name(fqn: str) -> str:
    """`App\\Events\\OrderShipped` -> `OrderShipped`"""
    return fqn.rsplit(NAMESPACE_SEPARATOR, 1)[-1]
