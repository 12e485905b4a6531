from typing import Iterable, Optional

from loguru import logger

from event_visualizer.models.ast_models import ImportAlias
from event_visualizer.tree_sitter_helpers import (
    NAMESPACE_SEPARATOR,
    NodeKind,
    node_kind,
    node_text,
    short_name,
    strip_leading_separator,
)

UseDeclaration = tuple[str, Optional[str]]  # (fully-qualified name, alias)

_USE_CLAUSE_TYPES = ("namespace_use_clause", "namespace_use_group_clause")
_USE_NAME_TYPES = ("name", "qualified_name", "namespace_name")
_USE_KEYWORDS = ("use", "function", "const")


# --- Import table ------------------------------------------------------------

def import_aliases(declarations: Iterable[UseDeclaration]) -> list[ImportAlias]:
    aliases = []
    for fqn, alias in declarations:
        normalized = strip_leading_separator(fqn.strip())
        if not normalized:
            continue
        aliases.append(ImportAlias(alias=alias or short_name(normalized),
                                   fully_qualified_name=normalized))
    return aliases


def build_import_table(declarations: Iterable[UseDeclaration]) -> dict[str, str]:
    """
    Maps each alias to its fully-qualified name. A later `use` that reuses an
    alias overwrites the earlier one.
    """
    table: dict[str, str] = {}
    for entry in import_aliases(declarations):
        table[entry.alias] = entry.fully_qualified_name
    logger.debug(f"Import table: {table}")
    return table


# --- Reading `use` declarations from the tree --------------------------------

def read_use_declarations(source_bytes: bytes, root) -> list[UseDeclaration]:
    """
    Pulls (fqn, alias) pairs out of the unit's top-level `use` statements, in
    source order. Only class imports count: `use function` / `use const` are
    skipped, and so are trait `use` statements inside class bodies.
    """
    declarations: list[UseDeclaration] = []
    for node in _top_level_statements(root):
        if node_kind(node) is NodeKind.IMPORT and not _is_function_or_const_use(node):
            declarations.extend(_read_use_declaration(source_bytes, node))
    return declarations


def _top_level_statements(root):
    for child in root.children:
        yield child
        # namespace Foo { use ...; }
        if child.type == "namespace_definition":
            body = child.child_by_field_name("body")
            if body is not None:
                yield from body.children


def _is_function_or_const_use(node) -> bool:
    for child in node.children:
        if child.type in ("function", "const"):
            return True
        if child.type in _USE_CLAUSE_TYPES or child.type == "namespace_use_group":
            break
    return False


def _read_use_declaration(source_bytes: bytes, node) -> list[UseDeclaration]:
    prefix_start = None
    found = []
    for child in node.children:
        if child.type in _USE_KEYWORDS:
            continue
        if prefix_start is None:
            prefix_start = child.start_byte
        if child.type in _USE_CLAUSE_TYPES:
            found.append(_read_use_clause(source_bytes, child))
        elif child.type == "namespace_use_group":
            # use App\Events\{OrderShipped, OrderPaid as Paid};
            prefix = source_bytes[prefix_start:child.start_byte].decode("utf-8", errors="replace").strip()
            for clause in child.children:
                if clause.type in _USE_CLAUSE_TYPES:
                    target, alias = _read_use_clause(source_bytes, clause)
                    if target and prefix:
                        target = strip_leading_separator(prefix).rstrip(NAMESPACE_SEPARATOR) \
                            + NAMESPACE_SEPARATOR + strip_leading_separator(target)
                    found.append((target, alias))
    return [(target, alias) for target, alias in found if target]


def _read_use_clause(source_bytes: bytes, clause) -> tuple[Optional[str], Optional[str]]:
    target = None
    alias_node = clause.child_by_field_name("alias")
    alias = node_text(source_bytes, alias_node) if alias_node is not None else None
    seen_as = False
    for child in clause.children:
        if child.type in ("function", "const"):
            # use function App\Support\dispatch; (the keyword can sit on the clause)
            return None, None
        if child.type == "namespace_aliasing_clause":
            for part in child.named_children:
                if part.type == "name":
                    alias = node_text(source_bytes, part)
        elif child.type == "as":
            seen_as = True
        elif child.type in _USE_NAME_TYPES:
            if seen_as:
                alias = alias or node_text(source_bytes, child)
            elif target is None:
                target = node_text(source_bytes, child)
    return target, alias
