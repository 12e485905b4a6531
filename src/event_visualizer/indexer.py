from typing import Iterable, Optional

from loguru import logger
from tree_sitter import Language, Node, Parser, Tree

from event_visualizer.errors import LanguageLoadError, SourceParseError
from event_visualizer.imports import build_import_table, read_use_declarations
from event_visualizer.models.ast_models import CallSite, FileIndex, ResolvedCall
from event_visualizer.resolver import resolve
from event_visualizer.scanner import scan_call_sites
from event_visualizer.tree_sitter_helpers import NAMESPACE_SEPARATOR, node_point, node_text


# --- Tree-sitter language loading -------------------------------------------

def load_php_language() -> Language:
    """
    Loads the Tree-sitter PHP grammar shipped by the `tree-sitter-php` wheel.
    `language_php` is the flavour that accepts `<?php` tags and inline HTML.
    """
    try:
        import tree_sitter_php
    except ImportError as e:
        raise LanguageLoadError(
            "Could not load the PHP grammar.\n"
            "- Install `tree-sitter-php` (pip install tree-sitter-php)."
        ) from e
    return Language(tree_sitter_php.language_php())


# --- The Indexer -------------------------------------------------------------

class PhpIndexer:
    """
    Parses PHP units and answers "which classes does this file dispatch
    through `Subject::method(...)`?".

    Holds nothing but the parser, so one instance can be reused for any number
    of files.
    """

    def __init__(self):
        self.language = load_php_language()
        self.parser = Parser(self.language)

    def parse(self, source: str) -> Tree:
        """
        Parses a single source string into a Tree-sitter tree.
        """
        return self.parser.parse(source.encode("utf-8"))

    def import_table(self, source: str) -> dict[str, str]:
        source_bytes = source.encode("utf-8")
        return build_import_table(read_use_declarations(source_bytes, self.parse(source).root_node))

    def call_sites(self, source: str) -> list[CallSite]:
        source_bytes = source.encode("utf-8")
        return scan_call_sites(source_bytes, self.parse(source).root_node)

    def get_static_calls(self, source: str, subject_class: str, method_name: str,
                         file_path: str = "<source>") -> list[ResolvedCall]:
        """
        Resolves every `subject_class::method_name(...)` call in `source`.

        `subject_class` is fully qualified without the leading backslash. Raises
        SourceParseError if the source does not parse cleanly.
        """
        return self._resolve_all(source, [(subject_class, method_name)], file_path)

    def index_source(self, source: str, file_path: str, subject_classes: Iterable[str],
                     methods: Iterable[str]) -> FileIndex:
        """
        Parses & indexes a PHP source file for every (subject, method) pair.
        """
        queries = [(subject, method) for subject in subject_classes for method in methods]
        calls = self._resolve_all(source, queries, file_path)
        return FileIndex(path=file_path, declared_class=self.declared_class(source), calls=calls)

    def declared_class(self, source: str) -> Optional[str]:
        """
        Fully-qualified name of the first class declared in the unit, if any.
        """
        source_bytes = source.encode("utf-8")
        root = self.parse(source).root_node
        namespace = _find_namespace(source_bytes, root)
        class_node = _find_first(root, "class_declaration")
        if class_node is None:
            return None
        name_node = class_node.child_by_field_name("name")
        if name_node is None:
            return None
        name = node_text(source_bytes, name_node)
        return f"{namespace}{NAMESPACE_SEPARATOR}{name}" if namespace else name

    # -- internals ------------------------------------------------------------

    def _resolve_all(self, source: str, queries, file_path: str) -> list[ResolvedCall]:
        source_bytes = source.encode("utf-8")
        tree = self.parse(source)
        root = tree.root_node
        if root.has_error:
            line, col = node_point(_first_error(root) or root)
            raise SourceParseError(file_path, line, col)

        # Both passes run once per unit, whatever the number of queries.
        table = build_import_table(read_use_declarations(source_bytes, root))
        sites = scan_call_sites(source_bytes, root)

        calls: list[ResolvedCall] = []
        for subject_class, method_name in queries:
            calls.extend(resolve(subject_class, method_name, table, sites))
        logger.debug(f"{file_path}: {len(calls)} resolved call(s)")
        return calls


def _find_namespace(source_bytes: bytes, root: Node) -> Optional[str]:
    """
    Grabs the namespace from a 'namespace_definition' node if present.
    """
    for child in root.children:
        if child.type == "namespace_definition":
            name_node = child.child_by_field_name("name")
            if name_node:
                return node_text(source_bytes, name_node)
    return None


def _find_first(root: Node, node_type: str) -> Optional[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            return node
        stack.extend(reversed(node.children))
    return None


def _first_error(root: Node) -> Optional[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed(node.children))
    return None
