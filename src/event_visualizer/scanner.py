from typing import Optional

from loguru import logger

from event_visualizer.models.ast_models import CallSite, Expression, ExpressionKind
from event_visualizer.tree_sitter_helpers import (
    CLASS_REFERENCE_TYPES,
    NodeKind,
    node_kind,
    node_point,
    node_text,
)

Bindings = dict[str, str]  # "$event" -> "\App\Events\SomeEvent"

_VISIT, _LEAVE_SCOPE, _BIND = object(), object(), object()


# --- Call site scanning ------------------------------------------------------

def scan_call_sites(source_bytes: bytes, root) -> list[CallSite]:
    """
    Collects every `Receiver::method(...)` expression under `root`, in document
    order (depth-first, parents before the calls nested in their arguments).

    Comments are leaf nodes in the tree, so a call that only appears inside a
    comment is never seen here.
    """
    sites: list[CallSite] = []
    scopes: list[Bindings] = [{}]

    # Explicit stack instead of recursion: long `.` chains nest thousands deep.
    # Besides nodes to visit it carries markers that run once a node's children
    # are done (leave a function scope, bind an assignment).
    stack = [(_VISIT, root)]
    while stack:
        action, node = stack.pop()
        if action is _LEAVE_SCOPE:
            scopes.pop()
            continue
        if action is _BIND:
            # Bind after the right-hand side was scanned: `$e = Foo::make($e)` sees the old $e.
            _bind(source_bytes, node, scopes[-1])
            continue

        kind = node_kind(node)
        if kind is NodeKind.SCOPE:
            scopes.append(_scope_for(source_bytes, node, scopes[-1]))
            stack.append((_LEAVE_SCOPE, node))
        elif kind is NodeKind.CALL:
            sites.append(_call_site(source_bytes, node, scopes[-1], len(sites)))
        elif kind is NodeKind.ASSIGNMENT:
            stack.append((_BIND, node))

        stack.extend((_VISIT, child) for child in reversed(node.children))

    logger.debug(f"Scanned {len(sites)} static call site(s)")
    return sites


def _scope_for(source_bytes: bytes, node, enclosing: Bindings) -> Bindings:
    """
    Arrow functions capture the enclosing variables by value, closures only
    the ones listed in `use (...)`; every other function body starts empty.
    """
    if node.type == "arrow_function":
        return dict(enclosing)
    bindings: Bindings = {}
    for child in node.children:
        if child.type == "anonymous_function_use_clause":
            for var in _variables_in(child):
                name = node_text(source_bytes, var)
                if name in enclosing:
                    bindings[name] = enclosing[name]
    return bindings


def _variables_in(node):
    # `use ($a, &$b)`: by-reference captures wrap the variable in another node
    stack = list(node.named_children)
    while stack:
        child = stack.pop(0)
        if child.type == "variable_name":
            yield child
        else:
            stack[:0] = child.named_children


def _call_site(source_bytes: bytes, node, bindings: Bindings, position: int) -> CallSite:
    scope_node = node.child_by_field_name("scope")
    name_node = node.child_by_field_name("name")
    args_node = node.child_by_field_name("arguments")
    line, col = node_point(node)
    return CallSite(
        receiver_token=node_text(source_bytes, scope_node) if scope_node else "",
        method_name=node_text(source_bytes, name_node) if name_node else "",
        arguments=tuple(_arguments(source_bytes, args_node, bindings)) if args_node else (),
        position=position,
        line=line,
        col=col,
    )


def _arguments(source_bytes: bytes, args_node, bindings: Bindings):
    for arg in args_node.named_children:
        if arg.type != "argument":
            # e.g. the `...` of a first-class callable `Foo::bar(...)`
            continue
        expr = _argument_value(arg)
        if expr is None:
            continue
        yield project_expression(source_bytes, expr, bindings)


def _argument_value(arg):
    """The expression of an argument, skipping the label of a named argument."""
    label = arg.child_by_field_name("name")
    values = [c for c in arg.named_children
              if label is None or c.start_byte != label.start_byte]
    return values[-1] if values else None


def project_expression(source_bytes: bytes, node, bindings: Bindings) -> Expression:
    text = node_text(source_bytes, node)
    if node_kind(node) is NodeKind.CONSTRUCTION:
        constructed = constructed_class(source_bytes, node)
        if constructed:
            return Expression(ExpressionKind.CONSTRUCTION, text, constructed)
        # new $className(), new class {...}
        return Expression(ExpressionKind.OTHER, text)
    if node.type == "variable_name":
        return Expression(ExpressionKind.VARIABLE, text, bindings.get(text))
    return Expression(ExpressionKind.OTHER, text)


def constructed_class(source_bytes: bytes, node) -> Optional[str]:
    """Class reference text of `new <ClassRef>(...)`, or None when it is not a literal name."""
    for child in node.named_children:
        if child.type in ("arguments", "attribute_list"):
            continue
        if child.type in CLASS_REFERENCE_TYPES:
            return node_text(source_bytes, child)
        return None
    return None


def _bind(source_bytes: bytes, node, bindings: Bindings):
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    if left is None or right is None or left.type != "variable_name":
        return
    name = node_text(source_bytes, left)
    constructed = None
    if node_kind(right) is NodeKind.CONSTRUCTION:
        constructed = constructed_class(source_bytes, right)
    if constructed:
        bindings[name] = constructed
    else:
        bindings.pop(name, None)
