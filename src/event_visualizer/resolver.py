from typing import Iterable, Mapping

from loguru import logger

from event_visualizer.models.ast_models import CallSite, ExpressionKind, ResolvedCall
from event_visualizer.tree_sitter_helpers import NAMESPACE_SEPARATOR, strip_leading_separator


# --- Call resolution ---------------------------------------------------------

def resolve_receiver(receiver_token: str, import_table: Mapping[str, str]) -> str:
    """
    Turns the text left of `::` into a class name:
      - `\\Foo\\Bar`  -> `Foo\\Bar` (already fully qualified, imports don't apply)
      - `Alias`     -> whatever `use ... as Alias` points at
      - anything else is taken literally (same-namespace or unimported class)
    """
    if receiver_token.startswith(NAMESPACE_SEPARATOR):
        return strip_leading_separator(receiver_token)
    if receiver_token in import_table:
        return import_table[receiver_token]
    return receiver_token


def receiver_matches(receiver_token: str, subject_class: str, import_table: Mapping[str, str]) -> bool:
    """
    True when the receiver names `subject_class`. A bare receiver also matches
    when it is spelled exactly like the subject, even if a `use` maps it
    elsewhere: callers may ask for `DispatchableJob` while the file imports
    `App\\Domain\\Job\\DispatchableJob`.
    """
    if resolve_receiver(receiver_token, import_table) == subject_class:
        return True
    return not receiver_token.startswith(NAMESPACE_SEPARATOR) and receiver_token == subject_class


def dispatched_class(subject_class: str, call_site: CallSite) -> str:
    """
    The payload of a dispatch call: the class constructed in the first argument
    (directly, or through a variable assigned from `new`), else the subject
    class itself (a job dispatching itself).
    """
    if call_site.arguments:
        first = call_site.arguments[0]
        if first.kind in (ExpressionKind.CONSTRUCTION, ExpressionKind.VARIABLE) and first.class_name:
            return strip_leading_separator(first.class_name)
    return subject_class


def resolve(subject_class: str, method_name: str, import_table: Mapping[str, str],
            call_sites: Iterable[CallSite]) -> list[ResolvedCall]:
    resolved = []
    for site in sorted(call_sites, key=lambda s: s.position):
        if site.method_name != method_name:
            continue
        if not receiver_matches(site.receiver_token, subject_class, import_table):
            continue
        resolved.append(ResolvedCall(
            dispatcher_class=subject_class,
            dispatched_class=dispatched_class(subject_class, site),
            method=method_name,
        ))
    logger.debug(f"{subject_class}::{method_name}: {len(resolved)} resolved call(s)")
    return resolved
