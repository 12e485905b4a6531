import json
import re
from typing import Optional

from event_visualizer.config import LARAVEL_NAMESPACE, Settings
from event_visualizer.models.ast_models import FileIndex
from event_visualizer.outputs.graph import ClassRole
from event_visualizer.tree_sitter_helpers import short_name


# --- Pretty printing & JSON export ------------------------------------------

def print_summary(file_indexes: list[FileIndex]):
    """
    Human-friendly printout of what we found.
    """
    print("\n=== FILES ===")
    for fi in sorted(file_indexes, key=lambda f: f.path):
        owner = fi.declared_class or "<no class>"
        print(f"\n[{owner}]  ({fi.path})")
        for call in fi.calls:
            print(f"  - {call.dispatcher_class}::{call.method}  ->  {call.dispatched_class}")


def to_json(file_indexes: list[FileIndex]) -> str:
    """
    Serializes the resolved calls to JSON, one entry per file.
    """
    out = {"files": []}
    for fi in file_indexes:
        out["files"].append({
            "path": fi.path,
            "declaredClass": fi.declared_class,
            "calls": [
                {
                    "dispatcherClass": c.dispatcher_class,
                    "dispatchedClass": c.dispatched_class,
                    "method": c.method,
                } for c in fi.calls
            ]
        })
    return json.dumps(out, indent=2)


# --- Mermaid -----------------------------------------------------------------

def mermaid_node(class_name: str, role: ClassRole) -> str:
    """`App\\Events\\Event1` -> `App_Events_Event1[Event1]:::event`"""
    node_id = re.sub(r"\W", "_", class_name)
    return f"{node_id}[{short_name(class_name)}]:::{role.value}"


def build_mermaid_string(adjacency: dict[str, list[str]], settings: Settings,
                         roles: Optional[dict[str, ClassRole]] = None) -> str:
    """
    Renders an adjacency map as a Mermaid flowchart.

    Without explicit `roles`, keys are drawn as events and their targets as
    listeners. Framework (Illuminate) classes are left out, on either end of an edge,
    unless `show_laravel_events` is on, and any class whose short or full name is in
    `classes_to_ignore` is dropped together with its edges.
    """
    roles = roles or {}
    ignored = set(settings.classes_to_ignore)

    def role_of(class_name: str, default: ClassRole) -> ClassRole:
        return roles.get(class_name, default)

    def is_ignored(class_name: str) -> bool:
        if class_name.startswith(LARAVEL_NAMESPACE) and not settings.show_laravel_events:
            return True
        return class_name in ignored or short_name(class_name) in ignored

    lines = [
        "graph LR",
        f"classDef event fill:{settings.theme_event_color};",
        f"classDef listener fill:{settings.theme_listener_color};",
        f"classDef job fill:{settings.theme_job_color};",
    ]
    for source, targets in adjacency.items():
        if is_ignored(source):
            continue
        for target in targets:
            if is_ignored(target):
                continue
            lines.append(
                f"{mermaid_node(source, role_of(source, ClassRole.EVENT))} --> "
                f"{mermaid_node(target, role_of(target, ClassRole.LISTENER))}"
            )
    return "\n".join(lines) + "\n"
