# --- Event graph -------------------------------------------------------------
from enum import Enum
from typing import Iterable

from event_visualizer.config import LARAVEL_NAMESPACE


class ClassRole(str, Enum):
    EVENT = "event"
    LISTENER = "listener"
    JOB = "job"


class EventGraph:
    """
    Adjacency map of "X leads to Y" edges between classes:
      - event -> listener bindings supplied by the caller, and
      - class -> whatever it dispatches (from resolved calls).
    Edges keep insertion order and are never duplicated.
    """

    def __init__(self):
        self._edges: dict[str, list[str]] = {}
        self.roles: dict[str, ClassRole] = {}

    def add_edge(self, source: str, target: str):
        targets = self._edges.setdefault(source, [])
        if target not in targets:
            targets.append(target)

    def add_listeners(self, event_class: str, listener_classes: Iterable[str]):
        self.roles[event_class] = ClassRole.EVENT
        for listener in listener_classes:
            self.roles.setdefault(listener, ClassRole.LISTENER)
            self.add_edge(event_class, listener)

    def add_resolved_calls(self, source_class: str, calls):
        for call in calls:
            self.roles.setdefault(source_class, ClassRole.LISTENER)
            if (call.dispatched_class == call.dispatcher_class
                    and not call.dispatcher_class.startswith(LARAVEL_NAMESPACE)):
                # Job::dispatch(...) dispatches the job itself; a facade called
                # without a payload stays an event source
                self.roles[call.dispatched_class] = ClassRole.JOB
            else:
                self.roles.setdefault(call.dispatched_class, ClassRole.EVENT)
            self.add_edge(source_class, call.dispatched_class)

    def add_file_indexes(self, file_indexes):
        for fi in file_indexes:
            self.add_resolved_calls(fi.declared_class or fi.path, fi.calls)

    def adjacency(self) -> dict[str, list[str]]:
        return {source: list(targets) for source, targets in self._edges.items()}
