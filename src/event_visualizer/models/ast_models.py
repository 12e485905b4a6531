# --- Data models for our index ----------------------------------------------
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ExpressionKind(str, Enum):
    CONSTRUCTION = "construction"  # new \App\Events\SomeEvent()
    VARIABLE = "variable"  # $event
    OTHER = "other"  # literals, calls, closures, ...


@dataclass(frozen=True)
class ImportAlias:
    """A single `use` import: local alias -> fully-qualified name."""
    alias: str  # e.g., "Event" or "Alias"
    fully_qualified_name: str  # e.g., "Illuminate\Support\Facades\Event" (no leading "\")


@dataclass(frozen=True)
class Expression:
    """
    Lightweight projection of a call argument.

    `class_name` is the constructed class for CONSTRUCTION, and for VARIABLE the
    class of the `new` expression last assigned to it in the same function scope.
    """
    kind: ExpressionKind
    text: str
    class_name: Optional[str] = None


@dataclass(frozen=True)
class CallSite:
    """A static method call (`Receiver::method(...)`) found in the tree."""
    receiver_token: str  # exact text before "::", e.g., "\Event", "Alias"
    method_name: str  # e.g., "dispatch"
    arguments: tuple[Expression, ...]
    position: int  # document order index
    line: int
    col: int


@dataclass(frozen=True)
class ResolvedCall:
    dispatcher_class: str
    dispatched_class: str
    method: str


@dataclass
class FileIndex:
    """Everything we resolved for one PHP file."""
    path: str
    declared_class: Optional[str]  # e.g., "App\Listeners\SendWelcomeMail"
    calls: list[ResolvedCall] = field(default_factory=list)
