from event_visualizer.indexer import PhpIndexer, load_php_language
from event_visualizer.models.ast_models import CallSite, Expression, ExpressionKind, ImportAlias, ResolvedCall
from event_visualizer.resolver import resolve

__all__ = [
    "CallSite",
    "Expression",
    "ExpressionKind",
    "ImportAlias",
    "PhpIndexer",
    "ResolvedCall",
    "load_php_language",
    "resolve",
]
