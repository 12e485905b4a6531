class EventVisualizerError(Exception):
    """Base class for everything this package raises on purpose."""


class LanguageLoadError(EventVisualizerError, RuntimeError):
    """The tree-sitter PHP grammar could not be loaded."""


class SourceParseError(EventVisualizerError):
    """The PHP source did not parse cleanly; nothing is resolved from it."""

    def __init__(self, file_path: str, line: int, col: int):
        self.file_path = file_path
        self.line = line
        self.col = col
        super().__init__(f"Syntax error in {file_path} at {line + 1}:{col + 1}")
