# --- Directory scanning convenience -----------------------------------------
import os

from loguru import logger

from event_visualizer.errors import EventVisualizerError
from event_visualizer.indexer import PhpIndexer
from event_visualizer.models.ast_models import FileIndex


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def php_files(root_dir: str) -> list[str]:
    """All .php files under `root_dir` in a stable order, `vendor/` excluded."""
    paths = []
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames[:] = sorted(d for d in dirnames if d != "vendor")
        for fn in sorted(filenames):
            if fn.endswith(".php"):
                paths.append(os.path.join(dirpath, fn))
    return paths


def index_directory(indexer: PhpIndexer, root_dir: str, subject_classes, methods,
                    include_declared_classes: bool = False) -> list[FileIndex]:
    """
    Recursively index all .php files in a directory. Files that cannot be
    read or parsed are logged and skipped.

    With `include_declared_classes`, every class declared in the tree is
    queried as well, so that `SendInvoice::dispatch($id)` is found for a job
    that lives in the same project.
    """
    sources = {}
    for full in php_files(root_dir):
        try:
            sources[full] = read_text(full)
        except OSError as e:
            logger.warning(f"Failed to read {full}: {e}")

    subjects = list(subject_classes)
    if include_declared_classes:
        for src in sources.values():
            declared = indexer.declared_class(src)
            if declared and declared not in subjects:
                subjects.append(declared)
        logger.debug(f"Querying {len(subjects)} subject class(es)")

    results = []
    for full, src in sources.items():
        try:
            results.append(indexer.index_source(src, full, subjects, methods))
        except EventVisualizerError as e:
            logger.warning(f"Failed to index {full}: {e}")
    logger.info(f"Indexed {len(results)} PHP file(s) under {root_dir}")
    return results
