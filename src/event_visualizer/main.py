#!/usr/bin/env python3
"""
Laravel Event Visualizer (Python)
---------------------------------
Parses PHP code with Tree-sitter to find static dispatch calls such as
`Event::dispatch(new OrderShipped($order))` or `SendInvoice::dispatchSync($id)`,
resolves which class is dispatched, and draws the result as a Mermaid graph.

USAGE EXAMPLES
--------------
# 1) Run against an in-code sample (no files needed):
python -m event_visualizer.main

# 2) Run against a directory of .php files (recursive):
python -m event_visualizer.main /path/to/laravel/app

DEPENDENCIES
------------
    pip install tree-sitter tree-sitter-php

Settings (colours, ignored classes, queried facades and methods) come from
EVENT_VISUALIZER_* environment variables or a .env file; see config.py.
"""

import sys

from event_visualizer.config import Settings
from event_visualizer.indexer import PhpIndexer
from event_visualizer.inputs.directory_scanning import index_directory
from event_visualizer.outputs.graph import EventGraph
from event_visualizer.outputs.output import build_mermaid_string, print_summary, to_json

# --- Demo main ---------------------------------------------------------------

SAMPLE_PHP = r"""<?php declare(strict_types=1);

namespace App\Listeners;

use App\Jobs\SendInvoice;
use Illuminate\Support\Facades\Event;
use Illuminate\Support\Facades\Event as Bus;

final class ShipOrder
{
    public function handle(OrderPaid $paid): void
    {
        // Event::dispatch(new \App\Events\NeverFired());
        $shipped = new \App\Events\OrderShipped($paid->order);
        Event::dispatch($shipped);

        Bus::dispatch(new \App\Events\GiftWrapped());

        SendInvoice::dispatchSync($paid->order->id);
    }
}
"""


def main():
    settings = Settings()

    # Create indexer (loads Tree-sitter PHP once)
    indexer = PhpIndexer()

    # If a directory is given, index .php files in it; else use SAMPLE_PHP
    subjects = list(settings.subject_classes)
    if len(sys.argv) > 1:
        root = sys.argv[1]
        file_indexes = index_directory(indexer, root, subjects, settings.dispatch_methods,
                                       include_declared_classes=settings.detect_jobs)
    else:
        # The sample's job dispatches itself; query it too
        subjects.append("App\\Jobs\\SendInvoice")
        file_indexes = [
            indexer.index_source(SAMPLE_PHP, "<sample>", subjects, settings.dispatch_methods)
        ]

    # Print a concise human-readable summary
    print_summary(file_indexes)

    # Also print JSON (easy to persist)
    print("\n=== JSON ===")
    print(to_json(file_indexes))

    graph = EventGraph()
    graph.add_file_indexes(file_indexes)
    print("\n=== MERMAID ===")
    print(build_mermaid_string(graph.adjacency(), settings, graph.roles))


if __name__ == "__main__":
    main()
