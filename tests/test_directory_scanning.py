from event_visualizer.inputs.directory_scanning import index_directory
from event_visualizer.models.ast_models import ResolvedCall

FACADE = "Illuminate\\Support\\Facades\\Event"

LISTENER = """<?php
namespace App\\Listeners;

use Illuminate\\Support\\Facades\\Event;

class ShipOrder
{
    public function handle(): void
    {
        Event::dispatch(new \\App\\Events\\OrderShipped());
    }
}
"""


def test_indexes_php_files_recursively(indexer, tmp_path):
    listeners = tmp_path / "app" / "Listeners"
    listeners.mkdir(parents=True)
    (listeners / "ShipOrder.php").write_text(LISTENER, encoding="utf-8")
    (listeners / "notes.txt").write_text("Event::dispatch(new Nope());", encoding="utf-8")
    vendor = tmp_path / "vendor" / "pkg"
    vendor.mkdir(parents=True)
    (vendor / "Third.php").write_text(LISTENER, encoding="utf-8")

    results = index_directory(indexer, str(tmp_path), [FACADE], ["dispatch"])

    assert len(results) == 1
    assert results[0].path == str(listeners / "ShipOrder.php")
    assert results[0].declared_class == "App\\Listeners\\ShipOrder"
    assert results[0].calls == [ResolvedCall(FACADE, "App\\Events\\OrderShipped", "dispatch")]


def test_broken_files_are_skipped(indexer, tmp_path):
    (tmp_path / "Broken.php").write_text("<?php\nEvent::dispatch(new A(;\n", encoding="utf-8")
    (tmp_path / "Good.php").write_text(LISTENER, encoding="utf-8")

    results = index_directory(indexer, str(tmp_path), [FACADE], ["dispatch"])

    assert [r.declared_class for r in results] == ["App\\Listeners\\ShipOrder"]

JOB = """<?php
namespace App\\Jobs;

class SendInvoice
{
    public function handle(): void
    {
    }
}
"""

JOB_CALLER = """<?php
namespace App\\Listeners;

use App\\Jobs\\SendInvoice;

class BillOrder
{
    public function handle($order): void
    {
        SendInvoice::dispatch($order->id);
    }
}
"""


def test_declared_classes_are_queried_as_jobs(indexer, tmp_path):
    (tmp_path / "Jobs").mkdir()
    (tmp_path / "Jobs" / "SendInvoice.php").write_text(JOB, encoding="utf-8")
    (tmp_path / "Listeners").mkdir()
    (tmp_path / "Listeners" / "BillOrder.php").write_text(JOB_CALLER, encoding="utf-8")

    without_jobs = index_directory(indexer, str(tmp_path), [FACADE], ["dispatch"])
    with_jobs = index_directory(indexer, str(tmp_path), [FACADE], ["dispatch"],
                                include_declared_classes=True)

    assert [r.calls for r in without_jobs] == [[], []]
    by_class = {r.declared_class: r.calls for r in with_jobs}
    assert by_class["App\\Jobs\\SendInvoice"] == []
    assert by_class["App\\Listeners\\BillOrder"] == [
        ResolvedCall("App\\Jobs\\SendInvoice", "App\\Jobs\\SendInvoice", "dispatch")
    ]
