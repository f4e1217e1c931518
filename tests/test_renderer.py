"""
Smoke tests for the console report
"""
from rich.console import Console

from escope.models import (
    CheckReport, ClusterInfo, NodeBreakdown, NodeHealth, ResourceUsage, ScaleWarnings, ShardWarnings,
)
from escope.renderer import format_bytes, render_check_report, render_no_samples


def recording_console():
    return Console(record=True, width=160)


class TestFormatBytes:
    def test_units(self):
        assert format_bytes(512) == "512b"
        assert format_bytes(1536) == "1.5kb"
        assert format_bytes(1024 ** 3) == "1.0gb"
        assert format_bytes(2 * 1024 ** 4) == "2.0tb"


class TestRenderCheckReport:
    def test_renders_sections_and_failures(self):
        report = CheckReport(
            cluster_info=ClusterInfo(cluster_name="prod-logs", status="yellow", number_of_nodes=3),
            node_health=[NodeHealth(node_id="n1", name="data-1", cpu_usage=20, heap_usage=50)],
            resource_usage=ResourceUsage(node_count=1),
            shard_warnings=ShardWarnings(critical_issues=["1 unassigned shards detected"]),
            node_breakdown=NodeBreakdown(total=3, master=1, data=2),
            scale_warnings=ScaleWarnings(),
            failures={"Performance check": "operation timed out"},
        )
        out = recording_console()
        render_check_report(report, out)
        text = out.export_text()
        assert "prod-logs" in text
        assert "data-1" in text
        assert "1 unassigned shards detected" in text
        assert "Performance check failed" in text
        assert "operation timed out" in text

    def test_empty_report(self):
        out = recording_console()
        render_check_report(CheckReport(), out)
        assert "Sin datos" in out.export_text()

    def test_no_samples_message(self):
        out = recording_console()
        render_no_samples(out)
        assert "No samples collected" in out.export_text()
