# escope/renderer.py
from typing import List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from .constants import MSG_NO_SAMPLES
from .models import (
    CheckReport, ClusterInfo, DynamicThresholds, NodeHealth, ResourceUsage, ScaleWarnings,
    SegmentWarnings, ShardWarnings,
)
from .thresholds import compute_thresholds

console = Console()


def format_bytes(num: int) -> str:
    for unit in ["b", "kb", "mb", "gb"]:
        if abs(num) < 1024: return f"{num:.1f}{unit}" if unit != "b" else f"{num}{unit}"
        num /= 1024
    return f"{num:.1f}tb"


def _colored(value: float, limit: float) -> str:
    color = "red" if value >= limit else "green"
    return f"[{color}]{value:.0f}%[/{color}]"


# --- Componentes Internos de Renderizado ---

def _render_header(info: Optional[ClusterInfo]) -> Panel:
    if info is None: return Panel("[yellow]Sin datos de salud del clúster.[/yellow]", border_style="yellow")
    status = info.status.upper() or "N/A"
    status_color = {"GREEN": "green", "YELLOW": "yellow", "RED": "red"}.get(status, "white")
    summary = (f"Cluster: [b]{info.cluster_name or 'N/A'}[/b] | Status: [b {status_color}]{status}[/b {status_color}] | Nodos: {info.number_of_nodes}\n"
               f"Shards activos: {info.active_shards} (primarios {info.active_primary_shards}) | "
               f"Initializing: [yellow]{info.initializing_shards}[/yellow] | Relocating: [yellow]{info.relocating_shards}[/yellow] | "
               f"Unassigned: [bold red]{info.unassigned_shards}[/bold red]")
    return Panel(summary, title="[b cyan]Chequeo de Salud Elasticsearch[/b cyan]", border_style="cyan")


def _render_nodes(nodes: List[NodeHealth], thresholds: DynamicThresholds) -> Panel:
    table = Table(title="[b]Salud de Nodos[/b]", expand=True)
    table.add_column("Nodo", style="cyan"); table.add_column("CPU%", justify="right"); table.add_column("Heap%", justify="right")
    for node in sorted(nodes, key=lambda n: n.name):
        table.add_row(node.name or node.node_id, _colored(node.cpu_usage, thresholds.high_cpu_threshold), _colored(node.heap_usage, thresholds.high_heap_threshold))
    return Panel(table, border_style="green")


def _render_resources(usage: ResourceUsage, thresholds: DynamicThresholds) -> Panel:
    used_disk = usage.disk_total - usage.disk_available
    disk_pct = used_disk / usage.disk_total * 100 if usage.disk_total > 0 else 0
    lines = [f"Nodos data: {usage.node_count}",
             f"CPU  media {_colored(usage.cpu_usage, thresholds.high_cpu_threshold)} | min {usage.cpu_usage_min:.0f}% ({usage.cpu_usage_min_node}) | max {usage.cpu_usage_max:.0f}% ({usage.cpu_usage_max_node})",
             f"Heap media {_colored(usage.heap_usage, thresholds.high_heap_threshold)} | min {usage.heap_usage_min:.0f}% ({usage.heap_usage_min_node}) | max {usage.heap_usage_max:.0f}% ({usage.heap_usage_max_node})",
             f"Disco {_colored(disk_pct, thresholds.high_disk_threshold)} | {format_bytes(used_disk)} / {format_bytes(usage.disk_total)}"]
    return Panel("\n".join(lines), title="[b]Recursos[/b]", border_style="blue")


def _render_shard_warnings(warnings: ShardWarnings) -> Panel:
    lines = [f"[bold red]CRITICAL[/bold red] {issue}" for issue in warnings.critical_issues]
    lines += [f"[yellow]WARNING[/yellow] {issue}" for issue in warnings.warning_issues]
    lines += [f"[cyan]→[/cyan] {rec}" for rec in warnings.recommendations]
    lines.append(f"Ratio de balance: {warnings.unbalanced_ratio:.2f}")
    border = "red" if warnings.critical_issues else "yellow" if warnings.warning_issues else "green"
    return Panel("\n".join(lines), title="[b]Shards[/b]", border_style=border)


def _render_segments(warnings: SegmentWarnings, thresholds: DynamicThresholds) -> Panel:
    lines = [f"Índices con > {thresholds.high_segment_threshold} segmentos: {warnings.high_segment_indices}",
             f"Índices con segmentos < {format_bytes(thresholds.small_segment_threshold)}: {warnings.small_segment_indices}",
             f"Índices con segmentos > {format_bytes(thresholds.large_segment_threshold)}: {warnings.large_segment_indices}"]
    return Panel("\n".join(lines), title="[b]Segmentos[/b]", border_style="blue")


def _render_scale(warnings: ScaleWarnings) -> Panel:
    if not warnings.over_scaled_indices:
        return Panel("[bold green]✅ Número de shards adecuado en todos los índices revisados.[/bold green]", title="[b]Escala[/b]", border_style="green")
    table = Table(expand=True)
    for col in ["Índice", "Tipo", "Pri/Rep", "Tamaño", "Recomendado", "Confianza"]: table.add_column(col)
    for idx in warnings.over_scaled_indices:
        rec = idx.recommendation
        table.add_row(idx.name, f"[yellow]{idx.warning_type}[/yellow]", f"{idx.primary_shards}/{idx.replica_shards}", format_bytes(idx.index_size),
                      f"{rec.recommended} ({rec.min_acceptable}-{rec.max_acceptable})", f"{rec.confidence:.0%}")
    return Panel(Group(table, "\n".join(f"- {msg}" for msg in warnings.warning_issues)), title="[b yellow]Escala[/b yellow]", border_style="yellow")


# --- Renderers Públicos ---

def render_check_report(report: CheckReport, out: Optional[Console] = None):
    out = out or console
    node_count = report.cluster_info.number_of_nodes if report.cluster_info else 1
    thresholds = compute_thresholds(node_count or 1)

    out.print(_render_header(report.cluster_info))
    if report.node_breakdown:
        nb = report.node_breakdown
        out.print(f"Nodos: {nb.total} (master {nb.master}, data {nb.data}, ingest {nb.ingest}, coordinating {nb.coordinating_only})")
    if report.node_health: out.print(_render_nodes(report.node_health, thresholds))
    if report.resource_usage: out.print(_render_resources(report.resource_usage, thresholds))
    if report.shard_health:
        sh = report.shard_health
        out.print(f"Shards: started {sh.started_shards} | initializing {sh.initializing_shards} | relocating {sh.relocating_shards} | unassigned {sh.unassigned_shards}")
    if report.shard_warnings: out.print(_render_shard_warnings(report.shard_warnings))
    if report.index_health is not None:
        unhealthy = [i for i in report.index_health if i.health and i.health != "green"]
        out.print(f"Índices: {len(report.index_health)} | no verdes: [yellow]{len(unhealthy)}[/yellow]")
    if report.performance:
        perf = report.performance
        out.print(f"Indexación: {perf.index_total:,} ops ({perf.index_time_in_millis:,} ms) | Búsqueda: {perf.query_total:,} queries ({perf.query_time_in_millis:,} ms)")
    if report.segment_warnings: out.print(_render_segments(report.segment_warnings, thresholds))
    if report.scale_warnings: out.print(_render_scale(report.scale_warnings))
    for name, reason in report.failures.items():
        out.print(f"[bold red]❌ {name} failed:[/bold red] {reason}")


def render_no_samples(out: Optional[Console] = None):
    (out or console).print(f"[yellow]{MSG_NO_SAMPLES}[/yellow]")
