# escope/main.py
import argparse
import signal
import threading

from rich.console import Console
from rich.rule import Rule

from . import renderer
from .check_service import CheckService
from .client import ElasticsearchClient
from .config import ES_HOST, ES_PASS, ES_USER, MONITOR_INTERVAL, VERIFY_SSL, configure_logging
from .errors import DataSourceError, InvalidDurationError, InvalidIntervalError
from .monitoring import start_continuous_monitoring

console = Console()


def connect():
    client = ElasticsearchClient(ES_HOST, ES_USER, ES_PASS, VERIFY_SSL)
    try:
        with console.status("[yellow]Verificando conexión con Elasticsearch...[/yellow]"):
            info = client.check_connection()
    except DataSourceError as e:
        console.print(f"[bold red]❌ No se pudo conectar a Elasticsearch:[/bold red] {e}")
        return None
    console.print(f"[bold green]✔ Conectado a Elasticsearch[/bold green] | Cluster: [cyan]{info.get('cluster_name')}[/cyan] | Versión: [cyan]{info.get('version', {}).get('number')}[/cyan]")
    return client


def run_single_check(service: CheckService):
    with console.status("[yellow]Ejecutando chequeos...[/yellow]"):
        report = service.run_all_checks()
    renderer.render_check_report(report, console)


def run_continuous_check(service: CheckService, duration: str, interval: str):
    stop_event = threading.Event()
    # Ctrl+C cancela entre ciclos; el ciclo en curso termina
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: stop_event.set())
    try:
        with console.status(f"[yellow]Monitoreando durante {duration} (intervalo {interval})...[/yellow]"):
            result = start_continuous_monitoring(service.run_all_checks, duration, interval, stop_event=stop_event)
    except (InvalidDurationError, InvalidIntervalError) as e:
        console.print(f"[red]{e}[/red]")
        return
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    console.print(f"Muestras recolectadas: [cyan]{result.sample_count}[/cyan]")
    if result.sample_count > 0:
        run_single_check(service)
    else:
        renderer.render_no_samples(console)


def run_server(host: str, port: int):
    import uvicorn
    console.print(f"Servidor API iniciado en http://{host}:{port}")
    uvicorn.run("escope.api:app", host=host, port=port)


def build_parser():
    parser = argparse.ArgumentParser(prog="escope", description="Chequeo de salud y dimensionamiento de shards para Elasticsearch.")
    subparsers = parser.add_subparsers(dest="command")

    check = subparsers.add_parser("check", help="Chequea la salud del clúster")
    check.add_argument('-d', '--duration', default="", help="Duración del monitoreo continuo (ej.: 1m, 5m, 1h)")
    check.add_argument('-i', '--interval', default=MONITOR_INTERVAL, help="Intervalo de muestreo (ej.: 5s, 10s, 1m; por defecto 2s)")

    serve = subparsers.add_parser("serve", help="Expone los chequeos por HTTP")
    serve.add_argument('--host', default="127.0.0.1")
    serve.add_argument('--port', type=int, default=8000)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "serve":
        run_server(args.host, args.port)
        return

    console.print(Rule("[bold]escope - Chequeo de Salud del Clúster[/bold]"))
    client = connect()
    if client is None:
        return
    service = CheckService(client)
    if getattr(args, "duration", ""):
        run_continuous_check(service, args.duration, args.interval)
    else:
        run_single_check(service)


if __name__ == "__main__":
    main()
