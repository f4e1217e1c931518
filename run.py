# run.py
import argparse


def run_cli(extra_args):
    """Lanza el chequeo en la terminal."""
    from escope.main import main
    main(["check", *extra_args])


def run_api(host, port):
    """Lanza la API HTTP con uvicorn."""
    from escope.main import run_server
    run_server(host, port)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="escope - Elige el modo de ejecución.")
    parser.add_argument(
        '--mode',
        type=str,
        choices=['cli', 'api'],
        default='cli',
        help="Especifica el modo: 'cli' para terminal (default), 'api' para el servidor HTTP."
    )
    parser.add_argument('--host', default="127.0.0.1")
    parser.add_argument('--port', type=int, default=8000)
    args, extra = parser.parse_known_args()

    if args.mode == 'api':
        run_api(args.host, args.port)
    else:
        run_cli(extra)
