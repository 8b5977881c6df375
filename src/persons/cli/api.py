# persons/cli/api.py
from persons.config import DEFAULT_HOST, DEFAULT_PORT
from persons.logging import get_logger
from persons.vocabulary import VOCABULARIES


def register_subcommands(subparsers):
    subparsers.add_parser("status", help="Check api status")
    starter_parser = subparsers.add_parser("start", help="start the API server")
    starter_parser.add_argument(
        "--host", default=None, help=f"Host to bind (default: PERSONS_HOST or {DEFAULT_HOST})"
    )
    starter_parser.add_argument(
        "--port", type=int, default=None, help=f"Port to listen on (default: PERSONS_PORT or {DEFAULT_PORT})"
    )
    starter_parser.add_argument(
        "--vocabulary", choices=sorted(VOCABULARIES), default=None, help="Field naming to serve"
    )
    starter_parser.add_argument("--db", dest="db_path", default=None, help="SQLite database file")


def dispatch(args):
    """Dispatch API CLI subcommands using a simple lookup table.

    Errors from handlers are allowed to propagate so callers can see the
    underlying exception. Unknown subcommands raise ``ValueError`` with a clear
    message.
    """
    logger = get_logger(__file__)

    def _status() -> None:
        logger.info("run persons api start to start the API server")

    def _start() -> None:
        from persons.api.main import create_app
        from persons.config import Settings
        import uvicorn

        settings = Settings.from_env(
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            vocabulary=getattr(args, "vocabulary", None),
            db_path=getattr(args, "db_path", None),
        )
        app = create_app(settings)
        logger.info(
            "Starting API server at http://%s:%s%s",
            settings.host,
            settings.port,
            settings.vocabulary.route,
        )
        uvicorn.run(app, host=settings.host, port=settings.port)

    commands = {"status": _status, "start": _start}
    try:
        handler = commands[args.subcommand]
    except KeyError as exc:
        message = f"No handler for API subcommand: {args.subcommand}"
        logger.error(message)
        raise ValueError(message) from exc

    handler()
