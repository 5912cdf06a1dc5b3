"""Command line entry point: run the dashboard or manage smart meter credentials."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys

from wienmonitor.config import load_config
from wienmonitor.context import AppContext
from wienmonitor.logging_setup import setup_logging
from wienmonitor.server import create_server
from wienmonitor.storage.credentials import CLEAR_PROMPT, CredentialError, CredentialStore
from wienmonitor.storage.kv_store import JsonFileStore

logger = logging.getLogger(__name__)

CONFIRM_ANSWERS = {"j", "ja", "y", "yes"}


def _serve(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    setup_logging(config.log)
    ctx = AppContext(config)
    server = create_server(ctx)
    host, port = server.server_address[:2]
    logger.info("Dashboard listening on http://%s:%s/", host, port)

    if not args.no_pollers:
        ctx.start()
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        ctx.stop()
        server.server_close()
    return 0


def _credential_store(args: argparse.Namespace) -> CredentialStore:
    config = load_config(args.config)
    return CredentialStore(JsonFileStore(config.storage.path))


def _credentials_set(args: argparse.Namespace) -> int:
    store = _credential_store(args)
    password = getpass.getpass("API Key: ")
    try:
        store.save(args.username, password, args.meter_id or "")
    except CredentialError as exc:
        print(exc, file=sys.stderr)
        return 1
    print("Smart Meter Konfiguration gespeichert.")
    return 0


def _credentials_clear(args: argparse.Namespace) -> int:
    store = _credential_store(args)
    confirmed = args.yes or input(f"{CLEAR_PROMPT} [j/N] ").strip().lower() in CONFIRM_ANSWERS
    if not store.clear(confirmed):
        print("Abgebrochen.")
        return 1
    print("Smart Meter Konfiguration gelöscht.")
    return 0


def _credentials_show(args: argparse.Namespace) -> int:
    credentials = _credential_store(args).load()
    if credentials is None:
        print("Nicht konfiguriert")
        return 0
    print(f"Benutzername: {credentials.username}")
    print(f"Zählpunkt: {credentials.meter_id or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wienmonitor")
    parser.add_argument("--config", default="config/config.yaml", help="Path to the YAML config")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the dashboard and relay server")
    serve.add_argument(
        "--no-pollers",
        action="store_true",
        help="Serve the page and relay without polling the feeds",
    )
    serve.set_defaults(func=_serve)

    credentials = commands.add_parser("credentials", help="Manage smart meter credentials")
    actions = credentials.add_subparsers(dest="action", required=True)

    set_cmd = actions.add_parser("set", help="Store username, API key and Zählpunkt")
    set_cmd.add_argument("--username", required=True)
    set_cmd.add_argument("--meter-id", default="")
    set_cmd.set_defaults(func=_credentials_set)

    clear_cmd = actions.add_parser("clear", help="Delete the stored credentials")
    clear_cmd.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    clear_cmd.set_defaults(func=_credentials_clear)

    show_cmd = actions.add_parser("show", help="Show the stored username and Zählpunkt")
    show_cmd.set_defaults(func=_credentials_show)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
