"""Entry point: python -m gatos [serve|check]

- No args / "serve": Run the HTTP API
- "check":           Load the table, report record count and next id
"""

from __future__ import annotations

import asyncio
import logging
import sys

from gatos.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _run_serve() -> None:
    config = load_config()
    _setup_logging(config.log_level)

    from gatos.daemon import GatosDaemon

    daemon = GatosDaemon(config)
    asyncio.run(daemon.run())


def _run_check() -> None:
    config = load_config()
    _setup_logging(config.log_level)

    from gatos.errors import GatosError
    from gatos.store import RecordStore

    store = RecordStore(config.table_path)
    try:
        next_id = store.initialize()
        count = len(store.list())
    except GatosError as e:
        print(f"{config.table_path}: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"{config.table_path}: {count} records, next id {next_id}")


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "serve"

    if cmd == "serve":
        _run_serve()
    elif cmd == "check":
        _run_check()
    else:
        print("Usage: python -m gatos [serve|check]")
        print("  serve  Run the HTTP API (default)")
        print("  check  Validate the table and report the next id")
        sys.exit(1)


if __name__ == "__main__":
    main()
