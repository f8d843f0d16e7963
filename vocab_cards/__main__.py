from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vocab_cards", description="Vocabulary flashcards file service")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the lesson file service")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--data-dir", type=Path, default=None)
    serve.add_argument("--log-level", default=None)

    listing = sub.add_parser("list", help="print the lessons found in the data directory")
    listing.add_argument("--data-dir", type=Path, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # Settings are read at import time, so export overrides before importing the app.
    if args.data_dir is not None:
        os.environ["VOCAB_CARDS_DATA_DIR"] = str(args.data_dir.resolve())
    if getattr(args, "port", None) is not None:
        os.environ["VOCAB_CARDS_PORT"] = str(args.port)

    if args.command == "list":
        from vocab_cards.errors import FileAccessError
        from vocab_cards.storage.files import FileStore

        store = FileStore(args.data_dir) if args.data_dir else FileStore()
        try:
            names = store.list_files()
        except FileAccessError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        for name in names:
            print(name)
        return 0

    import uvicorn

    from vocab_cards.config import server_port
    from vocab_cards.logging_setup import configure_logging

    configure_logging(args.log_level)
    uvicorn.run("vocab_cards.app:app", host=args.host, port=server_port())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
