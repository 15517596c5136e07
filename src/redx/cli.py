from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

from redx.config import ChatConfig, ChatMode, ConfigError, parse_mode
from redx.prompts import DELETE_CONFIRMATION
from redx.runtime.render import StreamPrinter, render_session_line, render_transcript
from redx.runtime.repl import RedXREPL
from redx.runtime.runtime import RedXRuntime
from redx.sessions.store import SessionStoreError


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        payload = {
            "ts": ts,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(verbose: bool = False, quiet: bool = False, log_format: str = "text") -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_format == "json":
        handlers[0].setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=handlers)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)


def main() -> int:
    load_dotenv()
    return _main(sys.argv[1:])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="redx", description="RedX - streaming chat client")
    parser.add_argument("--data-dir", default=None, help="Directory for saved chats")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--log-format", default="text", choices=["text", "json"])
    subparsers = parser.add_subparsers(dest="command", required=False)

    chat = subparsers.add_parser("chat", help="Start interactive chat")
    chat.add_argument(
        "--mode",
        default=ChatMode.FAST.value.lower(),
        choices=[m.value.lower() for m in ChatMode],
    )
    chat.add_argument("--message", "-m", help="Single prompt (non-interactive)")

    sessions = subparsers.add_parser("sessions", help="List/show/delete saved chats")
    sessions_sub = sessions.add_subparsers(dest="sessions_cmd", required=False)
    sessions_sub.add_parser("list", help="List chats")
    show = sessions_sub.add_parser("show", help="Print a chat transcript")
    show.add_argument("session_id")
    delete = sessions_sub.add_parser("delete", help="Delete a chat")
    delete.add_argument("session_id")
    delete.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    return parser


def _build_config(args: argparse.Namespace) -> ChatConfig:
    config = ChatConfig()
    if args.data_dir:
        config.data_dir = args.data_dir
    if getattr(args, "mode", None):
        config.default_mode = parse_mode(args.mode)
    config.validate()
    return config


def _find_session_id(runtime: RedXRuntime, prefix: str) -> str | None:
    matches = [s.id for s in runtime.store.sessions if s.id.startswith(prefix)]
    return matches[0] if len(matches) == 1 else None


def _cmd_chat(args: argparse.Namespace, config: ChatConfig) -> int:
    printer = StreamPrinter()
    runtime = RedXRuntime(config, on_event=printer)
    printer.runtime = runtime

    message = getattr(args, "message", None)
    if message:
        result = runtime.send(message)
        if result is None:
            return 1
        return 1 if result.failed else 0

    RedXREPL(runtime).run()
    return 0


def _cmd_sessions(args: argparse.Namespace, config: ChatConfig) -> int:
    runtime = RedXRuntime(config)
    sub = args.sessions_cmd or "list"

    if sub == "list":
        sessions = runtime.store.sessions
        if not sessions:
            print("No saved sessions")
            return 0
        active_id = runtime.store.active_session_id
        for session in sessions:
            print(render_session_line(session, session.id == active_id))
        return 0

    session_id = _find_session_id(runtime, args.session_id)
    if session_id is None:
        print(f"Error: Session not found: {args.session_id}", file=sys.stderr)
        return 1

    if sub == "show":
        print(render_transcript(runtime, runtime.store.get_session(session_id)))
        return 0

    if sub == "delete":
        def confirm() -> bool:
            if args.yes:
                return True
            return input(f"{DELETE_CONFIRMATION} [y/N] ").strip().lower() in {"y", "yes"}

        deleted = runtime.delete_session(session_id, confirm=confirm)
        print("✅ Chat deleted" if deleted else "⚠️  Skipped: delete")
        return 0

    return 2


def _main(argv: list[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet, args.log_format)
    logger = logging.getLogger(__name__)

    try:
        config = _build_config(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    try:
        if args.command == "sessions":
            return _cmd_sessions(args, config)
        return _cmd_chat(args, config)
    except SessionStoreError as e:
        logger.error(f"Session error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
