"""Command line entry point."""

import argparse
import asyncio
import json
import logging
import sys

from notifier import __version__
from notifier.channels.factory import resolve_provider
from notifier.config import check_config, load_config, settings
from notifier.exceptions import ConfigurationError
from notifier.schemas.notification import NotifierConfig
from notifier.tools import NotifierTools


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(handler)


def _json_arg(value: str):
    try:
        return json.loads(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not valid JSON: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notifier", description="Send webhook notifications and ask questions.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser("send", help="Send a notification")
    send.add_argument("body", help="Notification text")
    send.add_argument("--title", "-t")
    send.add_argument("--link")
    send.add_argument("--image-url")
    send.add_argument("--image", help="Local image path")
    send.add_argument("--priority", "-p", type=int, help="1 (lowest) to 5 (highest)")
    send.add_argument("--attach", action="append", default=[], help="Attachment URL (repeatable)")
    send.add_argument("--action", action="append", type=_json_arg, default=[],
                      help='Action as JSON, e.g. \'{"action": "view", "label": "Open", "url": "https://..."}\'')
    send.add_argument("--template", help="Built-in template name")
    send.add_argument("--data", type=_json_arg, default={}, help="Template data as a JSON object")

    ask = subparsers.add_parser("ask", help="Post a question and wait for the answer")
    ask.add_argument("question")
    ask.add_argument("--title", "-t")
    ask.add_argument("--timeout", type=float, default=300, help="Seconds to wait (10-3600)")

    subparsers.add_parser("templates", help="List built-in templates")
    subparsers.add_parser("check", help="Validate the configuration")

    return parser


async def _send(tools: NotifierTools, args: argparse.Namespace) -> str:
    return await tools.full_notify(
        args.body,
        title=args.title,
        link=args.link,
        image_url=args.image_url,
        image=args.image,
        priority=args.priority,
        attachments=args.attach,
        actions=args.action,
        template=args.template,
        template_data=args.data,
    )


async def _ask(tools: NotifierTools, args: argparse.Namespace) -> str:
    await tools.start()
    try:
        return await tools.ask_question(args.question, args.title, args.timeout)
    finally:
        await tools.stop()


def _load_checked_config() -> NotifierConfig:
    config = load_config(settings)
    try:
        check_config(config)
    except ConfigurationError as e:
        print(f"FATAL: {e}", file=sys.stderr)
        sys.exit(1)
    return config


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else settings.log_level.upper())

    if args.command == "templates":
        print(NotifierTools.templates())
        return 0

    config = _load_checked_config()

    if args.command == "check":
        provider = resolve_provider(config.webhook.type)
        print(f"OK: {provider.value} webhook at {config.webhook.url}")
        return 0

    if args.command == "ask":
        config.ask.enabled = True

    tools = NotifierTools.from_config(config)
    if args.command == "send":
        result = asyncio.run(_send(tools, args))
    else:
        result = asyncio.run(_ask(tools, args))
    print(result)
    return 0 if not result.startswith(("Failed", "Invalid", "No answer")) else 1


if __name__ == "__main__":
    sys.exit(main())
