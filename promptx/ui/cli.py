"""
PROMPTX CONTEXT CLI
===================

Inspect how a saved conversation would be sent to a model.

Commands:
    prepare FILE        Run context preparation and show the result
    stats FILE          Show context usage for the conversation
    models              List known models and their context windows

Usage:
    promptx-context prepare chat.json --model gpt-3.5-turbo
    promptx-context prepare chat.json --json
    promptx-context stats chat.json --model claude-3-opus
    promptx-context --models-file models.json models

A conversation file is either a JSON list of {"role", "content"} objects or
an object {"system": "...", "messages": [...]}.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError
from rich.table import Table
from rich.text import Text

from promptx.config.settings import ContextSettings
from promptx.context.message import Message, Role, coerce_messages
from promptx.context.window import ContextWindowManager
from promptx.exceptions import (
    ConfigError,
    ContextValidationError,
    ConversationFileError,
    PromptXBaseError,
    wrap_exception,
)
from promptx.ui.styles import console, create_summary_panel, error_console
from promptx.utils.logger import setup_logging
from promptx.utils.token_estimation import (
    format_token_count,
    get_context_status_color,
)

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are PromptX, an assistant that helps users write better prompts."
PREVIEW_CHARS = 60


# ============================================================================
# CONVERSATION LOADING
# ============================================================================


@wrap_exception(ConversationFileError, user_hint="Check that the file exists and is valid JSON.")
def _read_json(path: Path):
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def load_conversation(
    path: Path, system_override: Optional[str] = None
) -> Tuple[Message, List[Message]]:
    """
    Load a conversation file.

    A leading system message in a plain list becomes the system prompt.
    """
    data = _read_json(path)

    system_text = None
    if isinstance(data, dict):
        system_text = data.get("system")
        items = data.get("messages")
        if system_text is not None and not isinstance(system_text, str):
            raise ConversationFileError(
                f"'system' must be a string in {path}", file_path=path
            )
    else:
        items = data

    if not isinstance(items, list):
        raise ConversationFileError(
            f"No message list found in {path}", file_path=path
        )

    try:
        messages = coerce_messages(items)
    except ContextValidationError as e:
        raise ConversationFileError(
            f"Invalid message in {path}: {e.message}", file_path=path, original_error=e
        ) from e

    if system_text is None and messages and messages[0].role == Role.SYSTEM:
        system_text = messages[0].content
        messages = messages[1:]

    if system_override is not None:
        system_text = system_override

    return Message.system(system_text or DEFAULT_SYSTEM_PROMPT), messages


# ============================================================================
# CLI COMMANDS
# ============================================================================


def _preview(content: str) -> str:
    flat = " ".join(content.split())
    if len(flat) > PREVIEW_CHARS:
        return flat[:PREVIEW_CHARS] + "..."
    return flat


def cli_prepare(manager: ContextWindowManager, args) -> int:
    system_prompt, messages = load_conversation(Path(args.file), args.system)
    result = manager.prepare(system_prompt, messages, args.model)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0

    model_id = args.model or manager.settings.default_model
    overview = Table(title=f"Context for {model_id}", show_header=False)
    overview.add_column("field", style="promptx.accent")
    overview.add_column("value")
    overview.add_row("Messages in", str(len(messages)))
    overview.add_row("Messages out", str(len(result.messages)))
    overview.add_row("Tokens", format_token_count(result.token_count))
    overview.add_row("Truncated", "yes" if result.was_truncated else "no")
    overview.add_row("Summarized", str(result.summarized_count))
    overview.add_row("Kept verbatim", str(result.kept_count))
    console.print(overview)

    if result.summary:
        console.print(create_summary_panel(Text(result.summary, style="promptx.text")))

    listing = Table(title="Outgoing messages")
    listing.add_column("#", justify="right", style="dim")
    listing.add_column("role")
    listing.add_column("content")
    for i, msg in enumerate(result.messages):
        role = msg.role.value
        listing.add_row(str(i), Text(role, style=f"role.{role}"), _preview(msg.content))
    console.print(listing)
    return 0


def cli_stats(manager: ContextWindowManager, args) -> int:
    system_prompt, messages = load_conversation(Path(args.file), args.system)
    stats = manager.context_stats(system_prompt, messages, args.model)
    color = get_context_status_color(stats.usage_percent)

    table = Table(show_header=False)
    table.add_column("field", style="promptx.accent")
    table.add_column("value")
    table.add_row("Messages", str(stats.message_count))
    table.add_row(
        "Tokens",
        f"{format_token_count(stats.total_tokens)} / "
        f"{format_token_count(stats.context_limit)}",
    )
    table.add_row("Usage", Text(f"{stats.usage_percent:.1f}%", style=color))
    table.add_row("Near limit", "yes" if stats.is_near_limit else "no")
    table.add_row("Over limit", "yes" if stats.is_over_limit else "no")
    console.print(table)
    return 0


def cli_models(manager: ContextWindowManager, args) -> int:
    table = Table(title="Known models")
    table.add_column("model", style="promptx.accent")
    table.add_column("context window", justify="right")
    for model_id in sorted(manager.catalog.models()):
        table.add_row(model_id, format_token_count(manager.catalog.context_limit(model_id)))
    console.print(table)
    console.print(
        f"[dim]Unknown models use {format_token_count(manager.catalog.default_limit)}[/]"
    )
    return 0


# ============================================================================
# ENTRY POINT
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptx-context",
        description="Inspect context window preparation for saved conversations.",
    )
    parser.add_argument("--log-level", help="Logging level (default from settings)")
    parser.add_argument("--models-file", type=Path, help="JSON model map to merge")

    subparsers = parser.add_subparsers(dest="command", required=True)

    prepare = subparsers.add_parser("prepare", help="Prepare the context window")
    prepare.add_argument("file", help="Conversation JSON file")
    prepare.add_argument("--model", help="Target model id")
    prepare.add_argument("--system", help="Override the system prompt")
    prepare.add_argument("--json", action="store_true", help="Print the result as JSON")
    prepare.set_defaults(handler=cli_prepare)

    stats = subparsers.add_parser("stats", help="Show context usage")
    stats.add_argument("file", help="Conversation JSON file")
    stats.add_argument("--model", help="Target model id")
    stats.add_argument("--system", help="Override the system prompt")
    stats.set_defaults(handler=cli_stats)

    models = subparsers.add_parser("models", help="List known models")
    models.set_defaults(handler=cli_models)

    return parser


def _build_settings(args) -> ContextSettings:
    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.models_file:
        overrides["models_json_path"] = args.models_file
    try:
        return ContextSettings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _build_settings(args)
        setup_logging(settings.log_level)
        manager = ContextWindowManager(settings=settings)
        return args.handler(manager, args)
    except PromptXBaseError as e:
        logger.debug("Command failed", exc_info=True)
        if getattr(args, "json", False):
            print(json.dumps(e.to_dict(), indent=2, ensure_ascii=False))
            return 1
        error_console.print(Text.assemble(("Error: ", "error"), e.message))
        error_console.print(Text(e.user_hint, style="dim"))
        return 1


if __name__ == "__main__":
    sys.exit(main())
