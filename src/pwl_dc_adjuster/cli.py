"""
Command-line entry point.

Usage::

    pwl-dc-adjuster flatten world.json [--yes] [--output out.json]
    pwl-dc-adjuster import document.json [--output out.json]
    pwl-dc-adjuster check document.json

``flatten`` runs the bulk pass over a JSON world export, ``import`` runs the
import hook on a single document source, ``check`` prints whether the bulk
pass would pick a document up.
"""
from __future__ import annotations

import argparse
import asyncio
import html
import json
import re
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

from pwl_dc_adjuster.adjustment.batch import BatchOrchestrator
from pwl_dc_adjuster.adjustment.heuristic import check_item_needs_adjustment
from pwl_dc_adjuster.adjustment.hooks import on_pre_create_actor, on_pre_create_item
from pwl_dc_adjuster.adjustment.host import InMemoryWorld, RecordingNotifier, WorldDocument
from pwl_dc_adjuster.adjustment.input_validator import EntitySourceError
from pwl_dc_adjuster.config import AdjusterConfig
from pwl_dc_adjuster.observability.logging import get_logger

_BLOCK_TAG_RE = re.compile(r"</?(?:p|ul|li)\b[^>]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")


def _html_to_text(content: str) -> str:
    text = _TAG_RE.sub("", _BLOCK_TAG_RE.sub("\n", content))
    return "\n".join(line.strip() for line in html.unescape(text).splitlines() if line.strip())


class PromptConfirmer:
    """Asks on the terminal; anything but ``y``/``yes`` declines."""

    def __init__(self, ask: Optional[Callable[[str], str]] = None) -> None:
        self._ask = ask or input

    async def confirm(self, title: str, content: str) -> bool:
        body = _html_to_text(content)
        print(f"== {title} ==\n{body}")
        answer = self._ask("[y/N] ").strip().lower()
        return answer in ("y", "yes")


class AutoConfirmer:
    async def confirm(self, title: str, content: str) -> bool:
        return True


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


# ---------------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------------


def _cmd_flatten(args: argparse.Namespace, config: AdjusterConfig) -> int:
    world = InMemoryWorld.load(args.world)
    confirmer = AutoConfirmer() if args.yes else PromptConfirmer()
    notifier = RecordingNotifier(echo=True)

    report = asyncio.run(BatchOrchestrator(world, confirmer, notifier, config=config).run())

    if args.output:
        world.dump(args.output)
    elif report.succeeded:
        world.dump(args.world)
    print(report.to_json(indent=2))
    return 1 if report.status == "failed" else 0


def _cmd_import(args: argparse.Namespace, config: AdjusterConfig) -> int:
    source = _read_json(args.document)
    if not isinstance(source, dict):
        print(f"{args.document}: expected a JSON object", file=sys.stderr)
        return 2

    document = WorldDocument(source)
    notifier = RecordingNotifier(echo=True)
    if document.type == "hazard":
        on_pre_create_actor(document, config, notifier)
    else:
        on_pre_create_item(document, config, notifier)

    if args.output:
        _write_json(args.output, document.source)
    else:
        print(json.dumps(document.source, ensure_ascii=False, indent=2))
    return 0


def _cmd_check(args: argparse.Namespace, config: AdjusterConfig) -> int:
    try:
        result = check_item_needs_adjustment(_read_json(args.document))
    except EntitySourceError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    print(json.dumps(result))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pwl-dc-adjuster",
        description="Adjust check DCs for Proficiency Without Level.",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_flat = sub.add_parser("flatten", help="bulk-adjust every document in a world export")
    p_flat.add_argument("world", type=Path)
    p_flat.add_argument("--yes", action="store_true", help="skip the confirmation prompt")
    p_flat.add_argument("--output", type=Path, default=None, help="write here instead of in place")
    p_flat.set_defaults(func=_cmd_flatten)

    p_imp = sub.add_parser("import", help="run the import hook on one document source")
    p_imp.add_argument("document", type=Path)
    p_imp.add_argument("--output", type=Path, default=None)
    p_imp.set_defaults(func=_cmd_import)

    p_chk = sub.add_parser("check", help="report whether a document needs adjustment")
    p_chk.add_argument("document", type=Path)
    p_chk.set_defaults(func=_cmd_check)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = AdjusterConfig.from_file(args.config) if args.config else AdjusterConfig.from_env()
    get_logger("pwl_dc_adjuster", level=config.log_level, stream=sys.stderr)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
