"""Command-line entry point: render the gift graph to SVG or print a summary.

Input JSON shape::

    {"users": [{"id", "name", "avatar", "color"}, ...],
     "gifts": [{"id", "sender_id", "receiver_id", "item", "timestamp", "tips",
                "comments": [{"id", "user_name", "text", "timestamp"}]}, ...]}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from gift_circulation.api import DEFAULT_HEIGHT, DEFAULT_WIDTH, render_svg
from gift_circulation.circulation import summarize
from gift_circulation.graph import build
from gift_circulation.layout import DEFAULT_MAX_TICKS, LayoutConfig
from gift_circulation.models import Comment, Gift, User
from gift_circulation.renderers import SvgRenderer
from gift_circulation.store import GiftStoreError, sample_store

logger = logging.getLogger(__name__)


class DatasetError(ValueError):
    """Input JSON is missing fields or has the wrong shape."""


def parse_dataset(data: dict) -> tuple[list[User], list[Gift]]:
    try:
        users = [
            User(id=u["id"], name=u["name"], avatar=u.get("avatar", ""), color=u.get("color", "#999"))
            for u in data.get("users", [])
        ]
        gifts = [
            Gift(
                id=g["id"],
                sender_id=g["sender_id"],
                receiver_id=g["receiver_id"],
                item=g.get("item", ""),
                timestamp=int(g.get("timestamp", 0)),
                tips=int(g.get("tips", 0)),
                comments=tuple(
                    Comment(id=c["id"], user_name=c["user_name"], text=c["text"], timestamp=int(c.get("timestamp", 0)))
                    for c in g.get("comments", [])
                ),
            )
            for g in data.get("gifts", [])
        ]
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise DatasetError(f"malformed dataset: {exc!r}") from exc
    for gift in gifts:
        if gift.tips < 0:
            raise DatasetError(f"gift {gift.id!r} has negative tips")
    return users, gifts


def _load(args: argparse.Namespace) -> tuple[list[User], list[Gift]]:
    if args.sample:
        store = sample_store()
        return store.list_users(), store.list_gifts()
    text = Path(args.input).read_text() if args.input != "-" else sys.stdin.read()
    return parse_dataset(json.loads(text))


def _write(args: argparse.Namespace, text: str, suffix: str = "") -> None:
    if args.output:
        path = Path(args.output)
        if suffix and not path.suffix:
            path = path.with_suffix(suffix)
        path.write_text(text + "\n")
        logger.info("wrote %s", path)
    else:
        sys.stdout.write(text + "\n")


def cmd_render(args: argparse.Namespace) -> int:
    users, gifts = _load(args)
    config = LayoutConfig(seed=args.seed)
    renderer = SvgRenderer()
    _write(args, render_svg(users, gifts, args.width, args.height, args.ticks, config, renderer), renderer.suffix)
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    users, gifts = _load(args)
    summary = summarize(build(users, gifts), max_cycle_length=args.max_cycle)
    _write(args, json.dumps(summary.as_dict(), indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gift-circulation", description=__doc__.splitlines()[0])
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_source(p: argparse.ArgumentParser) -> None:
        src = p.add_mutually_exclusive_group(required=True)
        src.add_argument("-i", "--input", help="dataset JSON file, or - for stdin")
        src.add_argument("--sample", action="store_true", help="use the built-in sample data")
        p.add_argument("-o", "--output", help="write here instead of stdout")

    render = sub.add_parser("render", help="lay out the gift graph and emit SVG")
    add_source(render)
    render.add_argument("--width", type=float, default=DEFAULT_WIDTH)
    render.add_argument("--height", type=float, default=DEFAULT_HEIGHT)
    render.add_argument("--ticks", type=int, default=DEFAULT_MAX_TICKS, help="tick budget before giving up on settling")
    render.add_argument("--seed", type=int, default=None, help="seed for the jiggle RNG")
    render.set_defaults(func=cmd_render)

    summary = sub.add_parser("summary", help="print given/received totals, reciprocal pairs and cycles")
    add_source(summary)
    summary.add_argument("--max-cycle", type=int, default=None, help="longest cycle to report")
    summary.set_defaults(func=cmd_summary)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError, DatasetError, GiftStoreError) as exc:
        print(f"gift-circulation: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
