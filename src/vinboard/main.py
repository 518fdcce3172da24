#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import fields as dataclass_fields
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from vinboard.app import (
    bottle_status,
    create_bottle,
    delete_bottle,
    get_bottle,
    get_dashboard,
    import_bottles_payload,
    list_bottles,
    open_bottle,
    opened_history,
    seed_demo,
    update_bottle,
)
from vinboard.config import ConfigurationError, configure_logging
from vinboard.domain.cellar import BottleQuery
from vinboard.domain.model import BottleStatus, CellarError, ImportMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from vinboard.domain.model import BottleRecord

log = logging.getLogger(__name__)

_AUTO_MODE = "auto"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage a VinBoard wine cellar")
    parser.add_argument(
        "--owner",
        type=str,
        help="Owner id to act on (defaults to VINBOARD_OWNER_ID or local-dev)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Import bottles from a JSON file")
    importer.add_argument("file", type=Path, help="Path to a JSON bottle export")
    importer.add_argument(
        "--mode",
        choices=[str(ImportMode.MERGE), str(ImportMode.SYNC), _AUTO_MODE],
        default=_AUTO_MODE,
        help="Quantity handling for existing bottles (default: %(default)s)",
    )

    listing = subparsers.add_parser("list", help="List bottles with their drinking status")
    listing.add_argument("--q", type=str, help="Free-text search")
    listing.add_argument(
        "--status",
        choices=[str(status) for status in BottleStatus],
        help="Only show bottles with this status",
    )
    listing.add_argument("--color", type=str, help="Only show bottles of this color")
    listing.add_argument("--type", type=str, help="Only show bottles of this type")
    listing.add_argument("--confidence", type=str, help="Only show this window confidence")
    listing.add_argument("--window-source", type=str, help="Only show this window source")
    listing.add_argument("--location", type=str, help="Only show this storage location")
    listing.add_argument("--year", type=int, help="Evaluate status as of this year")

    dashboard = subparsers.add_parser("dashboard", help="Show counts per status bucket")
    dashboard.add_argument("--year", type=int, help="Evaluate status as of this year")

    opener = subparsers.add_parser("open", help="Open bottles and log them in the history")
    opener.add_argument("bottle_id", type=str, help="Id of the bottle to open")
    opener.add_argument("--quantity", type=int, default=1, help="Bottles opened (default: 1)")
    opener.add_argument("--notes", type=str, help="Tasting notes")
    opener.add_argument("--rating", type=int, help="Rating on a 0-100 scale")

    adder = subparsers.add_parser("add", help="Add a bottle by hand")
    adder.add_argument("external_key", type=str, help="Unique key for the new bottle")
    adder.add_argument(
        "--set",
        dest="assignments",
        metavar="FIELD=VALUE",
        type=_field_assignment,
        action="append",
        default=[],
        help="Bottle field to fill in (repeatable)",
    )

    show = subparsers.add_parser("show", help="Show one bottle with its drinking status")
    show.add_argument("bottle_id", type=str, help="Id of the bottle to show")
    show.add_argument("--year", type=int, help="Evaluate status as of this year")

    editor = subparsers.add_parser("edit", help="Edit bottle fields or adjust its stock")
    editor.add_argument("bottle_id", type=str, help="Id of the bottle to edit")
    editor.add_argument(
        "--set",
        dest="assignments",
        metavar="FIELD=VALUE",
        type=_field_assignment,
        action="append",
        default=[],
        help="Bottle field to overwrite (repeatable)",
    )
    editor.add_argument(
        "--adjust",
        type=int,
        default=0,
        help="Add (or with a negative value remove) bottles from the stock",
    )

    delete = subparsers.add_parser("delete", help="Delete a bottle and its opened history")
    delete.add_argument("bottle_id", type=str, help="Id of the bottle to delete")

    subparsers.add_parser("history", help="Show the opened-bottle history")
    subparsers.add_parser("seed", help="Add demo bottles to an empty cellar")

    return parser.parse_args(list(argv))


def _load_payload(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def _field_assignment(text: str) -> tuple[str, str]:
    name, separator, value = text.partition("=")
    if not separator or not name.strip():
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    return name.strip(), value


def _bottle_dict(bottle: BottleRecord) -> dict[str, object]:
    return {field.name: getattr(bottle, field.name) for field in dataclass_fields(bottle)}


def _import_mode(value: str) -> ImportMode | None:
    return None if value == _AUTO_MODE else ImportMode(value)


def _query(args: argparse.Namespace) -> BottleQuery:
    return BottleQuery(
        q=args.q,
        status=BottleStatus(args.status) if args.status else None,
        color=args.color,
        type=args.type,
        confidence=args.confidence,
        window_source=args.window_source,
        location=args.location,
    )


def _emit(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _run(args: argparse.Namespace, payload: object) -> None:
    owner = args.owner
    if args.command == "import":
        report = import_bottles_payload(payload, owner_id=owner, mode=_import_mode(args.mode))
        _emit(report.to_dict())
    elif args.command == "list":
        rows = list_bottles(owner_id=owner, query=_query(args), now_year=args.year)
        _emit(
            [
                {
                    "id": bottle.id,
                    "externalKey": bottle.external_key,
                    "producer": bottle.producer,
                    "wine": bottle.wine,
                    "vintage": bottle.vintage,
                    "quantity": bottle.quantity,
                    "status": str(status.status),
                    "reason": status.reason,
                    "window": status.window_label,
                    "peak": status.peak_label,
                }
                for bottle, status in rows
            ]
        )
    elif args.command == "dashboard":
        _emit(get_dashboard(owner_id=owner, now_year=args.year).to_dict())
    elif args.command == "open":
        opened = open_bottle(
            args.bottle_id,
            owner_id=owner,
            quantity=args.quantity,
            tasting_notes=args.notes,
            rating_100=args.rating,
        )
        log.info("Recorded opened bottle %s", opened.id)
    elif args.command == "add":
        values = {**dict(args.assignments), "external_key": args.external_key}
        _emit(_bottle_dict(create_bottle(values, owner_id=owner)))
    elif args.command == "show":
        bottle = get_bottle(args.bottle_id, owner_id=owner)
        status = bottle_status(bottle, now_year=args.year)
        _emit(
            {
                **_bottle_dict(bottle),
                "status": str(status.status),
                "reason": status.reason,
                "window": status.window_label,
                "peak": status.peak_label,
            }
        )
    elif args.command == "edit":
        bottle = update_bottle(
            args.bottle_id,
            dict(args.assignments),
            owner_id=owner,
            quantity_delta=args.adjust,
        )
        _emit(_bottle_dict(bottle))
    elif args.command == "delete":
        delete_bottle(args.bottle_id, owner_id=owner)
    elif args.command == "history":
        _emit(
            [
                {
                    "id": record.id,
                    "bottleId": record.bottle_id,
                    "producer": record.producer,
                    "wine": record.wine,
                    "vintage": record.vintage,
                    "openedAt": record.opened_at.isoformat(),
                    "quantityOpened": record.quantity_opened,
                    "tastingNotes": record.tasting_notes,
                    "rating100": record.rating_100,
                }
                for record in opened_history(owner_id=owner)
            ]
        )
    elif args.command == "seed":
        added = seed_demo(owner_id=owner)
        log.info("Added %s demo bottles", added)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        payload = _load_payload(parsed_args.file) if parsed_args.command == "import" else None
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args, payload)
    except (CellarError, ConfigurationError, ValueError) as exc:
        log.error(f"{parsed_args.command} failed: {exc}")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()
