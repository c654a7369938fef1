"""CLI entry point."""

from __future__ import annotations

import argparse
from datetime import datetime
import logging
import os

from .config import Config, load_config, save_config
from .export import export_payload, write_export
from .flags import FlagStore
from .logging_utils import setup_logging
from .migration import FOLD_LEGACY_KEY, NORMALIZE_CONTACTS_KEY, MigrationRunner
from .models import SocialCircle
from .storage import ensure_structure
from .store import RecordStore, StoreError


def _add_common(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--config", default="contactnotes_config.yml", help="Config.")
    cmd.add_argument("--data-dir", help="Data directory.")


def _load(args) -> Config:
    if os.path.exists(args.config):
        cfg = load_config(args.config)
    else:
        cfg = Config(data_dir="")
    if args.data_dir:
        cfg.data_dir = args.data_dir
    return cfg


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="contactnotes")
    sub = parser.add_subparsers(dest="command")

    _add_common(sub.add_parser("migrate"))
    _add_common(sub.add_parser("stats"))

    export_cmd = sub.add_parser("export")
    _add_common(export_cmd)
    export_cmd.add_argument("--out", help="Export file path.")

    clear_cmd = sub.add_parser("clear")
    _add_common(clear_cmd)
    clear_cmd.add_argument(
        "--yes", action="store_true", help="Confirm deleting all contacts and notes."
    )

    circles_cmd = sub.add_parser("circles")
    _add_common(circles_cmd)
    circles_cmd.add_argument("--disable", help="Hide a circle.")
    circles_cmd.add_argument("--enable", help="Show a hidden circle.")
    circles_cmd.add_argument("--move", help="Circle to reorder.")
    circles_cmd.add_argument("--to", type=int, default=0, help="New position for --move.")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    cfg = _load(args)
    paths = ensure_structure(cfg.data_dir or os.getcwd())
    logger, _log_path = setup_logging(
        cfg.log_dir or paths["logs"],
        getattr(logging, cfg.log_level, logging.INFO),
        console_level=logging.WARNING,
    )
    logger.info("Command %s (data dir %s)", args.command, paths["root"])

    try:
        store = RecordStore.open(paths["records"])
        flags = FlagStore(paths["flags"])
    except StoreError as exc:
        logger.error("Could not open data: %s", exc)
        print(f"Startup issue: {exc}")
        return 1

    if args.command == "circles":
        prefs = cfg.circles
        try:
            if args.disable:
                prefs.disable(SocialCircle(args.disable))
            if args.enable:
                prefs.enable(SocialCircle(args.enable))
            if args.move:
                prefs.move(SocialCircle(args.move), args.to)
        except ValueError:
            print(f"Unknown circle. Use one of: {', '.join(c.value for c in SocialCircle)}")
            return 1
        if args.disable or args.enable or args.move:
            # --data-dir is a one-off override; only the preferences are persisted.
            stored = load_config(args.config) if os.path.exists(args.config) else Config(data_dir="")
            stored.circles = prefs
            save_config(args.config, stored)
        for circle in prefs.enabled_circles():
            print(circle.value)
        return 0

    notice = MigrationRunner(store, flags).run_once()
    if notice:
        print(f"Startup issue: {notice}")
        if args.command == "migrate":
            return 1

    if args.command == "migrate":
        for key in (FOLD_LEGACY_KEY, NORMALIZE_CONTACTS_KEY):
            print(f"{key}: {'done' if flags.get_bool(key) else 'pending'}")
        return 0

    if args.command == "stats":
        counts = store.counts()
        print(f"Contacts: {counts['contacts']}")
        print(f"Notes: {counts['notes']}")
        print(f"Legacy check-ins: {counts['legacy_check_ins']}")
        return 0

    if args.command == "export":
        now = datetime.now().astimezone()
        out = args.out or os.path.join(
            paths["exports"], f"{now.strftime('%Y-%m-%d')}--contacts-notes.json"
        )
        try:
            write_export(out, export_payload(store, now))
        except StoreError as exc:
            print(f"Export failed: {exc}")
            return 1
        print(f"Wrote {out}")
        return 0

    if args.command == "clear":
        if not args.yes:
            print("Refusing to clear data without --yes")
            return 1
        store.clear_all()
        try:
            store.save()
        except StoreError as exc:
            print(f"Clear failed: {exc}")
            return 1
        logger.info("Cleared all data")
        print("All contacts and notes deleted.")
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
