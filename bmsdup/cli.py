from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .checker import CheckerState, DuplicateChecker
from .engine import SqlEngine
from .logs import setup_logging
from .report import render_json, render_text
from .settings import Settings, ensure_app_dirs, load_prefs


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="List duplicate songs in an LR2 song.db or beatoraja songdata.db")
    ap.add_argument("db_path", nargs="?", type=Path, help="song.db (LR2) or songdata.db (beatoraja) to check")
    ap.add_argument("--headless", action="store_true", help="Print the duplicates instead of opening the window")
    ap.add_argument("--json", action="store_true", help="With --headless, print JSON instead of text")
    return ap


def run_headless(db_path: Path, settings: Settings, as_json: bool = False) -> int:
    checker = DuplicateChecker(SqlEngine())
    checker.initialize()
    checker.check_path(db_path)
    if checker.state is not CheckerState.DONE:
        print(checker.status, file=sys.stderr)
        return 1
    out = render_json(checker.songs, settings) if as_json else render_text(checker.songs, settings)
    print(out)
    return 0


def run_gui(settings: Settings, db_path: Optional[Path] = None) -> int:
    from PySide6 import QtWidgets

    from .gui.main_window import MainWindow

    app = QtWidgets.QApplication(sys.argv)
    w = MainWindow(settings, DuplicateChecker(SqlEngine()), initial_path=db_path)
    w.show()
    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    settings = Settings()
    ensure_app_dirs(settings)
    log = setup_logging(settings)
    load_prefs(settings)
    if args.headless:
        if args.db_path is None:
            ap.error("--headless requires a database path")
        log.info(f"Headless check of {args.db_path}")
        return run_headless(args.db_path, settings, as_json=args.json)
    return run_gui(settings, args.db_path)
