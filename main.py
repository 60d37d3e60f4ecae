"""
Echoes - Rhythm duel game core

Entry point: plays one scripted session headless and reports the result.
"""

import argparse
import logging
import sys

from PySide6.QtCore import QCoreApplication

from config import init_config, APP_NAME, APP_VERSION


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="echoes", description="Run an Echoes session headless.")
    parser.add_argument("--realtime", action="store_true",
                        help="Drive the session from the real-time frame clock")
    parser.add_argument("--seed", type=int, default=None, help="Autopilot random seed")
    parser.add_argument("--verbose", action="store_true", help="Log per-action outcomes")
    return parser.parse_args(argv)


def main(argv: list[str] = None) -> int:
    """Main entry point for Echoes."""
    args = parse_args(sys.argv[1:] if argv is None else argv)

    # Initialize configuration, directories and logging
    init_config(logging.DEBUG if args.verbose else logging.INFO)

    # Create application
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    from app import EchoesApp
    echoes = EchoesApp(seed=args.seed)

    if args.realtime:
        echoes.event_bus.session_completed.connect(lambda _summary: app.quit())
        echoes.start()
        app.exec()
        final = echoes.final
    else:
        final = echoes.run_headless()

    if final is None:
        logging.getLogger(__name__).warning("Session ended without a final result")
        return 1

    logging.getLogger(__name__).info(
        "Final: winner=%s p1=%d p2=%d", final.winner.value, final.totals.p1, final.totals.p2
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
