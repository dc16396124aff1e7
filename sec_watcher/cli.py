"""Command-line interface for SEC Filing Watcher."""

import argparse
import logging
import sys

from pydantic import ValidationError

from sec_watcher.client import SECClient
from sec_watcher.errors import ConfigurationError, NotificationError, RegistryError, WatchCancelled
from sec_watcher.logging_config import configure_logging
from sec_watcher.notifier import EmailNotifier
from sec_watcher.session import WatchSession
from sec_watcher.settings import WatcherSettings
from sec_watcher.watchlist import load_watchlist

logger = logging.getLogger("sec_watcher")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Email an alert whenever a watched company files with SEC EDGAR today"
    )
    parser.add_argument("recipient", help="Address that receives the alerts")
    parser.add_argument("sender", help="Address the alerts are sent from")
    parser.add_argument("password", help="SMTP credential of the sender (e.g. an app password)")
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entry point.

    Usage: python -m sec_watcher.cli you@example.com alerts@example.com APP_PASSWORD

    The watch list is the single *.csv file in SEC_WATCH_WATCHLIST_DIR
    (default: the current directory), one ticker per line, no header.
    """
    args = build_parser().parse_args(argv)

    try:
        settings = WatcherSettings()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level)

    # Must fail before any network call.
    try:
        tickers = load_watchlist(settings.watchlist_dir, settings.watchlist_pattern)
    except ConfigurationError as e:
        logger.warning("%s", e)
        sys.exit(1)

    notifier = EmailNotifier(
        recipient=args.recipient,
        sender=args.sender,
        password=args.password,
        host=settings.smtp_host,
        port=settings.smtp_port,
    )

    with SECClient(settings) as client:
        try:
            session = WatchSession(settings, client, notifier, tickers)
            summary = session.run()
        except ConfigurationError as e:
            logger.error("Configuration error: %s", e)
            sys.exit(1)
        except (RegistryError, NotificationError) as e:
            logger.error("Stopping on error: %s", e)
            sys.exit(1)
        except (WatchCancelled, KeyboardInterrupt):
            logger.warning("Interrupted; stopping")
            sys.exit(130)

    logger.info(
        "Done: %d registrant(s), %d pass(es), %d alert(s)",
        summary.registrants,
        summary.passes,
        summary.alerts,
    )


if __name__ == "__main__":
    main()
