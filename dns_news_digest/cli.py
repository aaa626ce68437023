"""Command-line entry point for DNS News Digest.

Meant to be invoked once per schedule tick (cron, GitHub Actions). Exits 0
when the run completes, including when there is nothing to send, and 1 on
any configuration, fetch, parse or delivery error.
"""

import argparse
import sys

from .config import Config
from .errors import DigestError
from .logging_config import (
    create_execution_logger,
    generate_execution_id,
    setup_structured_logging,
)
from .pipeline import run_digest


def main(argv: list[str] | None = None) -> int:
    """Run one digest and return the process exit code."""
    parser = argparse.ArgumentParser(
        description="Post tagged RSS articles to a Slack webhook",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to LOG_LEVEL or INFO)",
    )
    args = parser.parse_args(argv)

    config = Config()
    setup_structured_logging(args.log_level or config.log_level)

    execution_id = generate_execution_id()
    main_logger = create_execution_logger("main", execution_id)
    main_logger.log_execution_start()

    try:
        result = run_digest(
            config.get_feed_config(), config.get_slack_config(), execution_id
        )
    except DigestError as e:
        main_logger.error(
            f"{type(e).__name__}: {e}",
            error_type=type(e).__name__,
            error=str(e),
        )
        main_logger.log_execution_end(success=False, error=str(e))
        return 1

    main_logger.log_execution_end(
        success=True,
        entries_found=result.entries_found,
        notification_sent=result.notification_sent,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
