#!/usr/bin/env python3
"""healthcheck - cPanel server health overview"""

import argparse
from pathlib import Path

from rich.console import Console

from panelcheck import VERSION, HealthCheck, print_health_report
from panelcheck.collaborators import CommandRunner
from panelcheck.logger import configure_logging
from panelcheck.patterns import ACCESS_LOG_DATE_FORMAT, DEFAULT_TIMEOUT


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="healthcheck",
        description="Summarize load, OOM events, mail queue, Apache traffic and PHP-FPM limits",
    )
    parser.add_argument("--date-format", default=ACCESS_LOG_DATE_FORMAT,
                        help="strftime format of the access log date (default: %(default)s)")
    parser.add_argument("--root", type=Path, default=Path("/"),
                        help="Filesystem root the log paths are read from")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help="Seconds to wait on each system command")
    parser.add_argument("--debug", action="store_true", help="Log collector details to stderr")
    parser.add_argument("--version", action="version", version=f"healthcheck v{VERSION}")

    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.debug else "WARNING")

    check = HealthCheck(
        CommandRunner(timeout=args.timeout),
        root=args.root,
        date_format=args.date_format,
    )
    print_health_report(check.run(), Console())


if __name__ == "__main__":
    main()
