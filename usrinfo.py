#!/usr/bin/env python3
"""usrinfo - cPanel user and domain lookup"""

import argparse
import sys

from rich.console import Console

from panelcheck import VERSION, IdentityResolver, print_profile
from panelcheck.collaborators import CommandRunner, ControlPanelApi, PublicResolver, SystemAccounts
from panelcheck.exceptions import ResolutionError, UsageError
from panelcheck.logger import configure_logging
from panelcheck.patterns import DEFAULT_PUBLIC_RESOLVER, DEFAULT_TIMEOUT, DNS_TIMEOUT

USAGE = "Usage: usrinfo <cpanel_username|domain_name>"


def build_resolver(args) -> IdentityResolver:
    return IdentityResolver(
        api=ControlPanelApi(CommandRunner(timeout=args.timeout)),
        public_dns=PublicResolver(args.resolver, timeout=min(args.timeout, DNS_TIMEOUT)),
        accounts=SystemAccounts(),
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="usrinfo",
        description="Show the owner, main domain, DNS, quota and PHP setup of a cPanel account",
    )
    parser.add_argument("target", nargs="?", default="", help="cPanel username or domain name")
    parser.add_argument("--resolver", default=DEFAULT_PUBLIC_RESOLVER,
                        help="Public nameserver to compare the local zone against")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help="Seconds to wait on each control panel query")
    parser.add_argument("--debug", action="store_true", help="Log lookups to stderr")
    parser.add_argument("--version", action="version", version=f"usrinfo v{VERSION}")

    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.debug else "WARNING")

    console = Console(highlight=False)
    errors = Console(stderr=True, highlight=False)

    try:
        profile = build_resolver(args).resolve(args.target)
    except UsageError:
        errors.print(USAGE, markup=False)
        sys.exit(1)
    except ResolutionError as e:
        errors.print(f"Error: {e}", markup=False)
        sys.exit(1)

    print_profile(profile, console, resolver=args.resolver)


if __name__ == "__main__":
    main()
