"""Panel Check - Report output"""

from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import AccountProfile, FrequencyTable, Quota, Section
from .patterns import DEFAULT_PUBLIC_RESOLVER, NOT_AVAILABLE, UNLIMITED

RULE = "=" * 53
PUBLIC_RESOLVER_NAMES = {'8.8.8.8': 'Google DNS', '1.1.1.1': 'Cloudflare DNS'}


def format_gigabytes(megabytes: Optional[float]) -> str:
    if megabytes is None:
        return NOT_AVAILABLE
    return f"{megabytes / 1024:.2f}GB"


def format_quota_limit(quota: Quota) -> str:
    if quota.unlimited:
        return UNLIMITED
    return format_gigabytes(quota.limit_mb)


def profile_lines(profile: AccountProfile, resolver: str = DEFAULT_PUBLIC_RESOLVER):
    source = PUBLIC_RESOLVER_NAMES.get(resolver, resolver)
    return [
        f"cPanel User: {profile.username}",
        f"cPanel Domain: {profile.primary_domain}",
        f"Local A Record (in cPanel Zone): {profile.local_a_record}",
        f"Public A Record (from {source}): {profile.public_a_record}",
        f"Disk space used: {format_gigabytes(profile.quota.used_mb)}",
        f"Disk space allocated: {format_quota_limit(profile.quota)}",
        f"PHP Version: {profile.php_version}",
        f"PHP Log Location: {profile.php_log_path}",
    ]


def print_profile(profile: AccountProfile, console: Console, resolver: str = DEFAULT_PUBLIC_RESOLVER):
    for line in profile_lines(profile, resolver):
        console.print(line, markup=False, highlight=False, soft_wrap=True)


def print_banner(message: str, console: Console):
    console.print(RULE, style="bold blue", highlight=False)
    console.print(f"[bold blue]==[/] [bold yellow]{escape(message)}[/]", highlight=False)
    console.print(RULE, style="bold blue", highlight=False)


def print_table(table: FrequencyTable, console: Console):
    rendered = Table(box=box.ROUNDED)
    rendered.add_column("Count", style="white", justify="right")
    rendered.add_column(table.label, style="cyan", overflow="fold")
    for key, count in table.entries:
        rendered.add_row(str(count), escape(key))
    console.print(rendered)


def print_section(section: Section, console: Console):
    console.print()
    print_banner(section.title, console)
    for block in section.blocks:
        if block.heading:
            console.print(f"{escape(block.heading)}:", style="bold yellow", highlight=False)
        style = "red" if block.error else None
        for line in block.lines:
            console.print(line, style=style, markup=False, highlight=False, soft_wrap=True)
        if block.table:
            print_table(block.table, console)
        console.print()


def print_health_report(sections: Iterable[Section], console: Console):
    print_banner("Health check start.", console)
    for section in sections:
        print_section(section, console)
    print_banner("Health check complete.", console)
