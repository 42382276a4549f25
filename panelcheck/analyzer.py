"""Panel Check - Server health collectors"""

import logging
import re
from collections import deque
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from . import traffic
from .collaborators import CommandRunner
from .exceptions import CommandError
from .models import FrequencyTable, Section
from .parsers import extract_bracketed_ip, extract_pool
from .patterns import (
    ACCESS_LOG_DATE_FORMAT, APACHE_LAYOUTS, APACHE_LIMIT_PATTERN, APACHE_LIMIT_TAIL,
    EA4_MARKER, EXIM_MAINLOG, EXIM_QUEUE_COMMAND, EXIM_RATE_LIMIT_MARKER,
    MAX_CHILDREN_MARKER, OOM_MARKER, OOM_PATTERN, OOM_TAIL, PHP_FPM_LOG,
    PHP_INSTALL_GLOB, SYSTEM_COMMANDS, SYSTEM_LOG, TOP_POOLS, TOP_RATE_LIMITED,
)

log = logging.getLogger(__name__)


def _lines(path: Path) -> Iterator[str]:
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        for line in f:
            yield line.rstrip('\n')


class HealthCheck:
    """Runs every collector against the local server, one section each"""

    def __init__(self, runner: CommandRunner, root: Path = Path('/'),
                 now: Optional[datetime] = None, date_format: str = ACCESS_LOG_DATE_FORMAT):
        self.runner = runner
        self.root = Path(root)
        self.now = now
        self.date_format = date_format
        self.oom_pattern = re.compile(OOM_PATTERN, re.IGNORECASE)
        self.apache_limit_pattern = re.compile(APACHE_LIMIT_PATTERN, re.IGNORECASE)

    def path(self, absolute: str) -> Path:
        return self.root / absolute.lstrip('/')

    @property
    def collectors(self) -> List[Callable[[], Section]]:
        return [
            self.system_snapshot,
            self.critical_logs,
            self.mail_status,
            self.web_traffic,
            self.php_fpm,
        ]

    def run(self) -> List[Section]:
        sections = []
        for collector in self.collectors:
            try:
                sections.append(collector())
            except OSError as e:
                log.warning("%s failed: %s", collector.__name__, e)
                section = Section(title=collector.__name__.replace('_', ' ').upper())
                section.add(lines=[f"Unable to collect this section: {e}"], error=True)
                sections.append(section)
        return sections

    def _command(self, args: List[str]) -> List[str]:
        try:
            return self.runner.run(args).rstrip('\n').splitlines()
        except CommandError as e:
            log.warning("%s", e)
            return [f"Unavailable ({e})"]

    def system_snapshot(self) -> Section:
        section = Section(title='BASIC SYSTEM INFO')
        for heading, args in SYSTEM_COMMANDS:
            section.add(heading, self._command(args))
        return section

    def critical_logs(self) -> Section:
        section = Section(title='SYSTEM LOGS')
        heading = 'Recent OOM (Out Of Memory) Events'
        messages = self.path(SYSTEM_LOG)

        if not messages.is_file():
            section.add(heading, [f"System log not found at {messages}."])
            return section

        seen_oom = False
        recent = deque(maxlen=OOM_TAIL)
        for line in _lines(messages):
            if self.oom_pattern.search(line):
                recent.append(line)
                seen_oom = seen_oom or OOM_MARKER in line.lower()

        if seen_oom:
            section.add(heading, recent)
        else:
            section.add(heading, [f"No OOM events found in {messages}."])
        return section

    def mail_status(self) -> Section:
        section = Section(title='EMAIL (EXIM) STATUS')
        section.add('Outgoing Emails in Queue', self._command(EXIM_QUEUE_COMMAND))

        heading = 'Top IPs Triggering Connection Rate Limiting'
        mainlog = self.path(EXIM_MAINLOG)
        if not mainlog.is_file():
            section.add(heading, [f"Exim log not found at {mainlog}."])
            return section

        ips = []
        for line in _lines(mainlog):
            if EXIM_RATE_LIMIT_MARKER in line:
                ip = extract_bracketed_ip(line)
                if ip:
                    ips.append(ip)

        table = FrequencyTable.from_keys(ips, TOP_RATE_LIMITED, label='IP Address')
        if table:
            section.add(heading, table=table)
        else:
            section.add(heading, ["No recent connection rate-limiting events found."])
        return section

    def apache_layout(self) -> dict:
        if self.path(EA4_MARKER).is_file():
            return APACHE_LAYOUTS['ea4']
        return APACHE_LAYOUTS['ea3']

    def web_traffic(self) -> Section:
        section = Section(title='APACHE WEB SERVER ANALYSIS')
        layout = self.apache_layout()
        domlogs = self.path(layout['domlogs'])
        error_log = self.path(layout['error_log'])

        if not domlogs.is_dir():
            section.add(lines=[f"Apache domlogs directory not found at {domlogs}"], error=True)
            return section

        token = traffic.date_token(self.now, self.date_format)
        window = traffic.load_window(domlogs, token)
        if not window:
            section.add(lines=["No Apache traffic recorded yet for today."])
            return section

        section.add('Top 15 IPs Hitting Server Today', table=traffic.top_ips(window))
        section.add('Top 10 Domains by POST Requests Today',
                    table=traffic.top_domains_by_method(window, 'POST'))
        section.add('Top 10 Domains by GET Requests Today',
                    table=traffic.top_domains_by_method(window, 'GET'))
        section.add('Top 10 URIs Receiving POST Requests', table=traffic.top_post_uris(window))
        section.add('Top 10 Suspected Bot Hits by Domain', table=traffic.top_bot_domains(window))

        heading = 'Recent Apache Server Limit Errors'
        if not error_log.is_file():
            section.add(heading, [f"Apache error log not found at {error_log}"])
            return section

        recent = deque(
            (line for line in _lines(error_log) if self.apache_limit_pattern.search(line)),
            maxlen=APACHE_LIMIT_TAIL,
        )
        section.add(heading, recent or ["No server limit errors found."])
        return section

    def php_fpm(self) -> Section:
        section = Section(title='PHP-FPM STATUS')
        installs = sorted(self.root.glob(PHP_INSTALL_GLOB.lstrip('/')))
        checked = 0

        for php_dir in installs:
            heading = f"Checking {php_dir.name}..."
            log_file = php_dir / PHP_FPM_LOG
            try:
                if not php_dir.is_dir():
                    continue
                checked += 1
                if not log_file.is_file():
                    section.add(heading, ["Log file not found for this version."])
                    continue
                pools = [extract_pool(line) for line in _lines(log_file) if MAX_CHILDREN_MARKER in line]
            except OSError as e:
                checked += 1
                log.warning("Cannot read %s: %s", log_file, e)
                section.add(heading, [f"Unable to read {log_file}: {e}"], error=True)
                continue

            table = FrequencyTable.from_keys(pools, TOP_POOLS, label='Pool')
            if table:
                section.add(heading, table=table)
            else:
                section.add(heading, ["No 'max_children' errors found."])

        if not checked:
            section.add(lines=["No EasyApache PHP versions installed."])
        return section
