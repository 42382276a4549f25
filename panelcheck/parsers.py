"""Panel Check - Text parsers for control panel and log output

Every function here takes raw text and returns a fact, or None / an empty
collection when the fact is absent. No I/O happens in this module.
"""

import ipaddress
import re
from typing import Dict, List, Optional

from .models import AccessHit, Quota
from .patterns import ACCESS_LINE_PATTERN, EXIM_IP_COLUMN, SSL_LOG_SUFFIX

KEY_VALUE = re.compile(r'^(?P<key>[A-Za-z0-9_]+):\s*(?P<value>.*?)\s*$')
BRACKETED = re.compile(r'\[([0-9A-Fa-f:.]+)\]')
TIMESTAMP = re.compile(r'\[([^\]]+)\]')
POOL = re.compile(r'\[pool (\S+?)\]')
ACCESS_LINE = re.compile(ACCESS_LINE_PATTERN)

NULL_VALUES = ('', '~', 'null')


def _clean(value: str) -> Optional[str]:
    value = value.strip().strip('"').strip("'")
    if value in NULL_VALUES:
        return None
    return value


def parse_fields(text: str, key: str) -> List[str]:
    """All non-null values of ``key: value`` lines, in output order"""
    values = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith('- '):
            stripped = stripped[2:].lstrip()
        match = KEY_VALUE.match(stripped)
        if not match or match.group('key') != key:
            continue
        value = _clean(match.group('value'))
        if value is not None:
            values.append(value)
    return values


def parse_field(text: str, key: str) -> Optional[str]:
    values = parse_fields(text, key)
    return values[0] if values else None


def parse_vhost_versions(text: str) -> Dict[str, str]:
    """Map vhost -> PHP version from a YAML list of vhost records.

    Keys are only read at the top level of each list item so nested
    mappings (pool parameters, version source) cannot leak into a record.
    """
    records = []
    item_indent = None
    current = None

    for line in text.splitlines():
        stripped = line.lstrip()
        indent = len(line) - len(stripped)

        # uapi emits both "- key: value" and a bare "-" followed by the keys
        if stripped == '-' or stripped.startswith('- '):
            if item_indent is None:
                item_indent = indent
            if indent == item_indent:
                current = {}
                records.append(current)
                stripped = stripped[1:].lstrip()
                indent = len(line) - len(stripped)

        if current is None or indent != item_indent + 2:
            continue

        match = KEY_VALUE.match(stripped)
        if match and match.group('key') in ('vhost', 'version'):
            value = _clean(match.group('value'))
            if value is not None:
                current[match.group('key')] = value

    return {r['vhost']: r['version'] for r in records if 'vhost' in r and 'version' in r}


def _megabytes(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def parse_quota(text: str) -> Quota:
    used = parse_field(text, 'megabytes_used')
    limit = parse_field(text, 'megabytes_limit')
    if limit == 'unlimited':
        return Quota(used_mb=_megabytes(used), unlimited=True)
    return Quota(used_mb=_megabytes(used), limit_mb=_megabytes(limit))


def domain_from_log_name(name: str) -> str:
    if name.endswith(SSL_LOG_SUFFIX):
        return name[:-len(SSL_LOG_SUFFIX)]
    return name


def parse_access_line(line: str, domain: str) -> Optional[AccessHit]:
    line = line.strip()
    if not line:
        return None

    match = ACCESS_LINE.match(line)
    if match:
        return AccessHit(
            domain=domain,
            ip=match.group('ip'),
            method=match.group('method'),
            uri=match.group('uri'),
            raw=line,
            timestamp=match.group('timestamp'),
        )

    # Unparseable request: still count the hit against its source
    stamp = TIMESTAMP.search(line)
    return AccessHit(
        domain=domain,
        ip=line.split()[0],
        method=None,
        uri=None,
        raw=line,
        timestamp=stamp.group(1) if stamp else None,
    )


def _is_address(token: str) -> bool:
    try:
        ipaddress.ip_address(token)
    except ValueError:
        return False
    return True


def extract_bracketed_ip(line: str) -> Optional[str]:
    """Source IP of an exim rate-limit line, e.g. ``[203.0.113.9]:41234``

    Bracketed tokens that are not addresses, such as the ``[pid]`` that
    ``+pid`` log selectors add, are skipped.
    """
    fields = line.split()
    if len(fields) > EXIM_IP_COLUMN:
        match = BRACKETED.match(fields[EXIM_IP_COLUMN])
        if match and _is_address(match.group(1)):
            return match.group(1)

    for match in BRACKETED.finditer(line):
        if _is_address(match.group(1)):
            return match.group(1)
    return None


def extract_pool(line: str) -> str:
    """Classification field of a php-fpm max_children warning"""
    match = POOL.search(line)
    if match:
        return match.group(1)

    fields = line.strip().split(': ')
    if len(fields) > 2:
        return fields[2]
    return fields[-1]
