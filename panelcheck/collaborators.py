"""Panel Check - External collaborators

Thin wrappers around the things this tool only reads from: shell commands,
the cPanel uapi/whmapi1 query tools, public DNS, and the local passwd
database. Each exposes a narrow method contract so tests can swap in fakes
that return canned text.
"""

import logging
import pwd
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import dns.exception
import dns.resolver

from .exceptions import CommandError
from .models import Quota
from .parsers import parse_field, parse_fields, parse_quota, parse_vhost_versions
from .patterns import DEFAULT_PUBLIC_RESOLVER, DEFAULT_TIMEOUT, DNS_TIMEOUT

log = logging.getLogger(__name__)


class CommandRunner:
    """Runs a command and returns its stdout"""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> str:
        log.debug("Running %s", ' '.join(args))
        try:
            result = subprocess.run(
                list(args),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(f"{args[0]}: command not found") from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(f"{args[0]}: timed out after {self.timeout:g}s") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise CommandError(f"{args[0]}: {detail}")
        return result.stdout


class ControlPanelApi:
    """cPanel account queries via uapi and whmapi1"""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def _query(self, args: Sequence[str]) -> str:
        try:
            return self.runner.run(args)
        except CommandError as e:
            log.warning("Control panel query failed: %s", e)
            return ''

    def _uapi(self, user: str, module: str, function: str) -> str:
        return self._query(['uapi', f'--user={user}', module, function])

    def _whmapi(self, function: str, **params: str) -> str:
        return self._query(['whmapi1', function] + [f'{k}={v}' for k, v in params.items()])

    def get_main_domain(self, user: str) -> Optional[str]:
        return parse_field(self._uapi(user, 'Domains', 'get_main_domain'), 'main_domain')

    def domain_owner(self, domain: str) -> Optional[str]:
        return parse_field(self._whmapi('getdomainowner', domain=domain), 'user')

    def quota_info(self, user: str) -> Quota:
        return parse_quota(self._uapi(user, 'Quota', 'get_quota_info'))

    def php_vhost_versions(self, user: str) -> Dict[str, str]:
        return parse_vhost_versions(self._uapi(user, 'LangPHP', 'php_get_vhost_versions'))

    def zone_record(self, domain: str, record_type: str = 'A') -> List[str]:
        output = self._whmapi('getzonerecord', domain=domain, name=f'{domain}.', type=record_type)
        return parse_fields(output, 'address')


class PublicResolver:
    """Non-authoritative A lookups against a public nameserver"""

    def __init__(self, nameserver: str = DEFAULT_PUBLIC_RESOLVER, timeout: float = DNS_TIMEOUT):
        self.nameserver = nameserver
        self.resolver = dns.resolver.Resolver(configure=False)
        self.resolver.nameservers = [nameserver]
        self.resolver.lifetime = timeout

    def resolve(self, domain: str) -> List[str]:
        try:
            answer = self.resolver.resolve(domain, 'A')
        except dns.exception.DNSException as e:
            log.debug("Public lookup of %s via %s failed: %r", domain, self.nameserver, e)
            return []
        return [rr.to_text() for rr in answer]


class SystemAccounts:
    """Local system account lookups"""

    def exists(self, name: str) -> bool:
        try:
            pwd.getpwnam(name)
        except KeyError:
            return False
        return True

    def home_dir(self, name: str) -> Path:
        try:
            return Path(pwd.getpwnam(name).pw_dir)
        except KeyError:
            return Path('/home') / name
