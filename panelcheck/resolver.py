"""Panel Check - Account identity resolution"""

import logging
from pathlib import Path
from typing import Tuple

from .collaborators import ControlPanelApi, PublicResolver, SystemAccounts
from .exceptions import ResolutionError, UsageError
from .models import AccountProfile
from .patterns import (
    LOCAL_RECORD_MISSING, PHP_LOG_CANDIDATES, PHP_LOG_MISSING,
    PHP_VERSION_DEFAULT, PUBLIC_RECORD_MISSING,
)

log = logging.getLogger(__name__)


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError as e:
        log.debug("Cannot stat %s: %s", path, e)
        return False


class IdentityResolver:
    """Turns a username or domain into an AccountProfile"""

    def __init__(self, api: ControlPanelApi, public_dns: PublicResolver, accounts: SystemAccounts):
        self.api = api
        self.public_dns = public_dns
        self.accounts = accounts

    def identify(self, token: str) -> Tuple[str, str]:
        """Return (username, primary domain) for a username or domain token.

        A token naming an existing system account is always a username, even
        when the same string is also a hosted domain.
        """
        token = (token or '').strip()
        if not token:
            raise UsageError("a cPanel username or domain name is required")

        if self.accounts.exists(token):
            username = token
            domain = self.api.get_main_domain(username)
            log.debug("%s is a system account, main domain %s", username, domain)
        else:
            username = self.api.domain_owner(token)
            if not username:
                raise ResolutionError(f"Could not find a cPanel user for the domain '{token}'.")
            domain = token
            log.debug("%s is owned by %s", domain, username)

        if not username or not domain:
            raise ResolutionError(f"Could not resolve user or domain for '{token}'.")
        return username, domain

    def local_a_record(self, domain: str) -> str:
        records = self.api.zone_record(domain, 'A')
        return records[0] if records else LOCAL_RECORD_MISSING

    def public_a_record(self, domain: str) -> str:
        records = self.public_dns.resolve(domain)
        return ', '.join(records) if records else PUBLIC_RECORD_MISSING

    def php_version(self, username: str, domain: str) -> str:
        return self.api.php_vhost_versions(username).get(domain) or PHP_VERSION_DEFAULT

    def php_log_path(self, username: str, domain: str) -> str:
        home = self.accounts.home_dir(username)
        for candidate in PHP_LOG_CANDIDATES:
            path = home / candidate.format(domain=domain)
            if _is_file(path):
                return str(path)
        return PHP_LOG_MISSING

    def resolve(self, token: str) -> AccountProfile:
        username, domain = self.identify(token)
        return AccountProfile(
            username=username,
            primary_domain=domain,
            local_a_record=self.local_a_record(domain),
            public_a_record=self.public_a_record(domain),
            quota=self.api.quota_info(username),
            php_version=self.php_version(username, domain),
            php_log_path=self.php_log_path(username, domain),
        )
