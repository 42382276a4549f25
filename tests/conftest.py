import io
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from rich.console import Console

from panelcheck.exceptions import CommandError
from panelcheck.models import Quota


class FakeRunner:
    """Returns canned stdout per command name; unknown commands fail."""

    def __init__(self, outputs: Optional[Dict[str, str]] = None):
        self.outputs = outputs or {}
        self.calls: List[List[str]] = []

    def run(self, args):
        self.calls.append(list(args))
        key = ' '.join(args)
        for prefix, output in self.outputs.items():
            if key.startswith(prefix):
                return output
        raise CommandError(f"{args[0]}: command not found")


class FakeApi:
    def __init__(self, main_domains=None, owners=None, quotas=None, php=None, zones=None):
        self.main_domains = main_domains or {}
        self.owners = owners or {}
        self.quotas = quotas or {}
        self.php = php or {}
        self.zones = zones or {}

    def get_main_domain(self, user):
        return self.main_domains.get(user)

    def domain_owner(self, domain):
        return self.owners.get(domain)

    def quota_info(self, user):
        return self.quotas.get(user, Quota())

    def php_vhost_versions(self, user):
        return self.php.get(user, {})

    def zone_record(self, domain, record_type='A'):
        return self.zones.get(domain, [])


class FakeDns:
    def __init__(self, answers=None):
        self.answers = answers or {}

    def resolve(self, domain):
        return self.answers.get(domain, [])


class FakeAccounts:
    def __init__(self, homes: Dict[str, Path]):
        self.homes = homes

    def exists(self, name):
        return name in self.homes

    def home_dir(self, name):
        return self.homes.get(name, Path('/nonexistent') / name)


@pytest.fixture()
def console_output():
    """A (console, buffer) pair whose output is plain text."""
    buf = io.StringIO()
    console = Console(file=buf, width=120, color_system=None, force_terminal=False)
    return console, buf
