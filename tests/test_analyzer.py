from datetime import datetime
from pathlib import Path

import pytest

from conftest import FakeRunner
from panelcheck.analyzer import HealthCheck

TODAY = datetime(2026, 10, 16, 12, 0, 0)

COMMANDS = {
    'uptime': ' 12:00:00 up 10 days,  load average: 0.50, 0.40, 0.30\n',
    'df -h': 'Filesystem Size Used Avail Use% Mounted on\n/dev/vda1 80G 40G 40G 50% /\n',
    'free -mh': 'Mem: 7.7Gi 3.0Gi\n',
    'nproc': '4\n',
    'exim -bpc': '12\n',
}


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture()
def check(tmp_path: Path) -> HealthCheck:
    return HealthCheck(FakeRunner(COMMANDS), root=tmp_path, now=TODAY)


class TestSystemSnapshot:
    def test_passes_command_output_through(self, check: HealthCheck) -> None:
        section = check.system_snapshot()
        assert section.headings == ['Load & Uptime', 'Disk Usage', 'Memory Usage', 'CPU Core Count']
        assert '4' in section.blocks[3].lines

    def test_missing_command_degrades(self, tmp_path: Path) -> None:
        section = HealthCheck(FakeRunner({}), root=tmp_path).system_snapshot()
        assert section.blocks[0].lines[0].startswith('Unavailable')


class TestCriticalLogs:
    def test_tail_of_oom_events(self, tmp_path: Path, check: HealthCheck) -> None:
        lines = [f"Oct 16 kernel: httpd invoked oom-killer: event {i}" for i in range(8)]
        lines += [f"Oct 16 kernel: Killed process {i} (php-fpm)" for i in range(5)]
        lines += ["Oct 16 sshd: accepted publickey"]
        _write(tmp_path, 'var/log/messages', '\n'.join(lines) + '\n')

        block = check.critical_logs().blocks[0]

        assert len(block.lines) == 10
        assert block.lines[-1] == 'Oct 16 kernel: Killed process 4 (php-fpm)'
        assert all('sshd' not in line for line in block.lines)

    def test_killed_without_oom_is_no_event(self, tmp_path: Path, check: HealthCheck) -> None:
        _write(tmp_path, 'var/log/messages', 'Oct 16 app: worker killed by supervisor\n')
        block = check.critical_logs().blocks[0]
        assert block.lines == [f"No OOM events found in {tmp_path / 'var/log/messages'}."]

    def test_missing_system_log(self, check: HealthCheck) -> None:
        block = check.critical_logs().blocks[0]
        assert 'not found' in block.lines[0]


class TestMailStatus:
    def test_queue_and_rate_limited_ips(self, tmp_path: Path, check: HealthCheck) -> None:
        rate = ('2026-10-16 10:00:00 SMTP connection from host.example [{ip}]:4000 '
                'I=[192.0.2.1]:25 (TCP/IP connection count = 21)\n')
        _write(tmp_path, 'var/log/exim_mainlog',
               rate.format(ip='203.0.113.9') * 3 + rate.format(ip='198.51.100.2')
               + '2026-10-16 10:00:01 Completed\n')

        section = check.mail_status()

        assert section.blocks[0].lines == ['12']
        assert list(section.blocks[1].table.entries) == [('203.0.113.9', 3), ('198.51.100.2', 1)]

    def test_no_rate_limiting(self, tmp_path: Path, check: HealthCheck) -> None:
        _write(tmp_path, 'var/log/exim_mainlog', '2026-10-16 10:00:01 Completed\n')
        block = check.mail_status().blocks[1]
        assert block.lines == ["No recent connection rate-limiting events found."]


def _access(ip: str, method: str, uri: str, day: str = '16/Oct/2026') -> str:
    return f'{ip} - - [{day}:09:00:00 -0500] "{method} {uri} HTTP/1.1" 200 100 "-" "Mozilla/5.0"\n'


class TestWebTraffic:
    def test_missing_domlogs_skips_sub_analyses(self, check: HealthCheck) -> None:
        section = check.web_traffic()
        assert section.headings == []
        assert section.blocks[0].error is True
        assert 'usr/local/apache/domlogs' in section.blocks[0].lines[0]

    def test_ea4_layout_selected_by_marker(self, tmp_path: Path, check: HealthCheck) -> None:
        _write(tmp_path, 'etc/cpanel/ea4/is_ea4', '')
        (tmp_path / 'var/log/apache2/domlogs').mkdir(parents=True)
        section = check.web_traffic()
        assert section.body_lines == ["No Apache traffic recorded yet for today."]

    def test_no_traffic_today(self, tmp_path: Path, check: HealthCheck) -> None:
        _write(tmp_path, 'usr/local/apache/domlogs/bob/bob.example',
               _access('1.1.1.1', 'GET', '/', day='15/Oct/2026'))
        section = check.web_traffic()
        assert section.body_lines == ["No Apache traffic recorded yet for today."]

    def test_all_tables_and_limit_errors(self, tmp_path: Path, check: HealthCheck) -> None:
        _write(tmp_path, 'etc/cpanel/ea4/is_ea4', '')
        _write(tmp_path, 'var/log/apache2/domlogs/bob/bob.example',
               _access('1.1.1.1', 'POST', '/wp-login.php') + _access('2.2.2.2', 'GET', '/'))
        errors = [f"[mpm_prefork:error] AH00161: server reached MaxRequestWorkers {i}" for i in range(7)]
        _write(tmp_path, 'var/log/apache2/error_log', '\n'.join(errors + ['[core:notice] ok']) + '\n')

        section = check.web_traffic()

        assert section.headings == [
            'Top 15 IPs Hitting Server Today',
            'Top 10 Domains by POST Requests Today',
            'Top 10 Domains by GET Requests Today',
            'Top 10 URIs Receiving POST Requests',
            'Top 10 Suspected Bot Hits by Domain',
            'Recent Apache Server Limit Errors',
        ]
        assert list(section.blocks[1].table.entries) == [('bob.example', 1)]
        assert list(section.blocks[-1].lines) == errors[-5:]

    def test_missing_error_log(self, tmp_path: Path, check: HealthCheck) -> None:
        _write(tmp_path, 'usr/local/apache/domlogs/bob/bob.example', _access('1.1.1.1', 'GET', '/'))
        section = check.web_traffic()
        assert section.blocks[-1].lines[0].startswith('Apache error log not found at')


class TestPhpFpm:
    def test_every_version_reported(self, tmp_path: Path, check: HealthCheck) -> None:
        warning = ('[16-Oct-2026 09:15:02] WARNING: [pool {pool}] server reached '
                   'max_children setting (5), consider raising it\n')
        _write(tmp_path, 'opt/cpanel/ea-php74/root/usr/var/log/php-fpm/error.log',
               warning.format(pool='bob_example') * 2 + warning.format(pool='amy_example'))
        (tmp_path / 'opt/cpanel/ea-php80').mkdir(parents=True)
        _write(tmp_path, 'opt/cpanel/ea-php81/root/usr/var/log/php-fpm/error.log', 'NOTICE: ready\n')

        section = check.php_fpm()

        assert section.headings == [
            'Checking ea-php74...', 'Checking ea-php80...', 'Checking ea-php81...',
        ]
        assert list(section.blocks[0].table.entries) == [('bob_example', 2), ('amy_example', 1)]
        assert section.blocks[1].lines == ["Log file not found for this version."]
        assert section.blocks[2].lines == ["No 'max_children' errors found."]

    def test_no_installs(self, check: HealthCheck) -> None:
        assert check.php_fpm().body_lines == ["No EasyApache PHP versions installed."]

    def test_unreadable_version_does_not_stop_others(self, tmp_path: Path, check: HealthCheck,
                                                      monkeypatch) -> None:
        warning = 'WARNING: [pool amy_example] server reached max_children setting (5)\n'
        for version in ('ea-php74', 'ea-php80', 'ea-php81'):
            _write(tmp_path, f'opt/cpanel/{version}/root/usr/var/log/php-fpm/error.log', warning)
        real_is_file = Path.is_file

        def is_file(path):
            if 'ea-php80' in str(path):
                raise PermissionError(13, 'Permission denied')
            return real_is_file(path)

        monkeypatch.setattr(Path, 'is_file', is_file)

        section = check.php_fpm()

        assert section.headings == [
            'Checking ea-php74...', 'Checking ea-php80...', 'Checking ea-php81...',
        ]
        assert section.blocks[1].error is True
        assert list(section.blocks[0].table.entries) == [('amy_example', 1)]
        assert list(section.blocks[2].table.entries) == [('amy_example', 1)]


class TestRun:
    def test_sections_in_fixed_order(self, check: HealthCheck) -> None:
        titles = [s.title for s in check.run()]
        assert titles == [
            'BASIC SYSTEM INFO',
            'SYSTEM LOGS',
            'EMAIL (EXIM) STATUS',
            'APACHE WEB SERVER ANALYSIS',
            'PHP-FPM STATUS',
        ]

    def test_failing_collector_degrades_one_section(self, check: HealthCheck, monkeypatch) -> None:
        def critical_logs():
            raise OSError('Input/output error')

        monkeypatch.setattr(check, 'critical_logs', critical_logs)

        sections = check.run()

        assert len(sections) == 5
        assert sections[1].blocks[0].error is True
        assert 'Input/output error' in sections[1].body_lines[0]
        assert sections[4].title == 'PHP-FPM STATUS'
