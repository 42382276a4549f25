"""Panel Check - Constants and patterns"""

VERSION = "1.0.0"

# Public resolver used for the "what the world sees" lookup
DEFAULT_PUBLIC_RESOLVER = '8.8.8.8'
DEFAULT_TIMEOUT = 30.0
DNS_TIMEOUT = 5.0

# Sentinels
LOCAL_RECORD_MISSING = 'Not Found in local zone'
PUBLIC_RECORD_MISSING = 'Not Found in public DNS'
PHP_VERSION_DEFAULT = 'System Default'
PHP_LOG_MISSING = 'Not found at common locations.'
NOT_AVAILABLE = 'N/A'
UNLIMITED = 'Unlimited'

# Conventional PHP error log locations, relative to the account's home
PHP_LOG_CANDIDATES = [
    'logs/{domain}.php.error.log',
    'public_html/error_log',
]

# System snapshot commands, rendered verbatim
SYSTEM_COMMANDS = [
    ('Load & Uptime', ['uptime']),
    ('Disk Usage', ['df', '-h']),
    ('Memory Usage', ['free', '-mh']),
    ('CPU Core Count', ['nproc']),
]

SYSTEM_LOG = '/var/log/messages'
OOM_MARKER = 'oom-killer'
OOM_PATTERN = r'oom-killer|killed'
OOM_TAIL = 10

EXIM_QUEUE_COMMAND = ['exim', '-bpc']
EXIM_MAINLOG = '/var/log/exim_mainlog'
EXIM_RATE_LIMIT_MARKER = 'connection count'
# 0-based whitespace column holding "[ip]:port" in exim_mainlog
EXIM_IP_COLUMN = 6
TOP_RATE_LIMITED = 10

# EasyApache 4 vs EasyApache 3 layouts, keyed on the EA4 marker file
EA4_MARKER = '/etc/cpanel/ea4/is_ea4'
APACHE_LAYOUTS = {
    'ea4': {
        'domlogs': '/var/log/apache2/domlogs',
        'error_log': '/var/log/apache2/error_log',
    },
    'ea3': {
        'domlogs': '/usr/local/apache/domlogs',
        'error_log': '/usr/local/apache/logs/error_log',
    },
}

# strftime format of the access log date ("16/Oct/2026")
ACCESS_LOG_DATE_FORMAT = '%d/%b/%Y'
SKIPPED_DOMLOG_SUFFIXES = ('.gz', '.bkup', 'bytes_log')
SSL_LOG_SUFFIX = '-ssl_log'

TOP_IPS = 15
TOP_DOMAINS = 10
TOP_URIS = 10
BOT_KEYWORDS = ['crawl', 'bot', 'spider', 'yahoo', 'bing', 'google']

APACHE_LIMIT_PATTERN = r'server reached|scoreboard'
APACHE_LIMIT_TAIL = 5

PHP_INSTALL_GLOB = '/opt/cpanel/ea-php*'
PHP_FPM_LOG = 'root/usr/var/log/php-fpm/error.log'
MAX_CHILDREN_MARKER = 'reached max_children setting'
TOP_POOLS = 10

# Combined/common access log request projection
ACCESS_LINE_PATTERN = (
    r'^(?P<ip>\S+) \S+ \S+ \[(?P<timestamp>[^\]]+)\] '
    r'"(?P<method>[A-Z]+) (?P<uri>\S+)'
)
