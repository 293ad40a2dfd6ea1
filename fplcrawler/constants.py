"""Constants for the FPL crawler."""

INSTANCE_NAME = 'FANTASY-CRAWLER'
DEFAULT_CONFIG_FILE = 'fantasypl-crawler.conf'

# FPL endpoints
LOGIN_URL = 'https://users.premierleague.com/accounts/login/'
LOGIN_APP = 'plfpl-web'
LOGIN_REDIRECT_URI = 'https://fantasy.premierleague.com/'
BOOTSTRAP_URL = 'https://fantasy.premierleague.com/api/bootstrap-static/'
STANDINGS_URL = (
    'https://fantasy.premierleague.com/api/leagues-classic/{league_id}/standings/'
    '?page_new_entries=1&page_standings={page}&phase=1'
)
HISTORY_URL = 'https://fantasy.premierleague.com/api/entry/{entry}/history/'

# The API rejects requests without a browser-like agent
USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_14_6) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/76.0.3809.100 Safari/537.36'
)

# HTTP defaults
DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_RETRIES = 0
DEFAULT_BACKOFF = 0.5
# Connections kept per host; matches the worker count when maxworkers is set
DEFAULT_POOL_SIZE = 50
RETRY_STATUSES = (408, 429, 500, 502, 503, 504)

# Report file names, keyed by league id as configured
WEEKLY_REPORT_FILE = '{league_id}-weekly.txt'
FINAL_REPORT_FILE = '{league_id}-final.txt'
