DOMAIN = "tryfi"
VERSION = "0.4.0"
MANUFACTURER = "TryFi"

API_BASE_URL = "https://api.tryfi.com"
API_LOGIN_URL = API_BASE_URL + "/auth/login"
API_GRAPHQL_URL = API_BASE_URL + "/graphql"

# Request policy
REQUEST_TIMEOUT = 15   # seconds, multiplied by attempt number for each retry
REQUEST_ATTEMPTS = 2   # 15 s + 30 s stays below the default polling interval

# HTTP statuses that mean "server busy, try again later"
TRANSIENT_STATUS_CODES = frozenset({502, 503, 504})
# HTTP statuses that mean the session was rejected
AUTH_STATUS_CODES = frozenset({401, 403})

# Config entry keys
CONF_GUID = "guid"
CONF_POLLING_INTERVAL = "polling_interval"
CONF_ESCAPE_ALERT_TYPE = "escape_alert_type"
CONF_IGNORED_PETS = "ignored_pets"
CONF_ESCAPE_CONFIRMATIONS = "escape_confirmations"
CONF_ESCAPE_CHECK_INTERVAL = "escape_check_interval"

ESCAPE_ALERT_LEAK = "leak"
ESCAPE_ALERT_MOTION = "motion"
ESCAPE_ALERT_TYPES = [ESCAPE_ALERT_LEAK, ESCAPE_ALERT_MOTION]

# Defaults (seconds where applicable)
DEFAULT_POLLING_INTERVAL = 60
DEFAULT_ESCAPE_ALERT_TYPE = ESCAPE_ALERT_LEAK
DEFAULT_ESCAPE_CONFIRMATIONS = 2
DEFAULT_ESCAPE_CHECK_INTERVAL = 30

MIN_POLLING_INTERVAL = 10
MIN_ESCAPE_CHECK_INTERVAL = 5

LOW_BATTERY_LEVEL = 20

# Bus events fired on escape transitions
EVENT_ESCAPE_CONFIRMED = f"{DOMAIN}_escape_confirmed"
EVENT_ESCAPE_CLEARED = f"{DOMAIN}_escape_cleared"
