"""Application constants."""

USER_AGENT = "news-nearby/0.3 (+suburb-content; contact: configured-email)"
EARTH_RADIUS_M = 6378100.0
STATE_SUFFIXES = (" NSW", " VIC", " QLD", " TAS")
COORDINATES_PARTITION = "locations"
CONTENT_PARTITION = "suburbs"
CONTENT_API_ENDPOINT = "https://api.ffx.io/api/content/v0/assets/"
DEFAULT_PORT = 8080
COMMANDS = (
    "load",
    "lookup",
    "serve",
    "generate-record",
)
EXIT_SUCCESS = 0
EXIT_NOT_FOUND = 4
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "partition",
    "key",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
