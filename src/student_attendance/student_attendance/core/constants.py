"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date

DEFAULT_SCHEDULE_EPOCH = date(2023, 9, 1)
DEFAULT_POLL_SECONDS = 600
DEFAULT_IMAP_PORT = 993
DEFAULT_IMAP_TIMEOUT = 30
DEFAULT_SUBMISSIONS_DIR = "LabWorks"
DEFAULT_DATA_FILE = "data.json"
MAX_RELISTS_PER_RUN = 3
SUFFIX_LENGTH = 4
