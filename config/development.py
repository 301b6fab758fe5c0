import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

IMAP_CONFIG = {
    "host": os.getenv("IMAP_HOST", "imap.yandex.ru"),
    "port": int(os.getenv("IMAP_PORT", "993")),
    "username": os.getenv("IMAP_USERNAME", ""),
    "password": os.getenv("IMAP_PASSWORD", ""),
    "timeout": float(os.getenv("IMAP_TIMEOUT", "30")),
}

DATA_FILE = os.getenv("DATA_FILE", "data.json")
SUBMISSIONS_DIR = os.getenv("SUBMISSIONS_DIR", "LabWorks")
SCHEDULE_EPOCH = os.getenv("SCHEDULE_EPOCH", "2023-09-01")

# Background mail polling; the manual trigger works either way
MAIL_POLL_ENABLED = bool(int(os.getenv("MAIL_POLL_ENABLED", "0")))
MAIL_POLL_SECONDS = int(os.getenv("MAIL_POLL_SECONDS", "600"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
