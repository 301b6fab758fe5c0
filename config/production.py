import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

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

MAIL_POLL_ENABLED = bool(int(os.getenv("MAIL_POLL_ENABLED", "1")))
MAIL_POLL_SECONDS = int(os.getenv("MAIL_POLL_SECONDS", "600"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
