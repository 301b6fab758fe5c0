import os

SECRET_KEY = "test-secret"

IMAP_CONFIG = {
    "host": "imap.invalid",
    "port": 993,
    "username": "tester@example.com",
    "password": "test-password",
    "timeout": 5.0,
}

DATA_FILE = os.getenv("DATA_FILE", "test-data.json")
SUBMISSIONS_DIR = os.getenv("SUBMISSIONS_DIR", "test-LabWorks")
SCHEDULE_EPOCH = "2023-09-01"

MAIL_POLL_ENABLED = False
MAIL_POLL_SECONDS = 600

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
