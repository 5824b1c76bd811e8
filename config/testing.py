import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_creator_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
POLL_INTERVAL_SECONDS = 0.01

AUTO_INIT_DB = False
AUTO_SEED_DB = False
