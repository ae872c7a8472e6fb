import os

class Config:
    APP_NAME = os.getenv("APP_NAME", "CommitLog")
    DEBUG = os.getenv("DEBUG", "false").lower() in ("true", "1", "t")
    HOST = os.getenv("HOST", "127.0.0.1")
    PORT = int(os.getenv("PORT", 8000))
    # git
    GIT_BINARY = os.getenv("GIT_BINARY", "git")
    GIT_TIMEOUT = int(os.getenv("GIT_TIMEOUT", "30"))
    # History walk
    HISTORY_BATCH_SIZE = int(os.getenv("HISTORY_BATCH_SIZE", "100"))
    REPO_SEARCH_DEPTH = int(os.getenv("REPO_SEARCH_DEPTH", "5"))
    # "" keeps message lines run together, "\n" keeps them apart
    MESSAGE_SEPARATOR = os.getenv("MESSAGE_SEPARATOR", "").replace("\\n", "\n")
    # InfluxDB
    INFLUX_URL = os.getenv("INFLUX_URL", "http://influxdb:8086")
    INFLUX_TOKEN = os.getenv("INFLUX_TOKEN")
    # Also support reading token from a file (for Docker secrets)
    INFLUX_TOKEN_FILE = os.getenv("INFLUX_TOKEN_FILE")
    if not INFLUX_TOKEN and INFLUX_TOKEN_FILE and os.path.exists(INFLUX_TOKEN_FILE):
        try:
            with open(INFLUX_TOKEN_FILE, "r") as f:
                INFLUX_TOKEN = f.read().strip()
        except OSError:
            INFLUX_TOKEN = None

    INFLUX_ORG = os.getenv("INFLUX_ORG", "CommitLogOrg")
    INFLUX_BUCKET = os.getenv("INFLUX_BUCKET", "commit_history")
