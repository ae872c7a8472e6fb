import logging
from typing import Optional

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from commitlog.core.config import Config
from commitlog.history.commit import Commit, CommitLog

logger = logging.getLogger("commitlog.core.influx")

_client: Optional[InfluxDBClient] = None

COMMIT_MEASUREMENT = "commits"


def get_client() -> InfluxDBClient:
    """Return a singleton InfluxDB client."""
    global _client
    if _client is None:
        if not Config.INFLUX_TOKEN:
            raise RuntimeError("INFLUX_TOKEN not configured")
        _client = InfluxDBClient(url=Config.INFLUX_URL, token=Config.INFLUX_TOKEN, org=Config.INFLUX_ORG)
    return _client


def build_commit_point(repo_id: str, commit: Commit) -> Point:
    """One point per commit, stamped with its committer time."""
    p = Point(COMMIT_MEASUREMENT)

    p = p.tag("repo_id", repo_id)
    for tag in ("commit_hash", "author_email"):
        v = getattr(commit, tag)
        if v:
            p = p.tag(tag, v)
    if commit.author_name.strip():
        p = p.tag("author_name", commit.author_name.strip())

    p = p.field("parent_count", len(commit.parent_hashes))
    p = p.field("is_merge", commit.is_merge)
    p = p.field("message_length", len(commit.message))
    p = p.field("author_time", commit.author_time)

    return p.time(commit.committer_time, WritePrecision.S)


def write_commit_log(repo_id: str, log: CommitLog) -> int:
    """Write every commit of a finished walk. Returns the number of points."""
    client = get_client()
    write_api = client.write_api(write_options=SYNCHRONOUS)

    points = [build_commit_point(repo_id, c) for c in log]
    if points:
        write_api.write(bucket=Config.INFLUX_BUCKET, org=Config.INFLUX_ORG, record=points)
    logger.debug(f"Wrote {len(points)} commit points for {repo_id}")
    return len(points)
