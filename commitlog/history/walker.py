import logging
from typing import Optional

from commitlog.core.config import Config
from commitlog.core.errors import CommitLogError, HistoryExhausted
from commitlog.history.commit import CommitLog
from commitlog.history.parser import parse_commit_object

logger = logging.getLogger("commitlog.history.walker")


def walk_history(
    source,
    start: int = 0,
    limit: Optional[int] = Config.HISTORY_BATCH_SIZE,
    separator: str = Config.MESSAGE_SEPARATOR,
) -> CommitLog:
    """Walk ancestors of the source's ref and collect them into a CommitLog.

    ``source`` needs ``object_text(n)`` and ``resolved_id(n)``, with
    ``object_text`` raising HistoryExhausted (or returning None) past the
    root commit.

    Generations ``start .. start + limit - 1`` are visited; the walk ends
    early when history runs out. ``limit=None`` walks to the root. Parse and
    source errors abort the walk and propagate with the failing generation
    attached.
    """
    if start < 0:
        raise ValueError(f"start must be >= 0, got {start}")
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be a positive integer or None, got {limit}")

    log = CommitLog(start=start)
    generation = start
    logger.info(f"Walking history from generation {start} (limit={limit})")

    while limit is None or generation - start < limit:
        try:
            raw = source.object_text(generation)
            if raw is None:
                raise HistoryExhausted(f"No commit at generation {generation}")
            commit = parse_commit_object(raw, separator=separator)
            commit.commit_hash = source.resolved_id(generation)
            log.insert(commit)
        except HistoryExhausted:
            log.exhausted = True
            break
        except CommitLogError as e:
            e.generation = generation
            logger.error(f"History walk failed at generation {generation}: {e}")
            raise

        logger.debug(f"Generation {generation}: {commit.short_hash} @ {commit.committer_time}")
        generation += 1

    log.next_generation = generation
    logger.info(
        f"Walk finished: {len(log)} commits, next generation {generation}"
        + (" (history exhausted)" if log.exhausted else "")
    )
    return log
