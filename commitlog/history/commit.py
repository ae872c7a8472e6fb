from bisect import insort
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Optional

from commitlog.core.errors import DuplicateCommitError


@dataclass
class Commit:
    tree_hash: str = ""
    parent_hashes: list[str] = field(default_factory=list)
    commit_hash: str = ""
    author_name: str = ""
    author_email: str = ""
    author_time: int = 0
    committer_name: str = ""
    committer_email: str = ""
    committer_time: int = 0
    message: str = ""

    @property
    def authored_at(self) -> datetime:
        return datetime.fromtimestamp(self.author_time, tz=timezone.utc)

    @property
    def committed_at(self) -> datetime:
        return datetime.fromtimestamp(self.committer_time, tz=timezone.utc)

    @property
    def is_root(self) -> bool:
        return not self.parent_hashes

    @property
    def is_merge(self) -> bool:
        return len(self.parent_hashes) > 1

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:8]


class CommitLog:
    """Commits grouped by committer timestamp.

    Iteration runs oldest timestamp first; commits sharing a timestamp come
    out in the order they were inserted (walk order, newest first).
    """

    def __init__(self, start: int = 0):
        self._by_time: dict[int, list[Commit]] = {}
        self._keys: list[int] = []
        self._hashes: set[str] = set()
        self.start = start
        self.next_generation = start
        self.exhausted = False

    def insert(self, commit: Commit) -> None:
        if commit.commit_hash:
            if commit.commit_hash in self._hashes:
                raise DuplicateCommitError(f"Commit {commit.commit_hash} is already in the log")
            self._hashes.add(commit.commit_hash)

        key = commit.committer_time
        bucket = self._by_time.get(key)
        if bucket is None:
            self._by_time[key] = [commit]
            insort(self._keys, key)
        else:
            bucket.append(commit)

    def iterate(self) -> Iterator[Commit]:
        for key in self._keys:
            yield from self._by_time[key]

    def __iter__(self) -> Iterator[Commit]:
        return self.iterate()

    def get(self, timestamp: int) -> list[Commit]:
        return list(self._by_time.get(timestamp, ()))

    def __getitem__(self, timestamp: int) -> list[Commit]:
        if timestamp not in self._by_time:
            raise KeyError(timestamp)
        return list(self._by_time[timestamp])

    def __contains__(self, timestamp: object) -> bool:
        return timestamp in self._by_time

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._by_time.values())

    def timestamps(self) -> list[int]:
        return list(self._keys)

    def items(self) -> Iterator[tuple[int, list[Commit]]]:
        for key in self._keys:
            yield key, list(self._by_time[key])

    def oldest(self) -> Optional[Commit]:
        if not self._keys:
            return None
        return self._by_time[self._keys[0]][0]

    def newest(self) -> Optional[Commit]:
        # first inserted at the newest timestamp is the one nearest the head
        if not self._keys:
            return None
        return self._by_time[self._keys[-1]][0]
