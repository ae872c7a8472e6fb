import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from commitlog.core.config import Config
from commitlog.history.commit import Commit


class HistoryRequest(BaseModel):
    repo_path: str = Field(
        ..., description="Absolute path inside the repository whose history to walk"
    )
    start: int = Field(0, ge=0, description="First generation to read (0 is HEAD)")
    limit: Optional[int] = Field(
        Config.HISTORY_BATCH_SIZE,
        ge=1,
        description="Maximum number of generations to visit; null walks to the root commit",
    )

    @field_validator("repo_path")
    @classmethod
    def validate_repo_path(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("repo_path cannot be empty")
        # Allow absolute paths for the current OS.
        # Also accept paths that start with '/' on Windows.
        if not (os.path.isabs(v) or v.startswith("/")):
            raise ValueError("repo_path must be an absolute path")
        if ".." in v.replace("\\", "/").split("/"):
            raise ValueError("repo_path must not contain '..'")
        return v


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


class ErrorResponse(BaseModel):
    detail: str


class CommitResponse(BaseModel):
    commit_hash: str
    tree_hash: str
    parent_hashes: list[str]
    author_name: str
    author_email: str
    author_time: int
    committer_name: str
    committer_email: str
    committer_time: int
    committed_at: str = Field(..., description="Committer time as UTC ISO 8601")
    message: str

    @classmethod
    def from_commit(cls, commit: Commit) -> "CommitResponse":
        return cls(
            commit_hash=commit.commit_hash,
            tree_hash=commit.tree_hash,
            parent_hashes=list(commit.parent_hashes),
            author_name=commit.author_name,
            author_email=commit.author_email,
            author_time=commit.author_time,
            committer_name=commit.committer_name,
            committer_email=commit.committer_email,
            committer_time=commit.committer_time,
            committed_at=commit.committed_at.isoformat(),
            message=commit.message,
        )


class HistoryResponse(BaseModel):
    """A walked log, oldest commit first."""
    repo_root: str
    start: int
    next_generation: int
    exhausted: bool
    total_commits: int
    commits: list[CommitResponse]


class ExportResponse(BaseModel):
    repo_root: str
    written: int
