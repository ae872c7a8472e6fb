import logging
import os
import subprocess
from pathlib import Path
from typing import Union

from commitlog.core.config import Config
from commitlog.core.errors import HistoryExhausted, SourceUnavailable

logger = logging.getLogger("commitlog.core.git_source")

# git prints "fatal: Not a valid object name HEAD~7" once the walk runs past the root
NOT_FOUND_SIGNAL = "not a valid object name"


class GitCommitSource:
    """Reads raw commit objects for ancestors of a ref, one generation at a time.

    Generation 0 is the ref itself, generation n is ``<ref>~n``. Every git
    call runs against ``repo_path`` via ``-C``, never the process cwd.
    """

    def __init__(
        self,
        repo_path: Union[str, Path],
        git_binary: str = Config.GIT_BINARY,
        ref: str = "HEAD",
        timeout: int = Config.GIT_TIMEOUT,
    ):
        self.repo_path = str(repo_path)
        self.git_binary = git_binary
        self.ref = ref
        self.timeout = timeout

    def revision(self, generation: int) -> str:
        if generation < 0:
            raise ValueError(f"generation must be >= 0, got {generation}")
        return f"{self.ref}~{generation}"

    def object_text(self, generation: int) -> str:
        """Return the raw ``git cat-file commit`` output for a generation.

        Raises HistoryExhausted when git reports the object does not exist,
        SourceUnavailable for any other failure.
        """
        rev = self.revision(generation)
        result = self._run_git(["cat-file", "commit", rev])

        if result.returncode != 0:
            stderr = result.stderr.strip()
            if NOT_FOUND_SIGNAL in stderr.lower():
                logger.debug(f"{rev} does not exist in {self.repo_path}")
                raise HistoryExhausted(f"No commit at {rev}", generation=generation)
            raise SourceUnavailable(
                f"git cat-file failed for {rev}: {stderr}", generation=generation
            )

        return result.stdout

    def resolved_id(self, generation: int) -> str:
        """Return the full commit hash of a generation."""
        rev = self.revision(generation)
        result = self._run_git(["rev-parse", rev])

        if result.returncode != 0:
            raise SourceUnavailable(
                f"git rev-parse failed for {rev}: {result.stderr.strip()}",
                generation=generation,
            )

        return result.stdout.strip()

    def _run_git(self, args: list[str]) -> subprocess.CompletedProcess:
        cmd = [self.git_binary, "--no-pager", "-C", self.repo_path] + args
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired as e:
            raise SourceUnavailable(f"git timed out after {self.timeout}s: {' '.join(args)}") from e
        except OSError as e:
            raise SourceUnavailable(f"Could not run {self.git_binary}: {e}") from e
