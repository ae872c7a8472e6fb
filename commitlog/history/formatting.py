from commitlog.history.commit import Commit, CommitLog


def format_commit(commit: Commit) -> str:
    parents = ", ".join(commit.parent_hashes) if commit.parent_hashes else "None"
    return (
        f"\nCommit {commit.commit_hash}"
        f"\nTree: {commit.tree_hash}"
        f"\nParent: {parents}"
        f"\nBy: {commit.author_name.strip()} <{commit.author_email}>"
        f"\nCommitter: {commit.committer_name.strip()} <{commit.committer_email}>"
        f"\nDate: {commit.committed_at.isoformat()}"
        f"\nMessage: {commit.message}\n"
    )


def format_log(log: CommitLog, newest_first: bool = False) -> str:
    """Render every commit of a log, oldest first unless newest_first is set."""
    if newest_first:
        # same-timestamp commits keep their walk order
        commits = [c for _, bucket in reversed(list(log.items())) for c in bucket]
    else:
        commits = list(log)
    return "".join(format_commit(c) for c in commits)
