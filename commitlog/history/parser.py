"""Parser for git's raw commit object text (``git cat-file commit`` output).

A commit object is a block of header lines, a blank line, then the free-form
message. Signed commits carry a ``gpgsig`` (``gpgsig-sha256`` in SHA-256
repositories) header whose continuation lines run until the armor's closing
dash line.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from commitlog.core.errors import (
    CommitParseError,
    MalformedAuthorLine,
    MalformedCommitterLine,
    MissingTreeError,
)
from commitlog.history.commit import Commit

logger = logging.getLogger("commitlog.history.parser")


class LineKind(str, Enum):
    TREE = "tree"
    PARENT = "parent"
    AUTHOR = "author"
    COMMITTER = "committer"
    SIGNATURE_START = "signature_start"
    SIGNATURE_END = "signature_end"
    CHANGE_ID = "change_id"
    BLANK = "blank"
    BODY = "body"


@dataclass(frozen=True)
class ParsedLine:
    kind: LineKind
    value: str


@dataclass(frozen=True)
class PersonLine:
    name: str
    email: str
    timestamp: int


# Checked in order; the first matching prefix wins.
_PREFIX_RULES = (
    (LineKind.TREE, "tree "),
    (LineKind.PARENT, "parent "),
    (LineKind.AUTHOR, "author "),
    (LineKind.COMMITTER, "committer "),
    (LineKind.SIGNATURE_START, "gpgsig "),
    (LineKind.SIGNATURE_START, "gpgsig-sha256 "),
    (LineKind.CHANGE_ID, "change-id "),
)


def _is_dash_line(line: str) -> bool:
    # "-----", "-----END PGP SIGNATURE-----", " -----END SSH SIGNATURE-----"
    stripped = line.strip()
    return bool(stripped) and stripped.startswith("-") and stripped.endswith("-")


def classify_line(line: str) -> ParsedLine:
    """Tag one line of a commit object.

    Header kinds carry the text after their prefix; every other kind
    carries the line unchanged.
    """
    for kind, prefix in _PREFIX_RULES:
        if line.startswith(prefix):
            return ParsedLine(kind, line[len(prefix):])

    if line == "change-id":
        return ParsedLine(LineKind.CHANGE_ID, "")
    if _is_dash_line(line):
        return ParsedLine(LineKind.SIGNATURE_END, line)
    if line == "":
        return ParsedLine(LineKind.BLANK, line)
    return ParsedLine(LineKind.BODY, line)


def parse_person_line(value: str, error_cls: type = CommitParseError) -> PersonLine:
    """Split ``Name Parts <email> timestamp [tz]`` into its fields.

    Every token before the bracketed email belongs to the name and is kept
    with a single trailing space, so ``Jane Q Public <j@x> 1 +0000`` gives
    the name ``"Jane Q Public "``. The timezone token is dropped.
    """
    tokens = value.split(" ")

    email_index = None
    for i, token in enumerate(tokens):
        if token.startswith("<"):
            email_index = i
            break

    if email_index is None:
        raise error_cls(f"Missing bracketed email: {value!r}")

    name_tokens = tokens[:email_index]
    if any("<" in t or ">" in t for t in name_tokens):
        raise error_cls(f"Stray email delimiter in name: {value!r}")
    name = "".join(f"{t} " for t in name_tokens)

    # the email may itself contain spaces: it ends at the first token closing with ">"
    email_end = None
    for i in range(email_index, len(tokens)):
        if tokens[i].endswith(">") and (i > email_index or len(tokens[i]) >= 2):
            email_end = i
            break

    if email_end is None:
        raise error_cls(f"Unterminated email: {value!r}")
    email = " ".join(tokens[email_index:email_end + 1])[1:-1]

    if email_end + 1 >= len(tokens):
        raise error_cls(f"Missing timestamp: {value!r}")
    ts_token = tokens[email_end + 1]
    try:
        timestamp = int(ts_token)
    except ValueError:
        raise error_cls(f"Non-integer timestamp {ts_token!r}: {value!r}") from None

    return PersonLine(name=name, email=email, timestamp=timestamp)


def parse_commit_object(text: Union[str, bytes], separator: str = "") -> Commit:
    """Parse the raw text of one commit object into a Commit.

    ``commit_hash`` is left empty; callers fill it from ``git rev-parse``.
    Message lines are joined with ``separator``, which defaults to nothing
    at all (lines run together).
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")

    tree_hash: Optional[str] = None
    parents: list[str] = []
    author: Optional[PersonLine] = None
    committer: Optional[PersonLine] = None
    body: list[str] = []
    in_signature = False

    # only "\n" ends a line; any other control character is message text
    for line in text.split("\n"):
        parsed = classify_line(line)

        if in_signature:
            if parsed.kind is LineKind.SIGNATURE_END:
                in_signature = False
            continue

        if parsed.kind is LineKind.TREE:
            tree_hash = parsed.value
        elif parsed.kind is LineKind.PARENT:
            parents.append(parsed.value)
        elif parsed.kind is LineKind.AUTHOR:
            author = parse_person_line(parsed.value, MalformedAuthorLine)
        elif parsed.kind is LineKind.COMMITTER:
            committer = parse_person_line(parsed.value, MalformedCommitterLine)
        elif parsed.kind is LineKind.SIGNATURE_START:
            in_signature = True
        elif parsed.kind in (LineKind.CHANGE_ID, LineKind.BLANK):
            continue
        else:
            # BODY, or a dash line with no open signature block
            body.append(line)

    if in_signature:
        logger.warning("Signature block was never closed; discarded to end of object")

    if not tree_hash:
        raise MissingTreeError("Commit object has no tree line")
    if author is None:
        raise MalformedAuthorLine("Commit object has no author line")
    if committer is None:
        raise MalformedCommitterLine("Commit object has no committer line")

    return Commit(
        tree_hash=tree_hash,
        parent_hashes=parents,
        author_name=author.name,
        author_email=author.email,
        author_time=author.timestamp,
        committer_name=committer.name,
        committer_email=committer.email,
        committer_time=committer.timestamp,
        message=separator.join(body),
    )
