"""Error taxonomy for the review engine.

Every business failure carries an ``ErrorCode`` from a closed set. The
transport layer maps codes to HTTP statuses; the engine never deals with
status codes itself.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    TEAM_EXISTS = "TEAM_EXISTS"
    PR_EXISTS = "PR_EXISTS"
    PR_MERGED = "PR_MERGED"
    REVIEWER_IS_AUTHOR = "REVIEWER_IS_AUTHOR"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    STORE_FAILURE = "STORE_FAILURE"


class ReviewError(Exception):
    """Base class for failures surfaced to callers of the engine."""

    code: ErrorCode = ErrorCode.STORE_FAILURE
    default_message: str = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class TeamExists(ReviewError):
    code = ErrorCode.TEAM_EXISTS
    default_message = "team already exists"


class PullRequestExists(ReviewError):
    code = ErrorCode.PR_EXISTS
    default_message = "pull request already exists"


class NotFound(ReviewError):
    code = ErrorCode.NOT_FOUND
    default_message = "resource not found"


class PullRequestMerged(ReviewError):
    """Raised when a merged pull request is asked to change its reviewers."""

    code = ErrorCode.PR_MERGED
    default_message = "cannot reassign on merged pull request"


class ReviewerIsAuthor(ReviewError):
    code = ErrorCode.REVIEWER_IS_AUTHOR
    default_message = "author cannot review their own pull request"


class NotAssigned(ReviewError):
    code = ErrorCode.NOT_ASSIGNED
    default_message = "reviewer is not assigned to this pull request"


class NoCandidate(ReviewError):
    code = ErrorCode.NO_CANDIDATE
    default_message = "no active candidate in team"


class StoreFailure(ReviewError):
    """Raised when the underlying store fails.

    The message names the operation only; the database error stays on
    ``__cause__`` for logging.
    """

    code = ErrorCode.STORE_FAILURE
    default_message = "storage failure"
