"""Pull-request lifecycle and reviewer-assignment rules.

The engine reads current state from the stores, decides, and writes back.
It keeps no state of its own between calls, so one instance can be shared
by every request.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime
from typing import Callable, Protocol, Sequence

from django.conf import settings
from django.utils import timezone

from reviews.entities import (
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    Team,
    TeamMember,
    User,
)
from reviews.errors import (
    NoCandidate,
    NotAssigned,
    NotFound,
    PullRequestExists,
    PullRequestMerged,
    ReviewerIsAuthor,
    StoreFailure,
    TeamExists,
)
from reviews.stores import DirectoryStore, PullRequestStore, RecordExists, RecordNotFound, StoreError

logger = logging.getLogger("reviews.engine")

DEFAULT_REVIEWERS_PER_PULL_REQUEST = 2


class DirectoryPort(Protocol):
    def atomic(self): ...
    def team_exists(self, team_name: str) -> bool: ...
    def create_team(self, team: Team) -> None: ...
    def get_team(self, team_name: str) -> Team: ...
    def save_user(self, user: User) -> None: ...
    def get_user(self, user_id: str) -> User: ...


class PullRequestPort(Protocol):
    def atomic(self): ...
    def exists(self, pull_request_id: str) -> bool: ...
    def create(self, pr: PullRequest) -> None: ...
    def save(self, pr: PullRequest) -> None: ...
    def get_by_id(self, pull_request_id: str) -> PullRequest: ...
    def get_by_reviewer(self, user_id: str) -> list[PullRequest]: ...


def _store_context(operation: str):
    """Surface ``StoreError`` from *operation* as ``StoreFailure``."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except StoreError as exc:
                raise StoreFailure(f"{operation}: storage failure") from exc

        return wrapper

    return decorator


def select_reviewers(members: Sequence[TeamMember], author_id: str, limit: int) -> list[str]:
    """Pick up to *limit* active teammates of *author_id*, in member order."""
    reviewers: list[str] = []
    for member in members:
        if len(reviewers) >= limit:
            break
        if member.user_id == author_id or not member.is_active:
            continue
        reviewers.append(member.user_id)
    return reviewers


class ReviewEngine:
    """Applies team, user, and pull-request operations against the stores."""

    def __init__(
        self,
        directory: DirectoryPort,
        pull_requests: PullRequestPort,
        *,
        reviewers_per_pull_request: int = DEFAULT_REVIEWERS_PER_PULL_REQUEST,
        require_candidate: bool = False,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self.directory = directory
        self.pull_requests = pull_requests
        self.reviewers_per_pull_request = reviewers_per_pull_request
        self.require_candidate = require_candidate
        self.clock = clock

    # ------------------------------------------------------------------
    # Teams and users
    # ------------------------------------------------------------------

    @_store_context("create team")
    def create_team(self, team_name: str, members: Sequence[TeamMember]) -> Team:
        """Register a team and bind its members to it.

        Raises:
            TeamExists: If a team with this name is already registered.
        """
        team = Team(team_name=team_name, members=list(members))
        with self.directory.atomic():
            if self.directory.team_exists(team_name):
                raise TeamExists(f"team {team_name} already exists")
            try:
                self.directory.create_team(team)
            except RecordExists:
                raise TeamExists(f"team {team_name} already exists")
        logger.info("Created team %s with %d members", team_name, len(team.members))
        return team

    @_store_context("get team")
    def get_team(self, team_name: str) -> Team:
        try:
            return self.directory.get_team(team_name)
        except RecordNotFound:
            raise NotFound(f"team {team_name} not found")

    @_store_context("set user active")
    def set_user_active(self, user_id: str, is_active: bool) -> User:
        """Set a user's active flag. Existing review assignments are kept."""
        with self.directory.atomic():
            user = self._get_user(user_id)
            user.is_active = is_active
            self.directory.save_user(user)
        logger.info("User %s is_active=%s", user_id, is_active)
        return user

    def _get_user(self, user_id: str) -> User:
        try:
            return self.directory.get_user(user_id)
        except RecordNotFound:
            raise NotFound(f"user {user_id} not found")

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    @_store_context("create pull request")
    def create_pull_request(self, pull_request_id: str, pull_request_name: str, author_id: str) -> PullRequest:
        """Create an OPEN pull request with reviewers picked from the author's team.

        Raises:
            PullRequestExists: If the id is already registered.
            NotFound: If the author or the author's team does not exist.
            NoCandidate: If no teammate is eligible and candidates are required.
        """
        with self.pull_requests.atomic():
            if self.pull_requests.exists(pull_request_id):
                raise PullRequestExists(f"pull request {pull_request_id} already exists")

            author = self._get_user(author_id)
            try:
                team = self.directory.get_team(author.team_name)
            except RecordNotFound:
                raise NotFound(f"team {author.team_name} not found")

            reviewers = select_reviewers(team.members, author_id, self.reviewers_per_pull_request)
            if not reviewers and self.require_candidate:
                raise NoCandidate(f"no active reviewer candidate in team {team.team_name}")

            pr = PullRequest(
                pull_request_id=pull_request_id,
                pull_request_name=pull_request_name,
                author_id=author_id,
                status=PullRequestStatus.OPEN,
                assigned_reviewers=reviewers,
                created_at=self.clock(),
            )
            try:
                self.pull_requests.create(pr)
            except RecordExists:
                raise PullRequestExists(f"pull request {pull_request_id} already exists")

        logger.info("Created pull request %s by %s, reviewers=%s", pull_request_id, author_id, reviewers)
        return pr

    @_store_context("merge pull request")
    def merge_pull_request(self, pull_request_id: str) -> PullRequest:
        """Mark a pull request MERGED. Merging twice returns the stored record."""
        with self.pull_requests.atomic():
            pr = self._get_pull_request(pull_request_id)
            if pr.is_merged:
                return pr
            pr.status = PullRequestStatus.MERGED
            pr.merged_at = self.clock()
            self.pull_requests.save(pr)

        logger.info("Merged pull request %s", pull_request_id)
        return pr

    @_store_context("reassign reviewer")
    def reassign_reviewer(self, pull_request_id: str, old_reviewer_id: str, new_reviewer_id: str) -> PullRequest:
        """Swap *old_reviewer_id* for *new_reviewer_id* in place.

        The new reviewer is not looked up in the directory; only the author
        is rejected.

        Raises:
            NotFound: If the pull request does not exist.
            PullRequestMerged: If the pull request is already merged.
            NotAssigned: If *old_reviewer_id* is not a current reviewer.
            ReviewerIsAuthor: If *new_reviewer_id* is the author.
        """
        with self.pull_requests.atomic():
            pr = self._get_pull_request(pull_request_id)
            if pr.is_merged:
                raise PullRequestMerged(f"pull request {pull_request_id} is merged")

            try:
                index = pr.assigned_reviewers.index(old_reviewer_id)
            except ValueError:
                raise NotAssigned(f"{old_reviewer_id} is not assigned to pull request {pull_request_id}")

            if new_reviewer_id == pr.author_id:
                raise ReviewerIsAuthor(f"{new_reviewer_id} is the author of pull request {pull_request_id}")

            pr.assigned_reviewers[index] = new_reviewer_id
            self.pull_requests.save(pr)

        logger.info(
            "Reassigned pull request %s: %s -> %s", pull_request_id, old_reviewer_id, new_reviewer_id,
        )
        return pr

    @_store_context("get user pull requests")
    def get_user_pull_requests(self, user_id: str) -> list[PullRequestShort]:
        """Return the pull requests *user_id* is reviewing, oldest first."""
        return [pr.short() for pr in self.pull_requests.get_by_reviewer(user_id)]

    def _get_pull_request(self, pull_request_id: str) -> PullRequest:
        try:
            return self.pull_requests.get_by_id(pull_request_id)
        except RecordNotFound:
            raise NotFound(f"pull request {pull_request_id} not found")


def build_engine() -> ReviewEngine:
    """Create an engine wired to the ORM stores and the project settings."""
    return ReviewEngine(
        DirectoryStore(),
        PullRequestStore(),
        reviewers_per_pull_request=getattr(
            settings, "REVIEWERS_PER_PULL_REQUEST", DEFAULT_REVIEWERS_PER_PULL_REQUEST,
        ),
        require_candidate=getattr(settings, "REVIEW_REQUIRE_CANDIDATE", False),
    )
