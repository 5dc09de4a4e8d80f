"""Django ORM-backed stores for the directory (teams, users) and pull requests.

Lookups are tri-state: they return an entity, raise ``RecordNotFound`` on a
miss, or raise ``StoreError`` when the database itself fails. The stores know
nothing about reviewer assignment rules.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction

from reviews import models
from reviews.entities import PullRequest, PullRequestStatus, Team, TeamMember, User

logger = logging.getLogger("reviews.stores")


class StoreError(Exception):
    """Raised when a database call fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}" if detail else f"{operation} failed")


class RecordNotFound(LookupError):
    """Raised when a lookup by key finds nothing."""


class RecordExists(Exception):
    """Raised when an insert collides with an existing primary key."""


def _db_operation(name: str):
    """Translate ``DatabaseError`` raised by *func* into ``StoreError``."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError as exc:
                logger.error("Database error during %s: %s", name, exc)
                raise StoreError(name, str(exc)) from exc

        return wrapper

    return decorator


class _AtomicMixin:
    @contextmanager
    def atomic(self):
        """Run the block in one database transaction.

        Failures to begin or commit surface as ``StoreError`` like any other
        database call.
        """
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            logger.error("Database error during transaction: %s", exc)
            raise StoreError("transaction", str(exc)) from exc


class DirectoryStore(_AtomicMixin):
    """Teams and their users."""

    @_db_operation("team exists")
    def team_exists(self, team_name: str) -> bool:
        return models.Team.objects.filter(pk=team_name).exists()

    @_db_operation("create team")
    def create_team(self, team: Team) -> None:
        """Insert the team row and upsert every member, bound to this team in input order.

        Raises:
            RecordExists: If a team with this name is already stored.
        """
        with transaction.atomic():
            try:
                with transaction.atomic():
                    row = models.Team.objects.create(pk=team.team_name)
            except IntegrityError:
                if models.Team.objects.filter(pk=team.team_name).exists():
                    raise RecordExists(f"team {team.team_name!r}")
                raise
            for position, member in enumerate(team.members):
                models.User.objects.update_or_create(
                    pk=member.user_id,
                    defaults={
                        "username": member.username,
                        "team": row,
                        "is_active": member.is_active,
                        "position": position,
                    },
                )

    @_db_operation("get team")
    def get_team(self, team_name: str) -> Team:
        try:
            row = models.Team.objects.get(pk=team_name)
        except models.Team.DoesNotExist:
            raise RecordNotFound(f"team {team_name!r}")
        members = [
            TeamMember(user_id=u.user_id, username=u.username, is_active=u.is_active)
            for u in row.members.all()
        ]
        return Team(team_name=row.team_name, members=members)

    @_db_operation("save user")
    def save_user(self, user: User) -> None:
        models.User.objects.update_or_create(
            pk=user.user_id,
            defaults={
                "username": user.username,
                "team_id": user.team_name,
                "is_active": user.is_active,
            },
        )

    @_db_operation("get user")
    def get_user(self, user_id: str) -> User:
        try:
            row = models.User.objects.get(pk=user_id)
        except models.User.DoesNotExist:
            raise RecordNotFound(f"user {user_id!r}")
        return User(
            user_id=row.user_id,
            username=row.username,
            team_name=row.team_id,
            is_active=row.is_active,
        )


def _to_entity(row: models.PullRequest) -> PullRequest:
    return PullRequest(
        pull_request_id=row.pull_request_id,
        pull_request_name=row.pull_request_name,
        author_id=row.author_id,
        status=PullRequestStatus(row.status),
        assigned_reviewers=[slot.reviewer_id for slot in row.reviewer_slots.all()],
        created_at=row.created_at,
        merged_at=row.merged_at,
    )


def _write_slots(row: models.PullRequest, reviewer_ids: list[str]) -> None:
    models.ReviewerSlot.objects.bulk_create([
        models.ReviewerSlot(pull_request=row, position=position, reviewer_id=reviewer_id)
        for position, reviewer_id in enumerate(reviewer_ids)
    ])


class PullRequestStore(_AtomicMixin):
    """Pull requests and their ordered reviewer slots."""

    @_db_operation("pull request exists")
    def exists(self, pull_request_id: str) -> bool:
        return models.PullRequest.objects.filter(pk=pull_request_id).exists()

    @_db_operation("create pull request")
    def create(self, pr: PullRequest) -> None:
        """Insert a new pull request with its reviewer slots.

        Raises:
            RecordExists: If a pull request with this id is already stored.
        """
        with transaction.atomic():
            try:
                with transaction.atomic():
                    row = models.PullRequest.objects.create(
                        pk=pr.pull_request_id,
                        pull_request_name=pr.pull_request_name,
                        author_id=pr.author_id,
                        status=pr.status.value,
                        created_at=pr.created_at,
                        merged_at=pr.merged_at,
                    )
            except IntegrityError:
                if models.PullRequest.objects.filter(pk=pr.pull_request_id).exists():
                    raise RecordExists(f"pull request {pr.pull_request_id!r}")
                raise
            _write_slots(row, pr.assigned_reviewers)

    @_db_operation("save pull request")
    def save(self, pr: PullRequest) -> None:
        """Update an existing pull request and replace its reviewer slots."""
        with transaction.atomic():
            row, _ = models.PullRequest.objects.update_or_create(
                pk=pr.pull_request_id,
                defaults={
                    "pull_request_name": pr.pull_request_name,
                    "author_id": pr.author_id,
                    "status": pr.status.value,
                    "created_at": pr.created_at,
                    "merged_at": pr.merged_at,
                },
            )
            row.reviewer_slots.all().delete()
            _write_slots(row, pr.assigned_reviewers)

    @_db_operation("get pull request")
    def get_by_id(self, pull_request_id: str) -> PullRequest:
        try:
            row = models.PullRequest.objects.prefetch_related("reviewer_slots").get(pk=pull_request_id)
        except models.PullRequest.DoesNotExist:
            raise RecordNotFound(f"pull request {pull_request_id!r}")
        return _to_entity(row)

    @_db_operation("get pull requests by reviewer")
    def get_by_reviewer(self, user_id: str) -> list[PullRequest]:
        """Return pull requests reviewed by *user_id*, oldest first."""
        rows = (
            models.PullRequest.objects
            .filter(reviewer_slots__reviewer_id=user_id)
            .distinct()
            .prefetch_related("reviewer_slots")
        )
        return [_to_entity(row) for row in rows]
