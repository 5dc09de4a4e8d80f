"""Data models for teams, users, pull requests, and reviewer slots."""

from django.db import models


class Team(models.Model):
    """A named group of users. The name is the primary key."""

    team_name = models.CharField(max_length=255, primary_key=True)

    class Meta:
        db_table = "teams"

    def __str__(self) -> str:
        return self.team_name


class User(models.Model):
    """A reviewer/author identity, bound to exactly one team."""

    user_id = models.CharField(max_length=255, primary_key=True)
    username = models.CharField(max_length=255)
    team = models.ForeignKey(
        Team, on_delete=models.CASCADE, related_name="members", db_column="team_name",
    )
    is_active = models.BooleanField(default=True)
    # Order of the member within its team, as given at registration.
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "users"
        ordering = ["position", "user_id"]

    def __str__(self) -> str:
        return f"{self.username} ({self.user_id})"


class PullRequest(models.Model):
    class Status(models.TextChoices):
        OPEN = "OPEN", "Open"
        MERGED = "MERGED", "Merged"

    pull_request_id = models.CharField(max_length=255, primary_key=True)
    pull_request_name = models.CharField(max_length=255)
    author = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name="authored_pull_requests", db_column="author_id",
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    created_at = models.DateTimeField()
    merged_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "pull_requests"
        ordering = ["created_at", "pull_request_id"]

    def __str__(self) -> str:
        return f"{self.pull_request_name} ({self.pull_request_id})"


class ReviewerSlot(models.Model):
    """One position in a pull request's ordered reviewer list.

    ``reviewer_id`` is a plain string: reassignment may name ids that are
    not registered users.
    """

    pull_request = models.ForeignKey(
        PullRequest, on_delete=models.CASCADE, related_name="reviewer_slots",
    )
    position = models.PositiveIntegerField()
    reviewer_id = models.CharField(max_length=255, db_index=True)

    class Meta:
        db_table = "pull_request_reviewers"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["pull_request", "position"], name="unique_reviewer_position"),
        ]

    def __str__(self) -> str:
        return f"{self.pull_request_id}#{self.position}: {self.reviewer_id}"
