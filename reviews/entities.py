"""Plain data structures exchanged between stores, engine, and views.

Responsibilities:
  - Describe teams, users, and pull requests independently of the ORM.
Must not:
  - Touch the database or make assignment decisions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class PullRequestStatus(str, Enum):
    OPEN = "OPEN"
    MERGED = "MERGED"


@dataclass(frozen=True)
class TeamMember:
    user_id: str
    username: str
    is_active: bool = True


@dataclass(frozen=True)
class Team:
    team_name: str
    members: list[TeamMember] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "team_name": self.team_name,
            "members": [
                {"user_id": m.user_id, "username": m.username, "is_active": m.is_active}
                for m in self.members
            ],
        }


@dataclass
class User:
    user_id: str
    username: str
    team_name: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "team_name": self.team_name,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class PullRequestShort:
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus

    def to_dict(self) -> dict:
        return {
            "pull_request_id": self.pull_request_id,
            "pull_request_name": self.pull_request_name,
            "author_id": self.author_id,
            "status": self.status.value,
        }


@dataclass
class PullRequest:
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus = PullRequestStatus.OPEN
    assigned_reviewers: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None

    @property
    def is_merged(self) -> bool:
        return self.status == PullRequestStatus.MERGED

    def short(self) -> PullRequestShort:
        return PullRequestShort(
            pull_request_id=self.pull_request_id,
            pull_request_name=self.pull_request_name,
            author_id=self.author_id,
            status=self.status,
        )

    def to_dict(self) -> dict:
        return {
            "pull_request_id": self.pull_request_id,
            "pull_request_name": self.pull_request_name,
            "author_id": self.author_id,
            "status": self.status.value,
            "assigned_reviewers": list(self.assigned_reviewers),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "mergedAt": self.merged_at.isoformat() if self.merged_at else None,
        }
