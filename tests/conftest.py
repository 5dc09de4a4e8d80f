"""
Pytest fixtures for the PR reviewer test suite.
"""

import copy
from contextlib import nullcontext
from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from reviews.engine import ReviewEngine
from reviews.entities import Team, TeamMember, User
from reviews.stores import RecordExists, RecordNotFound


class InMemoryDirectory:
    """Directory store kept in dicts; returns copies like a real database would."""

    def __init__(self):
        self.teams = {}
        self.users = {}

    def atomic(self):
        return nullcontext()

    def team_exists(self, team_name):
        return team_name in self.teams

    def create_team(self, team):
        if team.team_name in self.teams:
            raise RecordExists(team.team_name)
        ids = {m.user_id for m in team.members}
        # A user belongs to one team; re-bound users leave their old one.
        for name, other in self.teams.items():
            self.teams[name] = Team(other.team_name, [m for m in other.members if m.user_id not in ids])
        self.teams[team.team_name] = copy.deepcopy(team)
        for member in team.members:
            self.users[member.user_id] = User(
                user_id=member.user_id,
                username=member.username,
                team_name=team.team_name,
                is_active=member.is_active,
            )

    def get_team(self, team_name):
        if team_name not in self.teams:
            raise RecordNotFound(team_name)
        team = self.teams[team_name]
        # Active flags live on users; rebuild members from them.
        members = [
            TeamMember(m.user_id, self.users[m.user_id].username, self.users[m.user_id].is_active)
            for m in team.members
        ]
        return Team(team_name=team_name, members=members)

    def save_user(self, user):
        self.users[user.user_id] = copy.deepcopy(user)

    def get_user(self, user_id):
        if user_id not in self.users:
            raise RecordNotFound(user_id)
        return copy.deepcopy(self.users[user_id])


class InMemoryPullRequests:
    def __init__(self):
        self.records = {}
        self.saves = 0

    def atomic(self):
        return nullcontext()

    def exists(self, pull_request_id):
        return pull_request_id in self.records

    def create(self, pr):
        if pr.pull_request_id in self.records:
            raise RecordExists(pr.pull_request_id)
        self.records[pr.pull_request_id] = copy.deepcopy(pr)

    def save(self, pr):
        self.saves += 1
        self.records[pr.pull_request_id] = copy.deepcopy(pr)

    def get_by_id(self, pull_request_id):
        if pull_request_id not in self.records:
            raise RecordNotFound(pull_request_id)
        return copy.deepcopy(self.records[pull_request_id])

    def get_by_reviewer(self, user_id):
        # dicts keep insertion order, which is creation order here
        return [
            copy.deepcopy(pr) for pr in self.records.values()
            if user_id in pr.assigned_reviewers
        ]


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self):
        self.current = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def directory():
    return InMemoryDirectory()


@pytest.fixture
def pull_request_store():
    return InMemoryPullRequests()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def engine(directory, pull_request_store, clock):
    """Engine over in-memory stores with a deterministic clock."""
    return ReviewEngine(directory, pull_request_store, clock=clock)


@pytest.fixture
def make_members():
    """Build members from ``(user_id, is_active)`` pairs."""
    def _make(*pairs):
        return [TeamMember(user_id=uid, username=uid.upper(), is_active=active) for uid, active in pairs]
    return _make


@pytest.fixture
def api_client():
    return APIClient()
