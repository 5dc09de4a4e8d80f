"""
Tests for the load_teams management command.
"""

import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from reviews import models

pytestmark = pytest.mark.django_db


def _write(tmp_path, payload):
    path = tmp_path / "teams.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_registers_teams_and_skips_existing(tmp_path):
    models.Team.objects.create(pk="backend")
    path = _write(tmp_path, [
        {"team_name": "backend", "members": [{"user_id": "x", "username": "X", "is_active": True}]},
        {"team_name": "frontend", "members": [
            {"user_id": "f1", "username": "Fay", "is_active": True},
            {"user_id": "f2", "username": "Finn", "is_active": False},
        ]},
    ])
    out = StringIO()

    call_command("load_teams", str(path), stdout=out)

    assert "1 created, 1 skipped" in out.getvalue()
    assert list(models.User.objects.filter(team_id="frontend").values_list("user_id", flat=True)) == ["f1", "f2"]
    assert not models.User.objects.filter(pk="x").exists()


def test_rejects_non_list(tmp_path):
    path = _write(tmp_path, {"team_name": "backend"})

    with pytest.raises(CommandError, match="JSON list"):
        call_command("load_teams", str(path))


def test_rejects_invalid_team(tmp_path):
    path = _write(tmp_path, [{"team_name": "backend"}])

    with pytest.raises(CommandError, match="Team #0 is invalid"):
        call_command("load_teams", str(path))


def test_missing_file(tmp_path):
    with pytest.raises(CommandError, match="Cannot read"):
        call_command("load_teams", str(tmp_path / "missing.json"))
