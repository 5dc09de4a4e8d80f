"""Management command to register teams from a JSON file.

The file holds a list of team objects in the same shape as ``POST /team/add``:
    [{"team_name": "backend", "members": [{"user_id": "u1", "username": "Alice", "is_active": true}]}]

Usage:
    python manage.py load_teams teams.json
"""

import json
import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from reviews.engine import build_engine
from reviews.errors import StoreFailure, TeamExists
from reviews.serializers import TeamSerializer

logger = logging.getLogger("reviews.management.load_teams")


class Command(BaseCommand):
    help = "Register teams and their members from a JSON file, skipping teams that already exist."

    def add_arguments(self, parser):
        parser.add_argument("path", type=Path, help="JSON file with a list of teams")

    def handle(self, *args, **options):
        path: Path = options["path"]
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}")
        except json.JSONDecodeError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}")

        if not isinstance(payload, list):
            raise CommandError("Expected a JSON list of teams.")

        engine = build_engine()
        created = skipped = 0

        for index, item in enumerate(payload):
            serializer = TeamSerializer(data=item)
            if not serializer.is_valid():
                raise CommandError(f"Team #{index} is invalid: {dict(serializer.errors)}")

            team_name = serializer.validated_data["team_name"]
            try:
                engine.create_team(team_name, serializer.to_members())
            except TeamExists:
                self.stdout.write(f"Team {team_name} already exists, skipping.")
                skipped += 1
                continue
            except StoreFailure as exc:
                logger.exception("Failed to register team %s", team_name)
                raise CommandError(f"Failed to register team {team_name}: {exc}")

            self.stdout.write(f"Registered team {team_name}.")
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Done: {created} created, {skipped} skipped."))
