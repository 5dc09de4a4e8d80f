import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Team",
            fields=[
                ("team_name", models.CharField(max_length=255, primary_key=True, serialize=False)),
            ],
            options={
                "db_table": "teams",
            },
        ),
        migrations.CreateModel(
            name="User",
            fields=[
                ("user_id", models.CharField(max_length=255, primary_key=True, serialize=False)),
                ("username", models.CharField(max_length=255)),
                ("is_active", models.BooleanField(default=True)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "team",
                    models.ForeignKey(
                        db_column="team_name",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="members",
                        to="reviews.team",
                    ),
                ),
            ],
            options={
                "db_table": "users",
                "ordering": ["position", "user_id"],
            },
        ),
        migrations.CreateModel(
            name="PullRequest",
            fields=[
                ("pull_request_id", models.CharField(max_length=255, primary_key=True, serialize=False)),
                ("pull_request_name", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[("OPEN", "Open"), ("MERGED", "Merged")], default="OPEN", max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("merged_at", models.DateTimeField(blank=True, null=True)),
                (
                    "author",
                    models.ForeignKey(
                        db_column="author_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="authored_pull_requests",
                        to="reviews.user",
                    ),
                ),
            ],
            options={
                "db_table": "pull_requests",
                "ordering": ["created_at", "pull_request_id"],
            },
        ),
        migrations.CreateModel(
            name="ReviewerSlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField()),
                ("reviewer_id", models.CharField(db_index=True, max_length=255)),
                (
                    "pull_request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviewer_slots",
                        to="reviews.pullrequest",
                    ),
                ),
            ],
            options={
                "db_table": "pull_request_reviewers",
                "ordering": ["position"],
            },
        ),
        migrations.AddConstraint(
            model_name="reviewerslot",
            constraint=models.UniqueConstraint(fields=("pull_request", "position"), name="unique_reviewer_position"),
        ),
    ]
