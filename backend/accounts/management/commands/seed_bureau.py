"""
Management command: seed_bureau
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Seeds the database with one demo actor per role (plus a master
sentinel) taken from ``accounts.fallback.DEMO_ACTORS``.

Roles are **not** database rows: the role registry is a literal table in
``core.permissions_constants``.  This command only prints it so the
operator can see which capabilities each seeded actor holds.

The command is **idempotent** — safe to run multiple times.  Existing
actors keep their password unless ``--reset-passwords`` is given; their
role, real name and master flag are brought back in line with the demo
table.

Usage::

    python manage.py seed_bureau
    python manage.py seed_bureau --password s3cret7 --reset-passwords
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.fallback import DEMO_ACTORS
from accounts.validators import validate_password
from core.domain.roles import list_roles

Actor = get_user_model()

DEFAULT_PASSWORD = "bureau123"


class Command(BaseCommand):
    help = (
        "Seeds one demo actor per bureau role.  Safe to run multiple "
        "times (idempotent)."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default=DEFAULT_PASSWORD,
            help="Password given to newly created demo actors.",
        )
        parser.add_argument(
            "--reset-passwords",
            action="store_true",
            help="Also reset the password of demo actors that already exist.",
        )

    def handle(self, *args, **options):
        password = options["password"]
        errors = validate_password(password)
        if errors:
            raise CommandError("Invalid --password: " + " ".join(errors))

        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n══════════════════════════════════════════"
            "\n  Bureau Setup — Seeding Demo Actors"
            "\n══════════════════════════════════════════\n"
        ))

        for role in list_roles():
            self.stdout.write(
                f"  ·  {role.name:<16s} (level={role.hierarchy_level}, "
                f"capabilities={len(role.permissions)})"
            )
        self.stdout.write("")

        created_count = 0
        updated_count = 0

        with transaction.atomic():
            for record in DEMO_ACTORS:
                actor, created = Actor.objects.get_or_create(
                    username=record["username"],
                    defaults={
                        "email": record["email"],
                        "real_name": record["real_name"],
                        "role": record["role"],
                        "is_master_actor": record["is_master_actor"],
                        "is_active": record["is_active"],
                    },
                )

                if created or options["reset_passwords"]:
                    actor.set_password(password)

                if not created:
                    actor.real_name = record["real_name"]
                    actor.role = record["role"]
                    actor.is_master_actor = record["is_master_actor"]
                actor.save()

                if created:
                    created_count += 1
                else:
                    updated_count += 1

                self.stdout.write(self.style.SUCCESS(
                    f"  ✔  {'Created' if created else 'Updated'} actor: "
                    f"{actor.username:<12s} ({actor.role})"
                ))

        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n──────────────────────────────────────────"
        ))
        self.stdout.write(self.style.SUCCESS(
            f"  Done!  {created_count} actor(s) created, "
            f"{updated_count} actor(s) updated.\n"
        ))
