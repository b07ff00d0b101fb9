"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import click

from rentals.domain.model.actor import Actor

DATETIME = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"])


def require_actor(actor: Actor | None) -> Actor:
    if actor is None:
        raise click.UsageError("This command needs --actor ROLE:ID")
    return actor
