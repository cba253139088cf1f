"""formengine CLI entry point."""

import asyncio
import json
import logging
from pathlib import Path

import click

from formengine.config import log_level_from_env, parse_log_level
from formengine.loader import SchemaError, load_data, load_form
from formengine.types import ValidationFailed


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (defaults to $FORMENGINE_LOG_LEVEL, then WARNING).",
)
def cli(log_level: str | None):
    """formengine: declarative form validation CLI."""
    level = log_level_from_env() if log_level is None else parse_log_level(log_level)
    if level is None:
        raise click.BadParameter(f"Unknown log level '{log_level}'", param_hint="--log-level")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_or_exit(form_path: Path):
    try:
        return load_form(form_path)
    except SchemaError as e:
        for issue in e.issues:
            click.echo(click.style(str(issue), fg="red"), err=True)
        raise SystemExit(2)


@cli.command()
@click.argument("form_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def lint(form_path: Path):
    """Check a form definition file against the form schema."""
    definition = _load_or_exit(form_path)
    click.echo(f"Loaded {len(definition.fields)} field(s):")
    for field in definition.fields:
        marker = " (required)" if field.required or any(r.required for r in field.rules) else ""
        click.echo(f"  ✓ {field.name}{marker}")
    click.echo(click.style("\nForm definition is valid.", fg="green", bold=True))


@cli.command()
@click.argument("form_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--field",
    "fields",
    multiple=True,
    help="Validate only this field (repeatable).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print errors as JSON.")
def check(form_path: Path, data_path: Path, fields: tuple[str, ...], as_json: bool):
    """Validate a YAML/JSON data file against a form definition."""
    definition = _load_or_exit(form_path)
    try:
        data = load_data(data_path)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    form = definition.build(model=data)
    try:
        asyncio.run(form.validate(list(fields) or None))
    except ValidationFailed as e:
        if as_json:
            click.echo(json.dumps(e.to_dict(), indent=2))
        else:
            for error in e.errors:
                click.echo(click.style(f"✗ {error.field}: {error.message}", fg="red"))
            click.echo(click.style(f"\n{len(e.errors)} error(s) found", fg="red", bold=True))
        raise SystemExit(1)

    warnings = [(r.path, w) for r in form.registry.all() for w in r.warnings]
    if as_json:
        payload = {
            "errors": [],
            "warnings": [{"field": path, "message": message} for path, message in warnings],
        }
        click.echo(json.dumps(payload, indent=2))
        return
    for path, message in warnings:
        click.echo(click.style(f"! {path}: {message}", fg="yellow"))
    click.echo(click.style("All fields are valid.", fg="green", bold=True))
