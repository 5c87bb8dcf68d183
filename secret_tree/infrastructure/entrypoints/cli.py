"""
CLI entry point: get, create and delete secrets for a namespace/environment.

This module is the Composition Root for command-line runs. It loads a .env file,
configures logging, and hands each command a SecretsClient from build_client().

Run:
    secret-tree get-config --env production --namespace billing --pretty
    secret-tree get-config --env production --sync --max-output-bytes 1048576
    secret-tree create-secrets config.yaml --env staging --kms alias/app
    secret-tree delete-secrets --env staging --dry-run
"""

import asyncio
import json
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

import click
import yaml
from dotenv import load_dotenv

from secret_tree.application.services.secrets_client import SecretsClient
from secret_tree.domain.entities.secret import BulkOutcome
from secret_tree.domain.errors import SecretTreeError
from secret_tree.infrastructure.entrypoints.secrets_factory import build_client
from secret_tree.infrastructure.logging.structlog_config import configure_logging

DEFAULT_ENV = "development"

ClientFactory = Callable[..., SecretsClient]


def _client_factory(ctx: click.Context) -> ClientFactory:
    return (ctx.obj or {}).get("client_factory", build_client)


def _scope_options(func):
    func = click.option("-n", "--namespace", default=None, help="Namespace of all secrets.")(func)
    func = click.option(
        "-e", "--env", "environment", envvar="ENVIRONMENT", default=DEFAULT_ENV, show_default=True,
        help="Environment segment of the secret names.",
    )(func)
    func = click.option(
        "-r", "--region", envvar="AWS_DEFAULT_REGION", default=None,
        help="AWS Secrets Manager region.",
    )(func)
    return func


def _report(outcomes: list[BulkOutcome], verb: str, verbose: bool) -> int:
    failures = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in outcomes:
        if outcome.ok and verbose:
            click.echo(f"{verb} {outcome.name}")
        elif not outcome.ok:
            click.echo(f"failed {outcome.name}: {outcome.error}", err=True)
    return 1 if failures else 0


@contextmanager
def _reporting_errors() -> Iterator[None]:
    """Report domain errors as click errors (exit status 1, no traceback)."""
    try:
        yield
    except SecretTreeError as exc:
        raise click.ClickException(f"{exc.code}: {exc.message}") from exc


@click.group()
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines.")
def cli(log_level: Optional[str], json_logs: bool) -> None:
    """Assemble configuration from AWS Secrets Manager."""
    load_dotenv()
    configure_logging(log_level, use_json=json_logs)


@cli.command("get-config")
@_scope_options
@click.option("-d", "--delimiter", default="/", show_default=True, help="Secret name delimiter.")
@click.option("-a", "--all", "all_", is_flag=True, help="Ignore the environment and retrieve all secrets.")
@click.option("-p", "--pretty", is_flag=True, help="Indented output.")
@click.option("-t", "--time", "timed", is_flag=True, help="Report how long retrieval took.")
@click.option("-s", "--sync", "sync", is_flag=True, help="Retrieve through a blocking worker process.")
@click.option(
    "-m", "--max-output-bytes", type=click.IntRange(min=1), default=None,
    help="Largest the entire config can be in bytes with --sync (default: 3 MiB).",
)
@click.pass_context
def get_config(
    ctx: click.Context,
    region: Optional[str],
    environment: str,
    namespace: Optional[str],
    delimiter: str,
    all_: bool,
    pretty: bool,
    timed: bool,
    sync: bool,
    max_output_bytes: Optional[int],
) -> None:
    """Print the config tree built from every in-scope secret."""
    started = time.perf_counter()
    client = _client_factory(ctx)(
        region=region,
        environment=environment,
        namespace=namespace,
        delimiter=delimiter,
        all=all_,
        max_output_bytes=max_output_bytes,
    )
    with _reporting_errors():
        tree = client.config_sync() if sync else asyncio.run(client.config())

    click.echo(json.dumps(tree, indent=2 if pretty else None, default=str))
    if timed:
        click.echo(f"total time: {time.perf_counter() - started:.3f}s", err=True)


@cli.command("create-secrets")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_scope_options
@click.option("-d", "--delimiter", default="/", show_default=True, help="Secret name delimiter.")
@click.option("-k", "--kms", default=None, help="KMS key id used to encrypt the secrets.")
@click.option("-v", "--verbose", is_flag=True, help="List every created secret.")
@click.pass_context
def create_secrets(
    ctx: click.Context,
    config_file: Path,
    region: Optional[str],
    environment: str,
    namespace: Optional[str],
    delimiter: str,
    kms: Optional[str],
    verbose: bool,
) -> None:
    """Create one secret per leaf of a YAML or JSON CONFIG_FILE."""
    # JSON is a subset of YAML, so safe_load reads both formats.
    try:
        tree = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise click.ClickException(f"{config_file} is not valid YAML or JSON: {exc}") from exc
    if not isinstance(tree, dict):
        raise click.ClickException(f"{config_file} must contain a mapping at the top level")

    client = _client_factory(ctx)(
        region=region,
        environment=environment,
        namespace=namespace,
        delimiter=delimiter,
    )
    with _reporting_errors():
        outcomes = asyncio.run(client.create_secrets(tree, kms=kms))
    ctx.exit(_report(outcomes, "created", verbose))


@cli.command("delete-secrets")
@_scope_options
@click.option("-f", "--force", is_flag=True, help="Delete without a recovery window.")
@click.option("--dry-run", is_flag=True, help="List what would be deleted.")
@click.option("-q", "--quiet", is_flag=True, help="Skip the confirmation prompt.")
@click.option("-v", "--verbose", is_flag=True, help="List every deleted secret.")
@click.pass_context
def delete_secrets(
    ctx: click.Context,
    region: Optional[str],
    environment: str,
    namespace: Optional[str],
    force: bool,
    dry_run: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Delete every secret in a region, environment and namespace.

    This is destructive. You are prompted for confirmation unless --quiet.
    Only the secrets counted in the prompt are deleted.
    """
    client = _client_factory(ctx)(region=region, environment=environment, namespace=namespace)
    with _reporting_errors():
        listing = asyncio.run(client.list_secrets())
    if not listing:
        raise click.ClickException("Nothing to delete")

    if not quiet:
        prompt = (
            f"This will remove {len(listing)} {environment} secrets from AWS Secrets Manager. "
            "Are you sure you want to continue?"
        )
        if dry_run:
            prompt = f"!!DRY RUN!! {prompt}"
        if not click.confirm(prompt, default=False):
            raise click.ClickException("Aborting... Nothing was deleted, your secrets are safe.")

    with _reporting_errors():
        outcomes = asyncio.run(client.delete_secrets(force=force, dry_run=dry_run, listing=listing))
    if dry_run:
        for outcome in outcomes:
            click.echo(outcome.name)
        click.echo("DRY RUN: no secrets were deleted", err=True)
        return
    ctx.exit(_report(outcomes, "deleted", verbose))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
