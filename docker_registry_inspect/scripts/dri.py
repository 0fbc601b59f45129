#!/usr/bin/env python

"""docker-registry-inspect command line interface."""

import logging
import sys

from traceback import print_exception
from typing import Any, Awaitable, Callable, NamedTuple

import click

from click.core import Context
from docker_registry_inspect import (
    __version__,
    ManifestStatus,
    RegistryClient,
)

from .utils import (
    async_command,
    echo_result,
    LOGGING_DEFAULT,
    logging_options,
    set_log_levels,
)

LOGGER = logging.getLogger("docker_registry_inspect")


class TypingContextObject(NamedTuple):
    # pylint: disable=missing-class-docstring
    registry_client: RegistryClient
    verbosity: int


def get_context_object(*, context: Context) -> TypingContextObject:
    """Wrapper method to enforce type checking."""
    return context.obj


async def _invoke(
    *, context: Context, operation: Callable[[RegistryClient], Awaitable[Any]]
) -> Any:
    """Validates the registry, then invokes an operation against it."""

    ctx = get_context_object(context=context)
    try:
        await ctx.registry_client.validate()
        return await operation(ctx.registry_client)
    except Exception as exception:  # pylint: disable=broad-except
        if ctx.verbosity > 0:
            logging.fatal(exception)
        if ctx.verbosity > LOGGING_DEFAULT:
            exc_info = sys.exc_info()
            print_exception(*exc_info)
        sys.exit(1)
    finally:
        await ctx.registry_client.close()


@click.group()
@click.argument("registry", required=True)
@click.option(
    "-c",
    "--cacerts",
    envvar="DRI_CACERTS",
    help="Trust the CA certificate(s) in the given file.",
    type=click.Path(dir_okay=False, exists=True),
)
@click.option(
    "-k",
    "--insecure",
    envvar="DRI_INSECURE",
    help="Do not verify the registry certificate.",
    is_flag=True,
)
@logging_options
@click.version_option(version=__version__)
@click.pass_context
def cli(
    context: Context,
    registry: str,
    cacerts: str,
    insecure: bool,
    verbosity: int = LOGGING_DEFAULT,
):
    """Utility for inspecting a docker registry (API v2)."""

    if verbosity is None:
        verbosity = LOGGING_DEFAULT

    set_log_levels(verbosity)
    context.obj = TypingContextObject(
        registry_client=RegistryClient(
            registry, cacerts=cacerts, insecure=insecure, logger=LOGGER
        ),
        verbosity=verbosity,
    )


@cli.command()
@click.pass_context
@async_command
async def validate(context: Context):
    """Verifies that the registry implements API v2."""

    async def operation(registry_client: RegistryClient):
        # pylint: disable=unused-argument
        return "Registry API v2 is available."

    echo_result(await _invoke(context=context, operation=operation))


@cli.command(name="list-repositories")
@click.option(
    "-n",
    "--count",
    default=RegistryClient.DEFAULT_CATALOG_COUNT,
    envvar="DRI_CATALOG_COUNT",
    help="Maximum number of repositories to list.",
    show_default=True,
    type=click.IntRange(min=1),
)
@click.pass_context
@async_command
async def list_repositories(context: Context, count: int):
    """Lists the repositories in the registry catalog."""

    async def operation(registry_client: RegistryClient):
        return await registry_client.list_repositories(count)

    echo_result(await _invoke(context=context, operation=operation))


@cli.command(name="list-tags")
@click.argument("repository", required=True)
@click.pass_context
@async_command
async def list_tags(context: Context, repository: str):
    """Lists the tags of a repository."""

    async def operation(registry_client: RegistryClient):
        return await registry_client.list_tags(repository)

    echo_result(await _invoke(context=context, operation=operation))


@cli.command(name="get-manifest")
@click.argument("repository", required=True)
@click.argument("reference", required=True)
@click.pass_context
@async_command
async def get_manifest(context: Context, repository: str, reference: str):
    """Displays the manifest of an image."""

    async def operation(registry_client: RegistryClient):
        return await registry_client.get_manifest(repository, reference)

    lookup = await _invoke(context=context, operation=operation)
    if lookup.status == ManifestStatus.NOT_FOUND:
        click.echo("Manifest not found")
        sys.exit(1)
    echo_result(lookup.manifest)


@cli.command(name="delete-manifest")
@click.argument("repository", required=True)
@click.argument("digest", required=True)
@click.pass_context
@async_command
async def delete_manifest(context: Context, repository: str, digest: str):
    """Deletes a manifest by digest."""

    async def operation(registry_client: RegistryClient):
        return await registry_client.delete_manifest(repository, digest)

    echo_result(await _invoke(context=context, operation=operation))


@cli.command(name="delete-blob")
@click.argument("repository", required=True)
@click.argument("digest", required=True)
@click.pass_context
@async_command
async def delete_blob(context: Context, repository: str, digest: str):
    """Deletes a blob by digest."""

    async def operation(registry_client: RegistryClient):
        return await registry_client.delete_blob(repository, digest)

    echo_result(await _invoke(context=context, operation=operation))


@cli.command(name="list-size")
@click.argument("repository", required=True)
@click.pass_context
@async_command
async def list_size(context: Context, repository: str):
    """Displays the per-tag and overall size of a repository."""

    async def operation(registry_client: RegistryClient):
        return await registry_client.list_size(repository)

    report = await _invoke(context=context, operation=operation)
    click.echo(str(report))


@cli.command(name="list-all")
@click.pass_context
@async_command
async def list_all(context: Context):
    """Displays the size of every repository in the registry catalog."""

    async def operation(registry_client: RegistryClient):
        return await registry_client.list_all()

    for report in await _invoke(context=context, operation=operation):
        click.echo(str(report))


if __name__ == "__main__":
    # pylint: disable=no-value-for-parameter
    cli()
