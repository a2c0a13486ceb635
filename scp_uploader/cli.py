"""
Command line interface for the scp uploader.

    scp-uploader validate -c uploader.yaml
    scp-uploader upload -c uploader.yaml --set topology.package_file=./wordcount.tar.gz
    scp-uploader undo -c uploader.yaml
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from .config import UploaderConfigError, load_config, setup_logging, validate_config
from .uploader import ScpUploader

console = Console()
err_console = Console(stderr=True)


def config_options(func):
    """Options shared by every subcommand that needs configuration."""
    func = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity (use -v, -vv, -vvv for more detail)",
    )(func)
    func = click.option(
        "--set",
        "overrides",
        multiple=True,
        metavar="KEY=VALUE",
        help="Override a config value (e.g., uploader.dir_path=/mnt/share)",
    )(func)
    func = click.option(
        "-c",
        "--config",
        "config_files",
        multiple=True,
        type=click.Path(dir_okay=False),
        help="YAML configuration file (can be used multiple times)",
    )(func)
    return func


def _load(config_files, overrides, verbose):
    setup_logging(verbosity=verbose)
    try:
        return load_config(config_files, overrides)
    except UploaderConfigError as e:
        raise click.ClickException(str(e))


def _initialize(config) -> ScpUploader:
    uploader = ScpUploader()
    try:
        uploader.initialize(config)
    except UploaderConfigError as e:
        raise click.ClickException(str(e))
    return uploader


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.pass_context
def scp_uploader(ctx, version):
    """
    scp-uploader - upload topology packages to a shared host with scp
    """
    if version:
        from . import __version__

        click.echo(f"scp-uploader {__version__}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@scp_uploader.command()
@config_options
def validate(config_files, overrides, verbose):
    """Check the configuration without contacting the upload host."""
    config = _load(config_files, overrides, verbose)
    errors = validate_config(config)

    if not errors:
        console.print("✅ Configuration is valid", style="green")
        return

    table = Table(title="Configuration Problems")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Problem", style="red")
    for index, error in enumerate(errors, 1):
        table.add_row(str(index), error)
    console.print(table)
    sys.exit(1)


@scp_uploader.command()
@config_options
@click.option(
    "--undo-on-failure",
    is_flag=True,
    help="Delete the remote file if the upload fails",
)
def upload(config_files, overrides, verbose, undo_on_failure):
    """Upload the topology package and print its URI."""
    config = _load(config_files, overrides, verbose)

    with _initialize(config) as uploader:
        uri = uploader.upload_package()
        if uri is None:
            err_console.print(
                f"❌ Upload of {uploader.topology_package_location} failed",
                style="red",
            )
            if undo_on_failure:
                if uploader.undo():
                    err_console.print("↩️  Rolled back upload", style="yellow")
                else:
                    err_console.print("❌ Rollback failed", style="red")
            sys.exit(1)

    click.echo(uri)


@scp_uploader.command()
@config_options
def undo(config_files, overrides, verbose):
    """Delete the uploaded topology package from the remote host."""
    config = _load(config_files, overrides, verbose)

    with _initialize(config) as uploader:
        if not uploader.undo():
            err_console.print(f"❌ Failed to delete {uploader.dest_file}", style="red")
            sys.exit(1)

    console.print(f"🗑️  Deleted {uploader.dest_file}", style="green")
