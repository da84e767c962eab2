"""bootcfg command — resolve settings, run startup, map the outcome to an exit code.

Flags keep the provisioning service's Go-style single-dash spelling
(``-data-path``); the double-dash form is accepted too. Every flag can be
set through a ``BOOTCFG_*`` environment variable, and an explicit flag
always wins over the environment.
"""

from __future__ import annotations

from typing import Any

import click
from click.core import ParameterSource

from bootcfg import __version__
from bootcfg.config.settings import BootcfgSettings
from bootcfg.output.formatters import format_result
from bootcfg.services.startup import Startup

EXAMPLES = """\
  # Serve on the default address with ./data and ./images
  bootcfg

  # Listen on every interface, skip bootstrapping
  bootcfg -address 0.0.0.0:8080 -config ""

  # Same, configured from the environment
  BOOTCFG_ADDRESS=0.0.0.0:8080 BOOTCFG_LOG_LEVEL=debug bootcfg"""


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class BootcfgCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


@click.command(name="bootcfg", cls=BootcfgCommand, examples=EXAMPLES)
@click.version_option(version=__version__, prog_name="bootcfg")
@click.option(
    "-address", "--address", "address", default=None,
    help="HTTP listen address.  [default: 127.0.0.1:8080]",
)
@click.option(
    "-config", "--config", "config", default=None,
    help="Path to bootstrap group config; empty disables.  [default: ./data/config.yaml]",
)
@click.option(
    "-data-path", "--data-path", "data_path", default=None,
    help="Path to data directory.  [default: ./data]",
)
@click.option(
    "-images-path", "--images-path", "images_path", default=None,
    help="Path to static assets.  [default: ./images]",
)
@click.option(
    "-log-level", "--log-level", "log_level", default=None,
    help="Logging level: critical, error, warning, notice, info, debug, trace.  [default: info]",
)
@click.option(
    "--log-json", "log_json", is_flag=True,
    help="Structured JSON log output to stderr.",
)
def cli(
    address: str | None,
    config: str | None,
    data_path: str | None,
    images_path: str | None,
    log_level: str | None,
    log_json: bool | None,
) -> None:
    """bootcfg — network boot and provisioning configuration service."""
    # A flag left off the command line must not shadow BOOTCFG_LOG_JSON.
    ctx = click.get_current_context()
    if ctx.get_parameter_source("log_json") is not ParameterSource.COMMANDLINE:
        log_json = None
    settings = BootcfgSettings.from_cli(
        address=address,
        config=config,
        data_path=data_path,
        images_path=images_path,
        log_level=log_level,
        log_json=log_json,
    )
    result = Startup(settings).run()
    if not result.ok:
        click.echo(format_result(result, json_output=settings.log_json), err=True)
        raise SystemExit(1)
