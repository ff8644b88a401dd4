"""
Parses minedown markup and prints the resulting styled runs.
The message comes from the argument, a file, or standard input.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from .config import ConfigError, build_config, disable, filter_option
from .exceptions import MarkupError
from .filesystem import get_max_file_size, read_message
from .models import Option
from .parser import escape, parse, plain_text

__all__ = ["cli"]

OPTION_NAMES = [option.name.lower() for option in Option]


@click.command()
@click.version_option(package_name="minedown")
@click.option(
    "--file",
    "filepath",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the message from a UTF-8 file",
)
@click.option("--lenient", is_flag=True, help="Degrade malformed definitions instead of failing")
@click.option("--no-url-detection", is_flag=True, help="Do not turn bare URLs into links")
@click.option("--color-char", help="Character introducing legacy color codes")
@click.option("--hover-width", type=int, help="Maximum line width of hover text")
@click.option(
    "--disable",
    "disabled",
    multiple=True,
    type=click.Choice(OPTION_NAMES, case_sensitive=False),
    help="Leave a markup feature uninterpreted (repeatable)",
)
@click.option(
    "--filter",
    "filtered",
    multiple=True,
    type=click.Choice(OPTION_NAMES, case_sensitive=False),
    help="Strip a markup feature without styling (repeatable)",
)
@click.option(
    "--output",
    type=click.Choice(["json", "plain"]),
    default="json",
    show_default=True,
    help="Print runs as JSON or as plain text",
)
@click.option("--escape", "escape_only", is_flag=True, help="Print the escaped message instead")
@click.option("-v", "--verbose", is_flag=True, help="Log lenient fallbacks to stderr")
@click.argument("message", required=False)
def cli(
    message: str | None,
    filepath: Path | None = None,
    lenient: bool = False,
    no_url_detection: bool = False,
    color_char: str | None = None,
    hover_width: int | None = None,
    disabled: tuple[str, ...] = (),
    filtered: tuple[str, ...] = (),
    output: str = "json",
    escape_only: bool = False,
    verbose: bool = False,
):
    """
    Entry point for parsing a minedown message.

    Args:
        message: Markup to parse; read from `filepath` or stdin when omitted.
        filepath: File holding the markup.
        lenient: Degrade malformed definitions to defaults.
        no_url_detection: Disable bare URL detection.
        color_char: Override for the legacy color character.
        hover_width: Override for the hover text wrap width.
        disabled: Markup features to disable.
        filtered: Markup features to filter.
        output: ``json`` for run dictionaries, ``plain`` for the text only.
        escape_only: Print the escaped message instead of parsing it.
        verbose: Enable debug logging.

    Raises:
        click.BadParameter: If the configuration is invalid or both a message
            and a file are given.
        click.ClickException: If the file cannot be read or the markup is
            malformed in strict mode.

    Examples:
        minedown "&6Gold **bold** [link](https://example.com)"
        minedown --lenient --output plain --file motd.txt
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if message is not None and filepath is not None:
        raise click.BadParameter("Pass either MESSAGE or --file, not both.")

    try:
        config = build_config(
            Path.cwd(),
            color_char=color_char,
            hover_text_width=hover_width,
            lenient=True if lenient else None,
            url_detection=False if no_url_detection else None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    for name in disabled:
        config = disable(config, Option.from_name(name))
    for name in filtered:
        config = filter_option(config, Option.from_name(name))

    if filepath is not None:
        try:
            message = read_message(filepath, get_max_file_size())
        except (IOError, ValueError) as error:
            raise click.ClickException(str(error)) from error
    elif message is None:
        with click.open_file("-") as stream:
            message = stream.read().rstrip("\r\n")

    if escape_only:
        click.echo(escape(message, config))
        return

    try:
        runs = parse(message, config)
    except MarkupError as error:
        raise click.ClickException(str(error)) from error

    if output == "plain":
        click.echo(plain_text(runs))
    else:
        click.echo(json.dumps([run.to_dict() for run in runs], indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
