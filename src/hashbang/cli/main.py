"""
Main CLI entry point for hashbang.

Exposes the pure codec on the command line, mainly for building and
inspecting links:

    hashbang parse '#!/a/b?x=1&y[]=2&y[]=3'
    hashbang serialize '{"mod": {"id": 5}}'
    hashbang check 'https://example.com/#!page=2'
"""

import json as _json
import logging as _logging
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.pretty as _rich_pretty
import rich.syntax as _rich_syntax
import yaml as _yaml

import hashbang
import hashbang.codec as codec
import hashbang.config as config
import hashbang.errors as errors
import hashbang.sync as sync

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _configure_logging(level: str) -> None:
    """Route hashbang loggers to stderr at the given level."""
    _logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=_sys.stderr,
    )
    _logging.getLogger("hashbang").setLevel(level)


def _to_fragment(text: str) -> str:
    """Accept either a bare fragment or a full URL."""
    if text.startswith("#") or "#" not in text:
        return text
    return sync.fragment_of(text)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(hashbang.__version__, "-V", "--version", prog_name="hashbang")
@_click.option(
    "-s",
    "--separator",
    type=str,
    default=None,
    help="Fragment separator (default from config, usually '#!')",
)
@_click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@_click.pass_context
def cli(ctx: _click.Context, separator: str | None, verbose: bool) -> None:
    """
    hashbang - encode nested values in URL fragments.

    \b
    Examples:
        hashbang parse '#!/a/b?x=1&y[]=2'     # Fragment -> value
        hashbang parse --json '#!a[b]=c'      # ... as JSON
        hashbang serialize '{"a": [1, 2]}'    # Value -> fragment
        echo '{"a": 1}' | hashbang serialize -
        hashbang check '#!a=1'                # Exit 1 if unparsable
    """
    overrides: dict[str, _typing.Any] = {}
    if separator is not None:
        overrides["separator"] = separator
    if verbose:
        overrides["log_level"] = "DEBUG"

    try:
        settings = config.Settings(**overrides)
    except (_pydantic.ValidationError, config.ConfigFileError) as e:
        _click.echo(f"Error: invalid configuration: {e}", err=True)
        raise SystemExit(2) from None

    _configure_logging(settings.log_level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@_click.argument("fragment")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def parse(ctx: _click.Context, fragment: str, json_output: bool) -> None:
    """Decode FRAGMENT (or the fragment of a URL) into a value."""
    settings: config.Settings = ctx.obj["settings"]
    fragment = _to_fragment(fragment)

    if not codec.is_hashbang(fragment, settings.separator):
        _click.echo(
            f"Warning: not a hashbang fragment (expected prefix {settings.separator!r})",
            err=True,
        )

    value = codec.parse(fragment, separator=settings.separator)

    if json_output:
        _click.echo(_json.dumps(value, indent=2, ensure_ascii=False))
    else:
        _rich_console.Console().print(_rich_pretty.Pretty(value, expand_all=True))


@cli.command()
@_click.argument("value")
@_click.option("--strict", is_flag=True, help="Fail on values that cannot be encoded")
@_click.pass_context
def serialize(ctx: _click.Context, value: str, strict: bool) -> None:
    """
    Encode a JSON VALUE into a fragment.

    Use '-' to read the JSON from stdin.
    """
    settings: config.Settings = ctx.obj["settings"]
    text = _sys.stdin.read() if value == "-" else value

    try:
        data = _json.loads(text)
    except _json.JSONDecodeError as e:
        _click.echo(f"Error: invalid JSON: {e}", err=True)
        raise SystemExit(1) from None

    if not isinstance(data, dict):
        _click.echo("Error: the top-level value must be a JSON object", err=True)
        raise SystemExit(1)

    try:
        fragment = codec.serialize(data, separator=settings.separator, strict=strict)
    except errors.UnsupportedValueError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    _click.echo(fragment)


@cli.command()
@_click.argument("fragment")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def check(ctx: _click.Context, fragment: str, json_output: bool) -> None:
    """Check whether FRAGMENT (or a URL's fragment) is a hashbang."""
    settings: config.Settings = ctx.obj["settings"]
    fragment = _to_fragment(fragment)

    ok = codec.is_hashbang(fragment, settings.separator)
    result = {
        "fragment": fragment,
        "separator": settings.separator,
        "status": "ok" if ok else "unparsable",
    }
    if ok:
        result["canonical"] = codec.serialize(
            codec.parse(fragment, separator=settings.separator),
            separator=settings.separator,
        )

    if json_output:
        _click.echo(_json.dumps(result, indent=2))
    else:
        _click.echo(f"Fragment: {result['fragment']}")
        _click.echo(f"Status: {result['status']}")
        if "canonical" in result:
            _click.echo(f"Canonical: {result['canonical']}")

    if not ok:
        raise SystemExit(1)


@cli.command(name="config")
@_click.pass_context
def config_show(ctx: _click.Context) -> None:
    """Show the effective configuration as YAML."""
    settings: config.Settings = ctx.obj["settings"]
    yaml_text = _yaml.safe_dump(
        settings.model_dump(),
        default_flow_style=False,
        sort_keys=False,
    )
    if _sys.stdout.isatty():
        _rich_console.Console().print(
            _rich_syntax.Syntax(yaml_text, "yaml", theme="monokai", background_color="default")
        )
    else:
        _click.echo(yaml_text, nl=False)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="hashbang")


if __name__ == "__main__":
    main()
