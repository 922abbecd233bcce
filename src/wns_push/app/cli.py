"""Command-line interface for sending WNS push notifications."""

from __future__ import annotations

import json
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final

import click

from wns_push.app.runner import NotificationRunner, SendAction
from wns_push.client import WNSClient
from wns_push.config import ConfigError, suggest_config_fix
from wns_push.errors import WNSError, WNSValidationError
from wns_push.templates import iter_templates
from wns_push.types import SendResult
from wns_push.utils.sanitization import sanitize_exception

__all__ = ["cli", "main"]

# Exit codes
EXIT_VALIDATION_ERROR: Final[int] = 1
EXIT_DELIVERY_FAILED: Final[int] = 2

VALID_LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})
VALID_CONFIG_EXTENSIONS: Final[frozenset[str]] = frozenset({".yaml", ".yml"})

try:
    __version__ = version("wns-push")
except PackageNotFoundError:
    __version__ = "unknown"


def validate_config_path(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: Path | None,
) -> Path | None:
    """Validate settings file path.

    Raises:
        click.BadParameter: If the path is a directory or not a YAML file
    """
    if value is None:
        return value

    if value.exists() and value.is_dir():
        raise click.BadParameter("Configuration path must be a file, not a directory")

    if value.suffix.lower() not in VALID_CONFIG_EXTENSIONS:
        extensions_str = ", ".join(sorted(VALID_CONFIG_EXTENSIONS))
        raise click.BadParameter(f"Invalid configuration file extension. Supported extensions: {extensions_str}")

    return value


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Validate and normalize log level.

    Raises:
        click.BadParameter: If the level is not one of DEBUG, INFO, WARNING, ERROR
    """
    if value is None:
        return value

    normalized_value = value.upper().strip()
    if normalized_value not in VALID_LOG_LEVELS:
        raise click.BadParameter(f'Invalid log level "{value}". Valid options: {", ".join(sorted(VALID_LOG_LEVELS))}')

    return normalized_value


def sanitize_string_input(value: str | None) -> str | None:
    """Strip whitespace, mapping empty strings to None."""
    if value is None:
        return None

    sanitized = value.strip()
    return sanitized if sanitized else None


def parse_pairs(values: tuple[str, ...], *, option: str) -> dict[str, str]:
    """Parse repeated NAME=VALUE option values.

    Raises:
        WNSValidationError: If a value has no '=' or an empty name
    """
    pairs: dict[str, str] = {}
    for item in values:
        name, separator, value = item.partition("=")
        name = name.strip()
        if not separator or not name:
            msg = f"The {option} option must be given as NAME=VALUE, got {item!r}."
            raise WNSValidationError(msg)
        pairs[name] = value
    return pairs


def build_options(
    *,
    client_id: str | None,
    client_secret: str | None,
    access_token: str | None,
    headers: tuple[str, ...],
    duration: str | None = None,
    launch: str | None = None,
    audio: str | None = None,
    audio_loop: bool = False,
    silent: bool = False,
) -> dict[str, object]:
    """Assemble a send options mapping from command-line values."""
    options: dict[str, object] = {}
    for key, value in (
        ("client_id", sanitize_string_input(client_id)),
        ("client_secret", sanitize_string_input(client_secret)),
        ("access_token", sanitize_string_input(access_token)),
        ("duration", duration),
        ("launch", launch),
    ):
        if value is not None:
            options[key] = value

    parsed_headers = parse_pairs(headers, option="--header")
    if parsed_headers:
        options["headers"] = parsed_headers

    if audio is not None or audio_loop or silent:
        audio_options: dict[str, object] = {}
        if audio is not None:
            audio_options["src"] = audio
        if audio_loop:
            audio_options["loop"] = True
        if silent:
            audio_options["silent"] = True
        options["audio"] = audio_options

    return options


def format_result(result: SendResult, *, show_token: bool) -> str:
    """Render a send result as a JSON document."""
    document: dict[str, object] = {
        "status_code": result.status_code,
        "notification_status": result.notification_status,
        "device_connection_status": result.device_connection_status,
        "message_id": result.message_id,
    }
    if show_token and result.new_access_token is not None:
        document["new_access_token"] = result.new_access_token
    return json.dumps(document, indent=2)


def execute(runner: NotificationRunner, action: SendAction, *, show_token: bool) -> None:
    """Run one send and translate its outcome into output and an exit code."""
    ctx = click.get_current_context()
    try:
        result = runner.run(action)
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        suggestion = suggest_config_fix(exc)
        if suggestion:
            click.echo(f"Suggestion: {suggestion}", err=True)
        ctx.exit(EXIT_VALIDATION_ERROR)
    except WNSValidationError as exc:
        click.echo(f"Invalid request: {exc}", err=True)
        ctx.exit(EXIT_VALIDATION_ERROR)
    except WNSError as exc:
        click.echo(f"Delivery failed: {sanitize_exception(exc)}", err=True)
        if exc.status_code is not None:
            click.echo(f"HTTP status code: {exc.status_code}", err=True)
        ctx.exit(EXIT_DELIVERY_FAILED)
    else:
        click.echo(format_result(result, show_token=show_token))


def credential_options[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Add the credential, static token, header and output options to a command."""
    decorators = (
        click.option(
            "--client-id",
            type=str,
            default=None,
            help="client_id of the application registered with WNS (default: WNS_CLIENT_ID)",
        ),
        click.option(
            "--client-secret",
            type=str,
            default=None,
            help="client_secret of the application registered with WNS (default: WNS_CLIENT_SECRET)",
        ),
        click.option(
            "--access-token",
            type=str,
            default=None,
            help="Access token from an earlier send; a new one is obtained if WNS rejects it",
        ),
        click.option(
            "--header",
            "headers",
            multiple=True,
            metavar="NAME=VALUE",
            help="HTTP header added to, or overriding, the notification request (repeatable)",
        ),
        click.option(
            "--show-token",
            is_flag=True,
            help="Include a newly obtained access token in the output",
        ),
    )
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    default=None,
    callback=validate_config_path,
    help="YAML settings file (token_url, scope, timeout_seconds, log_level, client_id, client_secret)",
)
@click.option(
    "--log-level",
    "-l",
    type=str,
    default=None,
    callback=validate_log_level,
    help="Logging verbosity level (DEBUG, INFO, WARNING, ERROR)",
)
@click.version_option(version=__version__, prog_name="wns-push")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, log_level: str | None) -> None:
    """wns-push - Send push notifications through the Windows Notification Service.

    Credentials come from --client-id/--client-secret, the settings file, or
    the WNS_CLIENT_ID and WNS_CLIENT_SECRET environment variables.

    Examples:

        # Send a toast from a template
        wns-push template ToastText01 https://db5.notify.windows.com/?token=... "Build finished"

        # Set a numeric badge
        wns-push badge https://db5.notify.windows.com/?token=... 7

        # Send a pre-formatted raw payload read from stdin
        echo '{"id": 1}' | wns-push send https://db5.notify.windows.com/?token=... raw -
    """
    ctx.obj = NotificationRunner(config_path=config, log_level=log_level)


@cli.command()
@click.argument("channel")
@click.argument("notification_type", metavar="TYPE", type=click.Choice(["toast", "badge", "tile", "raw"]))
@click.argument("payload")
@credential_options
@click.pass_obj
def send(
    runner: NotificationRunner,
    channel: str,
    notification_type: str,
    payload: str,
    client_id: str | None,
    client_secret: str | None,
    access_token: str | None,
    headers: tuple[str, ...],
    show_token: bool,
) -> None:
    """Send a pre-formatted PAYLOAD of the given TYPE to CHANNEL.

    Use - as PAYLOAD to read it from standard input.
    """
    body = click.get_text_stream("stdin").read() if payload == "-" else payload

    async def action(client: WNSClient) -> SendResult:
        options = build_options(
            client_id=client_id,
            client_secret=client_secret,
            access_token=access_token,
            headers=headers,
        )
        return await client.send(channel, body, notification_type, options)

    execute(runner, action, show_token=show_token)


@cli.command()
@click.argument("channel")
@click.argument("value")
@click.option("--badge-version", type=int, default=1, show_default=True, help="Badge schema version")
@credential_options
@click.pass_obj
def badge(
    runner: NotificationRunner,
    channel: str,
    value: str,
    badge_version: int,
    client_id: str | None,
    client_secret: str | None,
    access_token: str | None,
    headers: tuple[str, ...],
    show_token: bool,
) -> None:
    """Set the badge of CHANNEL to VALUE (1-99 or a badge state such as alert)."""
    badge_value: int | str = int(value) if value.isdigit() else value

    async def action(client: WNSClient) -> SendResult:
        options = build_options(
            client_id=client_id,
            client_secret=client_secret,
            access_token=access_token,
            headers=headers,
        )
        return await client.send_badge(channel, {"value": badge_value, "version": badge_version}, options)

    execute(runner, action, show_token=show_token)


@cli.command()
@click.argument("name")
@click.argument("channel")
@click.argument("params", nargs=-1)
@click.option(
    "--param",
    "named_params",
    multiple=True,
    metavar="KEY=VALUE",
    help="Named parameter such as image1src=..., image1alt=... or text1=... (repeatable)",
)
@click.option("--duration", type=click.Choice(["long", "short"]), default=None, help="Toast display duration")
@click.option("--launch", type=str, default=None, help="Toast launch argument")
@click.option("--audio", type=str, default=None, help="Toast sound, e.g. Default, IM, Mail, Looping.Call")
@click.option("--audio-loop", is_flag=True, help="Loop the toast sound")
@click.option("--silent", is_flag=True, help="Mute the toast sound")
@credential_options
@click.pass_obj
def template(
    runner: NotificationRunner,
    name: str,
    channel: str,
    params: tuple[str, ...],
    named_params: tuple[str, ...],
    duration: str | None,
    launch: str | None,
    audio: str | None,
    audio_loop: bool,
    silent: bool,
    client_id: str | None,
    client_secret: str | None,
    access_token: str | None,
    headers: tuple[str, ...],
    show_token: bool,
) -> None:
    """Send the tile or toast template NAME to CHANNEL.

    PARAMS are the template parameters in slot order: src and alt text for
    each image, then each text field. Alternatively pass --param KEY=VALUE.
    """

    async def action(client: WNSClient) -> SendResult:
        if params and named_params:
            msg = "Template parameters must be given either positionally or with --param, not both."
            raise WNSValidationError(msg)
        template_params: object = parse_pairs(named_params, option="--param") if named_params else list(params)
        options = build_options(
            client_id=client_id,
            client_secret=client_secret,
            access_token=access_token,
            headers=headers,
            duration=duration,
            launch=launch,
            audio=audio,
            audio_loop=audio_loop,
            silent=silent,
        )
        return await client.send_template(name, channel, template_params, options)

    execute(runner, action, show_token=show_token)


@cli.command()
@click.option("--kind", type=click.Choice(["tile", "toast"]), default=None, help="Only list templates of this kind")
def templates(kind: str | None) -> None:
    """List the supported tile and toast templates with their slot counts."""
    for spec in iter_templates(kind):  # pyright: ignore[reportArgumentType]
        click.echo(
            f"{spec.name:<32} {spec.kind:<6} images={spec.image_count} texts={spec.text_count} "
            f"params={spec.param_count}"
        )


def main() -> None:
    """Entry point for the wns-push console script."""
    cli(prog_name="wns-push")
