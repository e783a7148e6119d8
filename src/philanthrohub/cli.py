"""Command line interface for PhilanthroHub."""

from __future__ import annotations

import difflib
import logging
import threading
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.syntax import Syntax

from philanthrohub.client import DirectoryClient
from philanthrohub.config import (
    ConfigError,
    ConfigManager,
    HubConfig,
    assign_path,
    flatten_for_env,
    resolve_with_precedence,
)
from philanthrohub.directory import (
    CATEGORIES,
    COUNTRIES,
    STEPS,
    OrganizationDraft,
    parse_application,
    validate_step,
)
from philanthrohub.directory.application import OTHER, WizardStep
from philanthrohub.errors import SubmissionError, ValidationError
from philanthrohub.presentation import PageStatus, build_directory_page, render_directory_page
from philanthrohub.search import SearchFilterState, derive_categories, filter_category_options

console = Console()
LOGGER = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    """Route log records through rich on stderr at ``level``."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(api_url: str | None = None) -> HubConfig:
    """Load configuration, apply an ``--api-url`` override, and configure logging.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    overrides = {"api.base_url": api_url} if api_url else None
    try:
        manager.ensure_exists()
        config = manager.load(cli_overrides=overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging.level)
    return config


def _build_client(config: HubConfig) -> DirectoryClient:
    """Return a directory client for ``config``."""
    return DirectoryClient.from_config(config)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include.
        original: Original exception for chaining.

    Raises:
        SystemExit: In JSON mode, after printing the error payload.
        click.ClickException: Otherwise.
    """
    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if details and isinstance(details, dict):
        for field_name, messages in details.items():
            for entry in messages:
                console.print(f"[red]  - {field_name}: {entry}[/red]")
    raise click.ClickException(message) from original


def _print_field_errors(errors: dict[str, list[str]]) -> None:
    for field_name, messages in errors.items():
        for message in messages:
            console.print(f"[red]  {field_name}: {message}[/red]")


def _resolve_quiet(ctx: click.Context, quiet: bool, config: HubConfig) -> bool:
    if ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE:
        return quiet
    return config.cli.quiet_default


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="philanthrohub")
def cli() -> None:
    """PhilanthroHub lists trusted nonprofits and accepts new listing applications."""


@cli.command()
@click.option("--host", type=str, help="Interface to bind (defaults to server.host).")
@click.option("--port", type=int, help="Port to listen on (defaults to server.port).")
def serve(host: str | None, port: int | None) -> None:
    """Run the directory service.

    Args:
        host: Interface override.
        port: Port override.
    """
    import uvicorn

    from philanthrohub.api import create_app

    config = _load_config()
    app = create_app(settings=config.server)
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=config.logging.level.lower(),
    )


@cli.command("list")
@click.option("--search", "query", type=str, default="", help="Free-text search query.")
@click.option(
    "--category",
    "categories",
    multiple=True,
    help="Only show this category; repeat to select several.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the listing as JSON.")
@click.option("--watch", is_flag=True, help="Keep polling and re-render until interrupted.")
@click.option("--api-url", type=str, help="Directory service URL (defaults to api.base_url).")
def list_organizations(
    query: str,
    categories: tuple[str, ...],
    json_output: bool,
    watch: bool,
    api_url: str | None,
) -> None:
    """List organizations matching the search query and category filters.

    Args:
        query: Free-text query matched against names, categories, and tags.
        categories: Categories to keep; none keeps every category.
        json_output: If True, emit JSON instead of a table.
        watch: If True, poll for updates and re-render.
        api_url: Directory service URL override.
    """
    if watch and json_output:
        raise click.UsageError("--json cannot be combined with --watch.")

    config = _load_config(api_url)
    state = SearchFilterState()
    state.set_search_query(query)
    state.set_selected_categories(categories)

    client = _build_client(config)
    try:
        if watch:
            _watch_directory(client, state)
            return
        page = build_directory_page(client.organizations(), state.criteria)
    finally:
        client.close()

    if json_output:
        console.print_json(data=page.to_payload())
    else:
        console.print(render_directory_page(page))
        if page.status is PageStatus.EMPTY and state.has_active_filters:
            console.print("[dim]Drop --search or --category to list every organization.[/dim]")
    if page.status is PageStatus.ERROR:
        raise SystemExit(1)


def _watch_directory(client: DirectoryClient, state: SearchFilterState) -> None:
    """Re-render the listing whenever the polled list or the search inputs change."""
    changed = threading.Event()
    unsubscribe_query = client.query.subscribe(lambda _result: changed.set())
    unsubscribe_state = state.subscribe(lambda _criteria: changed.set())

    page = build_directory_page(client.organizations(), state.criteria)
    client.start_polling()
    try:
        with Live(render_directory_page(page), console=console, refresh_per_second=4) as live:
            while True:
                if not changed.wait(timeout=1.0):
                    continue
                changed.clear()
                page = build_directory_page(client.query.read(), state.criteria)
                live.update(render_directory_page(page))
    except KeyboardInterrupt:
        console.print("[yellow]Stopped watching.[/yellow]")
    finally:
        unsubscribe_query()
        unsubscribe_state()


@cli.command()
@click.option("--filter", "category_search", type=str, default="", help="Narrow the category list.")
@click.option("--json", "json_output", is_flag=True, help="Emit categories as JSON.")
@click.option("--api-url", type=str, help="Directory service URL (defaults to api.base_url).")
def categories(category_search: str, json_output: bool, api_url: str | None) -> None:
    """List the categories present in the directory.

    Args:
        category_search: Case-insensitive text the category must contain.
        json_output: If True, emit JSON.
        api_url: Directory service URL override.
    """
    config = _load_config(api_url)
    client = _build_client(config)
    try:
        result = client.organizations()
    finally:
        client.close()

    if result.is_error and not result.organizations:
        _handle_cli_error(
            str(result.error),
            code="fetch_failed",
            json_output=json_output,
            original=result.error,
        )

    options = filter_category_options(derive_categories(result.organizations), category_search)
    if json_output:
        console.print_json(data={"categories": options})
        return
    if not options:
        console.print("[yellow]No categories found.[/yellow]")
        return
    for option in options:
        console.print(option)


@cli.command()
@click.option("--name", type=str, help="Organization name (required).")
@click.option("--category", type=str, help="Primary category (required).")
@click.option("--description", type=str, help="Short mission statement.")
@click.option("--website", type=str, help="Website URL.")
@click.option("--country", type=str, help="Country of operation.")
@click.option("--json", "json_output", is_flag=True, help="Emit the created organization as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.option("--api-url", type=str, help="Directory service URL (defaults to api.base_url).")
@click.pass_context
def add(
    ctx: click.Context,
    name: str | None,
    category: str | None,
    description: str | None,
    website: str | None,
    country: str | None,
    json_output: bool,
    quiet: bool,
    api_url: str | None,
) -> None:
    """Add an organization to the directory directly.

    Raises:
        click.ClickException: If the directory rejects the organization.
    """
    config = _load_config(api_url)
    quiet_enabled = _resolve_quiet(ctx, quiet, config)
    draft = OrganizationDraft(
        name=name,
        category=category,
        description=description,
        website=website,
        country=country,
    )

    client = _build_client(config)
    try:
        organization = client.create_organization(draft)
    except ValidationError as exc:
        _handle_cli_error(
            exc.message,
            code="validation_error",
            json_output=json_output,
            details=exc.fields,
            original=exc,
        )
    except SubmissionError as exc:
        _handle_cli_error(str(exc), code="submission_error", json_output=json_output, original=exc)
    finally:
        client.close()

    if json_output:
        console.print_json(data=organization.to_payload())
    elif not quiet_enabled:
        console.print(
            f"[green]Added {organization.name} (id {organization.id}) "
            f"under {organization.category}.[/green]"
        )


def _prompt_text(label: str) -> str:
    return click.prompt(label, default="", show_default=False)


def _collect_step(step: WizardStep, payload: dict[str, Any]) -> None:
    """Prompt for the fields shown on ``step``, writing answers into ``payload``."""
    if step.number == 1:
        payload["name"] = _prompt_text("Organization name")
        payload["website"] = _prompt_text("Website URL")
        payload["country"] = click.prompt("Country of operation", type=click.Choice(COUNTRIES))
        payload["category"] = click.prompt("Primary category", type=click.Choice(CATEGORIES))
        payload["otherCategory"] = ""
        if payload["category"] == OTHER:
            payload["otherCategory"] = _prompt_text("Specify category")
    elif step.number == 2:
        payload["description"] = _prompt_text("Mission description")
    elif step.number == 3:
        compliance = {
            "fcra": click.confirm("Do you have FCRA registration?", default=False),
            "taxExempt": click.confirm("Do you have a tax exemption certificate?", default=False),
            "annualReports": click.confirm("Do you publish audited annual reports?", default=False),
            "other": click.confirm("Do you have another verification document?", default=False),
            "otherDescription": "",
        }
        if compliance["other"]:
            compliance["otherDescription"] = _prompt_text("Name of the document")
        payload["compliance"] = compliance
    else:
        payload["contactEmail"] = _prompt_text("Contact email")


@cli.command()
@click.option("--api-url", type=str, help="Directory service URL (defaults to api.base_url).")
def submit(api_url: str | None) -> None:
    """Apply to list your organization, step by step.

    Raises:
        click.ClickException: If the application cannot be submitted.
    """
    config = _load_config(api_url)
    payload: dict[str, Any] = {}

    for step in STEPS:
        console.print(f"[bold]Step {step.number} of {len(STEPS)}: {step.title}[/bold]")
        while True:
            _collect_step(step, payload)
            errors = validate_step(step.number, payload)
            if not errors:
                break
            _print_field_errors(errors)

    try:
        application = parse_application(payload)
    except ValidationError as exc:
        _handle_cli_error(
            exc.message, code="validation_error", json_output=False, details=exc.fields, original=exc
        )

    client = _build_client(config)
    try:
        organization = client.submit_application(application)
    except ValidationError as exc:
        _handle_cli_error(
            exc.message, code="validation_error", json_output=False, details=exc.fields, original=exc
        )
    except SubmissionError as exc:
        _handle_cli_error(str(exc), code="submission_error", json_output=False, original=exc)
    finally:
        client.close()

    console.print("[green]Application Submitted![/green]")
    console.print(
        f"Thank you for applying to join PhilanthroHub. {organization.name} is listed as "
        f"pending verification; our team will get back to you at "
        f"{application.contact_email} within 3-5 business days."
    )


@cli.group()
def config() -> None:
    """Manage PhilanthroHub configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("env")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when rendering.")
def config_env(no_env: bool) -> None:
    """Print the effective configuration as PHILANTHROHUB__ environment variables.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    for key, value in flatten_for_env(loaded).items():
        click.echo(f"{key}={value}")


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path such as ``cache.stale_time_seconds``.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'api.base_url'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    file_data = manager.load_file_overrides()
    try:
        assign_path(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=HubConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = [
        line
        for line in difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if "# Last updated:" not in line
    ]
    changes = [line for line in diff if line[:1] in "+-" and not line.startswith(("+++", "---"))]
    if not changes:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return
    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=HubConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
