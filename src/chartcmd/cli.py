"""Command-line interface for chartcmd.

This module provides the `chartcmd` entry point. Each sub-command opens a
HelmSession, runs a single helm operation and closes the session again.
"""

import sys
from collections.abc import Callable, Generator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
from rich.markup import escape
from icecream import ic

from chartcmd import __version__, console
from chartcmd.core.session import HelmSession
from chartcmd.exceptions import ChartCmdError, ExecutionError
from chartcmd.models import Credentials, TemplateOptions, ToolGeneration, ToolProfile
from chartcmd.version import BINARY_ENV_VAR, DEFAULT_BINARY, profile_for_generation

_HELM_VERSIONS = {"2": ToolGeneration.LEGACY, "3": ToolGeneration.MODERN}


@dataclass(frozen=True, slots=True)
class SessionSettings:
    """Session settings collected from the top-level options."""

    work_dir: Path
    binary: str
    profile: ToolProfile | None


@contextmanager
def open_session(settings: SessionSettings) -> Generator[HelmSession, None, None]:
    """Open a session and turn chartcmd errors into a failed exit.

    Args:
        settings: Settings from the top-level command.

    Yields:
        An open HelmSession, closed when the block exits.

    """
    try:
        with HelmSession(settings.work_dir, profile=settings.profile, binary_name=settings.binary) as session:
            ic(session)
            console.action(f"Using helm {session.profile.generation.value} ({session.profile.binary_name})")
            yield session
    except ExecutionError as e:
        console.error(f"helm failed with exit code {e.exit_code}")
        if e.output.strip():
            click.echo(e.output, err=True, nl=not e.output.endswith("\n"))
        sys.exit(1)
    except ChartCmdError as e:
        console.error(escape(str(e)))
        sys.exit(1)


def _init_client(session: HelmSession) -> None:
    if session.profile.init_supported:
        console.step("Initialising helm client")
    session.init()


def _parse_key_values(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated `key=value` options into an ordered mapping."""
    parsed: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {item!r}", ctx=ctx, param=param)
        parsed[key] = value
    return parsed


def _read_bytes(path: Path | None) -> bytes:
    return path.read_bytes() if path is not None else b""


def credential_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the repository credential options to a command."""
    options = [
        click.option("--username", envvar="CHARTCMD_REPO_USERNAME", default="", help="repository user name"),
        click.option("--password", envvar="CHARTCMD_REPO_PASSWORD", default="", help="repository password"),
        click.option("--ca-file", default="", help="CA bundle to verify the repository with"),
        click.option(
            "--cert-file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="client certificate (copied to a private temporary file)",
        ),
        click.option(
            "--key-file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="client key (copied to a private temporary file)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _credentials(
    username: str, password: str, ca_file: str, cert_file: Path | None, key_file: Path | None
) -> Credentials:
    return Credentials(
        username=username,
        password=password,
        ca_path=ca_file,
        cert_data=_read_bytes(cert_file),
        key_data=_read_bytes(key_file),
    )


@click.group(invoke_without_command=True, help="Run helm safely across helm versions")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option(
    "--binary",
    envvar=BINARY_ENV_VAR,
    default=DEFAULT_BINARY,
    show_default=True,
    help="helm binary to run",
)
@click.option(
    "--helm-version",
    type=click.Choice(sorted(_HELM_VERSIONS)),
    default=None,
    help="pin the helm major version instead of detecting it",
)
@click.option(
    "--work-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    help="working directory for helm",
)
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    debug: bool,
    binary: str,
    helm_version: str | None,
    work_dir: Path,
) -> None:
    """Process global options and store the session settings.

    Args:
        ctx: Click context.
        version: Print version and exit.
        debug: Enable debug output.
        binary: The helm binary to run.
        helm_version: Pinned helm major version, if any.
        work_dir: Working directory for helm.

    """
    if debug:
        ic.enable()
    else:
        ic.disable()

    if version:
        click.echo(__version__)
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    profile = profile_for_generation(_HELM_VERSIONS[helm_version], binary_name=binary) if helm_version else None
    ctx.obj = SessionSettings(work_dir=work_dir, binary=binary, profile=profile)


@cli.command(help="Detect the installed helm version")
@click.pass_obj
def detect(settings: SessionSettings) -> None:
    with open_session(settings) as session:
        profile = session.profile
        console.summary_panel(
            "helm profile",
            {
                "Generation": profile.generation.value,
                "Binary": profile.binary_name,
                "Pull command": profile.pull_command,
                "Show command": profile.show_command,
                "Release name flag": profile.template_name_arg,
                "Client init": "yes" if profile.init_supported else "no",
                "--kube-version": "yes" if profile.kube_version_supported else "no",
            },
        )


@cli.command("repo-add", help="Add a chart repository")
@click.argument("name")
@click.argument("url")
@credential_options
@click.pass_obj
def repo_add(
    settings: SessionSettings,
    name: str,
    url: str,
    username: str,
    password: str,
    ca_file: str,
    cert_file: Path | None,
    key_file: Path | None,
) -> None:
    creds = _credentials(username, password, ca_file, cert_file, key_file)
    with open_session(settings) as session:
        _init_client(session)
        with console.spinner(f"Adding repository {name}..."):
            output = session.repo_add(name, url, creds)
    click.echo(output, nl=False)
    console.success(f"Added repository {console.highlight(name)}")


@cli.command(help="Download a chart archive")
@click.argument("repo")
@click.argument("chart")
@click.option("--version", "chart_version", default="", help="chart version (latest when omitted)")
@click.option(
    "--destination",
    "-d",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    help="existing directory to download into",
)
@credential_options
@click.pass_obj
def fetch(
    settings: SessionSettings,
    repo: str,
    chart: str,
    chart_version: str,
    destination: Path,
    username: str,
    password: str,
    ca_file: str,
    cert_file: Path | None,
    key_file: Path | None,
) -> None:
    if not chart_version:
        console.info(f"No version given, fetching the latest {console.highlight(chart)}")
    creds = _credentials(username, password, ca_file, cert_file, key_file)
    with open_session(settings) as session:
        _init_client(session)
        with console.spinner(f"Fetching {chart}..."):
            output = session.fetch(repo, chart, chart_version, destination.resolve(), creds)
    click.echo(output, nl=False)
    console.success(f"Fetched {console.highlight(chart)} into {destination}")


@cli.command("dependency-build", help="Build the dependencies of the chart in the working directory")
@click.pass_obj
def dependency_build(settings: SessionSettings) -> None:
    with open_session(settings) as session:
        _init_client(session)
        with console.spinner("Building chart dependencies..."):
            output = session.dependency_build()
    click.echo(output, nl=False)


@cli.command("show-values", help="Print the default values of a chart")
@click.argument("chart")
@click.pass_obj
def show_values(settings: SessionSettings, chart: str) -> None:
    with open_session(settings) as session:
        output = session.inspect_values(chart)
    click.echo(output, nl=False)


@cli.command(help="Render a chart into Kubernetes manifests")
@click.argument("chart")
@click.option("--release", "-r", required=True, help="release name")
@click.option("--namespace", "-n", default="", help="target namespace")
@click.option("--kube-version", default="", help="target Kubernetes version (helm 2 only)")
@click.option("--set", "set_values", multiple=True, callback=_parse_key_values, help="key=value")
@click.option("--set-string", "set_string_values", multiple=True, callback=_parse_key_values, help="key=value")
@click.option("--set-file", "set_file_values", multiple=True, callback=_parse_key_values, help="key=path")
@click.option("--values", "-f", "values_files", multiple=True, help="values file")
@click.option("--api-versions", multiple=True, help="extra API version for capability checks")
@click.pass_obj
def template(
    settings: SessionSettings,
    chart: str,
    release: str,
    namespace: str,
    kube_version: str,
    set_values: dict[str, str],
    set_string_values: dict[str, str],
    set_file_values: dict[str, str],
    values_files: tuple[str, ...],
    api_versions: tuple[str, ...],
) -> None:
    options = TemplateOptions(
        release_name=release,
        namespace=namespace,
        kube_version=kube_version,
        api_versions=list(api_versions),
        set_values=set_values,
        set_string_values=set_string_values,
        set_file_values=set_file_values,
        values_files=list(values_files),
    )
    ic(options)
    with open_session(settings) as session:
        manifests = session.template(chart, options)
    click.echo(manifests, nl=False)


if __name__ == "__main__":
    cli()
