"""GitLab updater CLI - command-line interface for update checks and installs.

Usage:
    gitlab-updater check --plugin my-plugin/my-plugin.php=1.0.0 --theme my-theme=2.1
    gitlab-updater install plugin my-plugin/my-plugin.php --dest wp-content/plugins
    gitlab-updater add-plugin --slug my-plugin --base-name my-plugin/my-plugin.php ...
    gitlab-updater add-theme --slug my-theme ...
    gitlab-updater list
    gitlab-updater remove theme my-theme
    gitlab-updater forget
"""

import sys
from pathlib import Path

import click
from pydantic import ValidationError as PydanticValidationError

from gitlab_updater import __version__
from gitlab_updater.capabilities import FileSystemCapability, NetworkFetchCapability
from gitlab_updater.config import Config, get_config
from gitlab_updater.core.config import OptionsStore
from gitlab_updater.core.errors import ConfigError, UpdaterError, ValidationError, format_exception_chain
from gitlab_updater.core.logging import setup_logging
from gitlab_updater.gitlab.client import GitLabClient
from gitlab_updater.hooks.dispatcher import HookDispatcher
from gitlab_updater.host.local import LocalHost
from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration
from gitlab_updater.updater.flows import create_updaters

KIND_CHOICE = click.Choice([k.value for k in ExtensionKind])


def _fail(error: UpdaterError):
    if error.cause is not None:
        click.echo(format_exception_chain(error), err=True)
    else:
        click.echo(error.format_user_friendly(), err=True)
    sys.exit(1)


def _parse_installed(pairs: tuple[str, ...], option: str) -> dict[str, str]:
    installed = {}
    for pair in pairs:
        key, sep, version = pair.rpartition("=")
        if not sep or not key or not version:
            raise ValidationError(
                f"Expected KEY=VERSION for {option}",
                field=option,
                value=pair
            )
        installed[key] = version
    return installed


def _build_host(config: Config, store: OptionsStore) -> LocalHost:
    network = NetworkFetchCapability(
        timeout=config.http.timeout_seconds,
        verify=config.http.verify_ssl,
        user_agent=config.http.user_agent,
    )
    fs = FileSystemCapability()
    client = GitLabClient(network)

    registrations = store.registrations(ExtensionKind.PLUGIN) + store.registrations(ExtensionKind.THEME)
    dispatcher = HookDispatcher()
    for updater in create_updaters(registrations, client, fs):
        updater.attach(dispatcher)

    return LocalHost(dispatcher, fs, network, config.paths.state_dir)


@click.group()
@click.version_option(version=__version__, prog_name="gitlab-updater")
@click.pass_context
def cli(ctx: click.Context):
    """GitLab updater - plugin and theme updates from private GitLab repos.

    Checks the tags of each registered repo, offers newer releases as
    updates and installs them under the directory name of their slug.
    """
    try:
        config = get_config()
    except ConfigError as e:
        _fail(e)

    issues = config.validate()
    if issues:
        _fail(ConfigError("Invalid configuration", details="; ".join(issues)))

    setup_logging(
        level=config.log.level,
        format_type=config.log.format,
        log_dir=config.paths.logs_dir,
        file_enabled=config.log.file_enabled,
        console_enabled=config.log.console_enabled,
    )
    ctx.obj = {"config": config, "store": OptionsStore(config.paths.options_file)}


@cli.command()
@click.option("--plugin", "plugins", multiple=True, metavar="BASENAME=VERSION", help="Installed plugin and version")
@click.option("--theme", "themes", multiple=True, metavar="SLUG=VERSION", help="Installed theme and version")
@click.pass_context
def check(ctx: click.Context, plugins: tuple[str, ...], themes: tuple[str, ...]):
    """Check registered repos for newer tags."""
    config, store = ctx.obj["config"], ctx.obj["store"]

    try:
        installed = {
            ExtensionKind.PLUGIN: _parse_installed(plugins, "--plugin"),
            ExtensionKind.THEME: _parse_installed(themes, "--theme"),
        }
        host = _build_host(config, store)

        found = 0
        for kind, versions in installed.items():
            if not versions:
                continue
            transient = host.check_updates(kind, versions)
            for descriptor in transient.response.values():
                found += 1
                key = descriptor.identifier
                click.echo(f"{kind.value} {key}: {versions.get(key, '?')} -> {descriptor.new_version}")
                click.echo(f"  Package: {GitLabClient.mask(descriptor.package)}")
    except UpdaterError as e:
        _fail(e)

    if not found:
        click.echo("Everything is up to date.")


@cli.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("key")
@click.option("--dest", "-d", required=True, type=click.Path(file_okay=False, path_type=Path), help="Directory holding installed extensions")
@click.pass_context
def install(ctx: click.Context, kind: str, key: str, dest: Path):
    """Install the pending update for a plugin base name or theme slug."""
    config, store = ctx.obj["config"], ctx.obj["store"]

    try:
        host = _build_host(config, store)
        destination = host.install(kind, key, dest)
    except UpdaterError as e:
        _fail(e)

    click.echo(f"Installed {kind} {key} to {destination}")


def _add(store: OptionsStore, **fields):
    try:
        registration = ExtensionRegistration(**fields)
    except PydanticValidationError as e:
        _fail(ValidationError("Invalid registration", details=str(e)))
    store.add(registration)
    click.echo(f"Registered {registration.masked()}")


@cli.command("add-plugin")
@click.option("--slug", required=True, help="Plugin slug (install directory name)")
@click.option("--base-name", required=True, help="Relative path of the main file, e.g. my-plugin/my-plugin.php")
@click.option("--token", required=True, help="Personal access token with 'api' scope")
@click.option("--gitlab-url", required=True, help="GitLab URL, e.g. https://gitlab.com")
@click.option("--repo", help="Project path, e.g. group/repo (omit if --gitlab-url is the project API URL)")
@click.pass_context
def add_plugin(ctx: click.Context, slug: str, base_name: str, token: str, gitlab_url: str, repo: str):
    """Register a plugin for GitLab updates."""
    try:
        _add(
            ctx.obj["store"],
            kind=ExtensionKind.PLUGIN,
            slug=slug,
            base_name=base_name,
            access_token=token,
            gitlab_url=gitlab_url,
            repo=repo,
        )
    except UpdaterError as e:
        _fail(e)


@cli.command("add-theme")
@click.option("--slug", required=True, help="Theme slug (install directory name)")
@click.option("--token", required=True, help="Personal access token with 'api' scope")
@click.option("--gitlab-url", required=True, help="GitLab URL, e.g. https://gitlab.com")
@click.option("--repo", help="Project path, e.g. group/repo (omit if --gitlab-url is the project API URL)")
@click.pass_context
def add_theme(ctx: click.Context, slug: str, token: str, gitlab_url: str, repo: str):
    """Register a theme for GitLab updates."""
    try:
        _add(
            ctx.obj["store"],
            kind=ExtensionKind.THEME,
            slug=slug,
            access_token=token,
            gitlab_url=gitlab_url,
            repo=repo,
        )
    except UpdaterError as e:
        _fail(e)


@cli.command("list")
@click.pass_context
def list_registrations(ctx: click.Context):
    """Show registered plugins and themes."""
    store = ctx.obj["store"]

    try:
        registrations = store.registrations(ExtensionKind.PLUGIN) + store.registrations(ExtensionKind.THEME)
    except UpdaterError as e:
        _fail(e)

    if not registrations:
        click.echo("No registrations.")
        return

    for registration in registrations:
        click.echo(registration.masked())


@cli.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("key")
@click.pass_context
def remove(ctx: click.Context, kind: str, key: str):
    """Remove a registration by plugin base name or theme slug."""
    try:
        removed = ctx.obj["store"].remove(kind, key)
    except UpdaterError as e:
        _fail(e)

    if removed:
        click.echo(f"Removed {kind} {key}")
    else:
        click.echo(f"No {kind} registered as {key}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def forget(ctx: click.Context, yes: bool):
    """Delete all registrations and stored update state."""
    config, store = ctx.obj["config"], ctx.obj["store"]

    if not yes and not click.confirm("Delete all registrations and update state?"):
        return

    try:
        store.clear()
        fs = FileSystemCapability()
        if fs.exists(config.paths.state_dir):
            fs.delete(config.paths.state_dir, recursive=True)
    except UpdaterError as e:
        _fail(e)
    click.echo("Registrations and update state deleted.")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
