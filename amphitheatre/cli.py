"""
CLI interface for amphitheatre actor manifests.

Provides commands to validate manifests and inspect what a controller would
derive from them: source locators, build mode, environment and ports, and
the lifecycle phase recorded in the status.
"""


import json
import logging

import click
from pathlib import Path

from amphitheatre import __version__
from amphitheatre.errors import AmphitheatreError


@click.group()
@click.version_option(version=__version__, prog_name="amp")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, verbose: bool):
    """
    amp - Inspect Amphitheatre actor manifests.
    """
    from amphitheatre.config import AmpConfig, load_config

    ctx.ensure_object(dict)
    try:
        config = load_config()
    except FileNotFoundError:
        config = AmpConfig()
    except AmphitheatreError as e:
        click.echo(f"✗ Invalid config: {e}", err=True)
        raise SystemExit(1)

    ctx.obj["config"] = config
    level = "DEBUG" if verbose else config.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load(ctx, manifest: str):
    """Load a manifest or exit with the error."""
    from amphitheatre.manifest import load_manifest

    config = ctx.obj["config"]
    try:
        return load_manifest(Path(manifest), namespace=config.namespace)
    except AmphitheatreError as e:
        click.echo(f"✗ {manifest}: {e}", err=True)
        raise SystemExit(1)


@main.command("validate")
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.pass_context
def validate(ctx, manifest: str):
    """
    Validate an actor manifest.

    Prints the spec content hash when the manifest is valid.
    """
    from amphitheatre.manifest import content_hash

    actor = _load(ctx, manifest)
    click.echo(f"✓ {actor.name} is valid")
    click.echo(f"  sha256: {content_hash(actor.spec)}")


@main.command("show")
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx, manifest: str, as_json: bool):
    """
    Show what a controller derives from an actor manifest.

    Examples:

        amp show actor.yaml

        amp show actor.json --json
    """
    config = ctx.obj["config"]
    actor = _load(ctx, manifest)
    spec = actor.spec

    env_vars = spec.env_vars()
    container_ports = spec.container_ports()
    service_ports = spec.service_ports()
    derived = {
        "name": actor.name,
        "namespace": actor.namespace,
        "url": spec.url(),
        "path": spec.path if spec.path is not None else config.default_path,
        "commit": spec.commit,
        "build_name": actor.build_name(),
        "docker_tag": actor.docker_tag(),
        "build_mode": "dockerfile" if spec.has_dockerfile() else "buildpacks",
        "env": [e.to_dict() for e in env_vars] if env_vars is not None else None,
        "container_ports": (
            [p.to_dict() for p in container_ports] if container_ports is not None else None
        ),
        "service_ports": (
            [p.to_dict() for p in service_ports] if service_ports is not None else None
        ),
        "partners": [
            {"name": p.name, "url": p.url()} for p in spec.partners or ()
        ],
    }

    if as_json:
        click.echo(json.dumps(derived, indent=2))
        return

    click.echo(f"Actor: {actor.name}")
    click.echo(f"  namespace:   {actor.namespace}")
    click.echo(f"  url:         {derived['url']}")
    click.echo(f"  path:        {derived['path']}")
    click.echo(f"  commit:      {spec.commit}")
    click.echo(f"  build:       {derived['build_mode']} ({derived['build_name']})")
    click.echo(f"  image:       {derived['docker_tag']}")

    click.echo("\nEnvironment:")
    for var in env_vars or []:
        click.echo(f"  {var.name}={var.value}")

    click.echo("\nContainer ports:")
    for port in container_ports or []:
        click.echo(f"  {port.container_port}/{port.protocol or 'TCP'}")

    click.echo("\nService ports:")
    for port in service_ports or []:
        click.echo(f"  {port.port}/{port.protocol or 'TCP'}")

    if derived["partners"]:
        click.echo("\nPartners:")
        for partner in derived["partners"]:
            click.echo(f"  {partner['name']}: {partner['url']}")


@main.command("status")
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.pass_context
def status(ctx, manifest: str):
    """Show the lifecycle conditions recorded for an actor."""
    actor = _load(ctx, manifest)
    phase = actor.status.phase()

    click.echo(f"Actor: {actor.name}")
    click.echo(f"  phase: {phase.value if phase else 'Unknown'}")
    if not actor.status.conditions:
        click.echo("  (no conditions)")
        return

    click.echo("\nConditions:")
    for condition in actor.status.conditions:
        line = f"  {condition.type.value:<10} {condition.status:<6} {condition.reason}"
        if condition.message:
            line += f" - {condition.message}"
        click.echo(line)


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize amphitheatre configuration."""
    from amphitheatre.config import AmpConfig, get_amp_home
    import yaml

    home = get_amp_home()
    if not home.exists():
        home.mkdir(parents=True)

    cfg_path = home / "config.yaml"
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    cfg_path.write_text(yaml.safe_dump(AmpConfig().to_dict(), sort_keys=False))
    click.echo(f"Initialized amphitheatre config at {cfg_path}")


if __name__ == "__main__":
    main()
