"""Main CLI entry point for the provisioner."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape

from provisioner import __version__

if TYPE_CHECKING:
    from provisioner.adapters.aws_adapter import AWSAdapter
    from provisioner.core.config import ProvisionConfig

console = Console()


class ProvisionContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(self, config_path: str | None):
        """Initialize context with config path.

        Args:
            config_path: Path to configuration file (built-in defaults if None)
        """
        self.config_path = config_path
        self._config: ProvisionConfig | None = None
        self._aws_adapter: AWSAdapter | None = None

    @property
    def config(self) -> ProvisionConfig:
        """Get or create config lazily."""
        if self._config is None:
            from provisioner.core.config import ProvisionConfig

            if self.config_path:
                self._config = ProvisionConfig.from_file(self.config_path)
            else:
                self._config = ProvisionConfig()
        return self._config

    @property
    def aws_adapter(self) -> AWSAdapter:
        """Get or create AWS adapter lazily, using the bootstrap credentials."""
        if self._aws_adapter is None:
            from provisioner.adapters.aws_adapter import AWSAdapter

            self._aws_adapter = AWSAdapter(
                region=self.config.aws.region,
                profile=self.config.aws.profile,
            )
        return self._aws_adapter


def _load_config(provision_ctx: ProvisionContext) -> ProvisionConfig:
    from provisioner.core.exceptions import ConfigurationError
    from provisioner.utils.logging import setup_logging

    try:
        config = provision_ctx.config
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    setup_logging(
        level=config.logging.level,
        format=config.logging.format,
        output=config.logging.output,
    )
    return config


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file (defaults built in)",
)
@click.pass_context
def cli(ctx: click.Context, config: str | None) -> None:
    """Bootstrap the skodaice AWS account."""
    ctx.obj = ProvisionContext(config_path=config)


@cli.command()
@click.option(
    "--wait-strategy",
    type=click.Choice(["fixed", "poll"]),
    default=None,
    help="How to wait for the new access key to propagate",
)
@click.option(
    "--revoke-on-exit/--keep-key",
    default=None,
    help="Deactivate the new access key when the run ends",
)
@click.pass_context
def run(ctx: click.Context, wait_strategy: str | None, revoke_on_exit: bool | None) -> None:
    """Rotate keys, then ensure the repository and the cluster exist."""
    from botocore.exceptions import BotoCoreError

    from provisioner.core.exceptions import ProvisionError
    from provisioner.provisioning.sequencer import ProvisioningSequencer
    from provisioner.utils.logging import get_logger, log_error

    provision_ctx = ctx.obj
    config = _load_config(provision_ctx)
    logger = get_logger(__name__)

    if wait_strategy is not None:
        config.propagation.strategy = wait_strategy  # type: ignore[assignment]
    if revoke_on_exit is not None:
        config.credentials.revoke_on_exit = revoke_on_exit

    console.print("[bold blue]Provisioning run[/bold blue]")
    console.print(f"Region: {config.aws.region}")
    console.print(f"Principal: {config.credentials.principal}")
    console.print(f"Repository: {config.repository.name}")
    console.print(f"Cluster: {config.cluster.name}\n")

    try:
        adapter = provision_ctx.aws_adapter
        sequencer = ProvisioningSequencer(
            config=config,
            identity=adapter,
            connect=adapter.targets_for,
            status=lambda message: console.print(message, markup=False, highlight=False),
        )
        report = sequencer.run()
    except (ProvisionError, BotoCoreError) as e:
        console.print(f"[red]✗ Provisioning failed: {escape(str(e))}[/red]")
        log_error(logger, e, operation="provision_run", step=getattr(e, "step", None))
        sys.exit(1)

    if not config.credentials.revoke_on_exit:
        console.print(
            f"[yellow]Access key {report.rotation.issued.access_key_id} is still active[/yellow]"
        )
    console.print(
        f"[bold green]✓ Provisioning complete in {report.duration_seconds:.1f}s[/bold green]"
    )


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate configuration and bootstrap credentials."""
    from provisioner.core.exceptions import AWSError

    console.print("[bold magenta]Validate[/bold magenta]\n")

    provision_ctx = ctx.obj
    console.print("[bold]1. Configuration[/bold]")
    console.print(f"  Path: {provision_ctx.config_path or '(built-in defaults)'}")
    config = _load_config(provision_ctx)
    console.print("  [green]✓ Config valid[/green]")
    console.print(f"  Region: {config.aws.region}")
    console.print(f"  Principal: {config.credentials.principal}")
    console.print(f"  Wait strategy: {config.propagation.strategy}\n")

    console.print("[bold]2. AWS Credentials[/bold]")
    try:
        identity = provision_ctx.aws_adapter.client.get_caller_identity()
    except AWSError as e:
        console.print(f"  [red]✗ AWS credentials rejected: {escape(str(e))}[/red]")
        sys.exit(1)
    console.print(f"  [green]✓ Authenticated as {identity.get('Arn')}[/green]\n")

    console.print("[bold green]✓ Validation complete![/bold green]")


if __name__ == "__main__":
    cli()
