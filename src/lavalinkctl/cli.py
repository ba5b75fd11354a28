import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from .core import SidecarManager
from .errors import RuntimeNotFoundError, SidecarError
from .models import Invocation
from .services.process_launcher import ProcessLauncher

# Exit status a shell reports for a command that cannot be found.
COMMAND_NOT_FOUND_EXIT_CODE = 127

logging.basicConfig(
    level="WARNING",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_level=False,
            show_path=False,
        )
    ],
)


def _configure_logging(logger: logging.Logger, verbose: bool, log_file):
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)


@click.command(context_settings={"allow_interspersed_args": False})
@click.option(
    "--project-root",
    required=False,
    type=click.Path(file_okay=False),
    help="Directory holding .env, .env.local and lavalink/application.yml (default: cwd).",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the container runtime command instead of executing it.",
)
@click.argument("verb", type=click.Choice(SidecarManager.VERBS))
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(project_root, verbose, log_file, dry_run, verb, args):
    """Start, stop or tail the Lavalink sidecar container.

    Everything after VERB is passed to the container runtime unchanged.
    """
    logger = logging.getLogger("lavalinkctl")
    _configure_logging(logger, verbose, log_file)

    invocation = Invocation(verb=verb, args=tuple(args))

    try:
        manager = SidecarManager.from_environment(
            project_root=project_root,
            launcher=ProcessLauncher(logger=logger),
        )
        if dry_run:
            click.echo(manager.build_command(invocation).shell_preview())
            return
        exit_code = manager.run(invocation)
    except RuntimeNotFoundError as exc:
        error = click.ClickException(str(exc))
        error.exit_code = COMMAND_NOT_FOUND_EXIT_CODE
        raise error from exc
    except SidecarError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
