"""Command-line interface for git-pair."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ._version import __version__
from .config import Settings, SettingsLoader, load_alias_directory
from .core.branch import BranchNameDeriver, BranchOperations, GitBranchOperations
from .core.identity import GitConfigIdentityStore, IdentityStore
from .core.pairing import PairingSynchronizer
from .errors import PairError


LOG_FORMAT = "[%(levelname)s] %(name)s:%(lineno)d - %(message)s"


@click.command(name="git-pair")
@click.version_option(version=__version__, prog_name="git-pair")
@click.help_option("-h", "--help")
@click.option(
    "--branch",
    "-b",
    metavar="BRANCH",
    default=None,
    help="Switch to a git branch prefixed with the paired usernames.",
)
@click.option(
    "--log",
    type=click.Choice(["none", "INFO", "DEBUG"], case_sensitive=False),
    default="none",
    help="Enable logging with specified level (default: none)",
)
@click.argument("usernames", nargs=-1, metavar="[USER1 [USER2 [...]]]")
def cli(branch: Optional[str], log: str, usernames: tuple[str, ...]) -> None:
    """Configure your git author and committer info for pairing.

    \b
    Changes the author in ~/.gitconfig_local, meant to be included from your
    ~/.gitconfig, so that commits name everyone who worked on them.

    \b
    EXAMPLES:
      # configure paired git author info
      $ git-pair jsmith alice
      Alice Barns and Jon Smith <git+alice+jsmith@example.com>

    \b
      # show the author info set the last time
      $ git-pair
      Alice Barns and Jon Smith <git+alice+jsmith@example.com>

    \b
      # create a branch to work on a feature
      $ git-pair -b ONCALL-843
      Switched to a new branch 'alice+jsmith/ONCALL-843'

    \b
    CONFIGURATION:
      PAIR_FILE            YAML map of usernames to full names (default: ~/.pairs)
      PAIR_GIT_CONFIG      Git config file for the author (default: ~/.gitconfig_local)
      PAIR_EMAIL           Email address to base derived addresses on
      PAIR_CONFIG          Team config (default: nearest .pair.yml)
      PAIR_PRIMARY_BRANCH  Branch new pairing branches start from
    """
    logger = configure_logging(log)

    if branch is not None and not branch.strip():
        logger.debug("Empty branch name given, ignoring --branch")
        branch = None

    try:
        settings = SettingsLoader.load()
        store = GitConfigIdentityStore(settings.git_config_file)
        logger.debug(f"Using git config {settings.git_config_file}")

        if branch is not None:
            if usernames:
                click.echo(
                    f"warning: ignoring usernames ({' '.join(usernames)}) when switching branch",
                    err=True,
                )
            switch_to_pair_branch(settings, store, GitBranchOperations.discover(Path.cwd()), branch)
        elif usernames:
            set_and_print_pair(settings, store, list(usernames))
        else:
            print_current_pair(store)
    except PairError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)


def print_current_pair(store: IdentityStore) -> None:
    """Echo the configured identity as ``Name <email>``."""
    click.echo(str(PairingSynchronizer(store).current()))


def set_and_print_pair(settings: Settings, store: IdentityStore, usernames: list[str]) -> None:
    """Configure the identity for ``usernames`` and echo what is now set."""
    directory = load_alias_directory(settings.pairs_file, settings.team)
    identity = PairingSynchronizer(store).sync(directory, settings.email_template(), usernames)
    click.echo(str(identity))


def switch_to_pair_branch(
    settings: Settings, store: IdentityStore, operations: BranchOperations, topic: str
) -> None:
    """Switch to ``<pair prefix>/<topic>``, creating it from the primary branch if needed."""
    deriver = BranchNameDeriver(store, operations, primary_branch=settings.primary_branch)
    switch = deriver.derive_and_switch(settings.email_template(), topic)
    click.echo(switch.describe())


def configure_logging(level: str) -> logging.Logger:
    """Send git_pair log records to stderr at ``level``.

    With "none" the package stays quiet so stdout carries only the identity
    or branch line. Each call replaces the handler of the previous one.
    """
    package_logger = logging.getLogger("git_pair")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    if level.upper() == "NONE":
        package_logger.setLevel(logging.CRITICAL)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        package_logger.setLevel(level.upper())

    logger = logging.getLogger(__name__)
    logger.info(f"Logging enabled at {level.upper()} level")
    return logger


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
