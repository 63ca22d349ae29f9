"""Environment-driven settings.

Every setting has an environment variable override:

- ``PAIR_EMAIL``: template email address the composite addresses derive from
- ``PAIR_FILE``: alias directory (default ``~/.pairs``)
- ``PAIR_GIT_CONFIG``: git config file holding the author (default ``~/.gitconfig_local``)
- ``PAIR_CONFIG``: per-repository team config (default ``.pair.yml`` in the
  working directory or one of its parents)
- ``PAIR_PRIMARY_BRANCH``: branch new pairing branches start from

A ``.env`` file next to the team config supplies values for variables that
are not set in the environment.
"""

import ipaddress
import logging
import os
import socket
import string
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

from ..errors import EmailTemplateError, TeamConfigError
from .team import DEFAULT_TEAM_CONFIG_NAME, TeamConfig

logger = logging.getLogger(__name__)

ENV_EMAIL = "PAIR_EMAIL"
ENV_PAIRS_FILE = "PAIR_FILE"
ENV_GIT_CONFIG = "PAIR_GIT_CONFIG"
ENV_TEAM_CONFIG = "PAIR_CONFIG"
ENV_PRIMARY_BRANCH = "PAIR_PRIMARY_BRANCH"

DEFAULT_PAIRS_FILE = "~/.pairs"
DEFAULT_GIT_CONFIG = "~/.gitconfig_local"


@dataclass
class Settings:
    """Resolved settings for one invocation."""

    git_config_file: Path
    pairs_file: Path
    team: Optional[TeamConfig] = None
    explicit_email_template: Optional[str] = None
    primary_branch: Optional[str] = None

    def email_template(self) -> str:
        """Return the template email address.

        ``PAIR_EMAIL`` wins, then the team config author's email, then an
        address derived from the host's reverse-DNS name.

        Raises:
            EmailTemplateError: If none of these yields an address.
        """
        if self.explicit_email_template:
            return self.explicit_email_template
        if self.team and self.team.author and self.team.author.email:
            return self.team.author.email
        try:
            return default_email_template()
        except EmailTemplateError as e:
            logger.debug(f"No default email template: {e}")
            raise EmailTemplateError(
                f"please set ${ENV_EMAIL} to configure the pair email template"
            ) from e


class SettingsLoader:
    """Build :class:`Settings` from the environment and the team config."""

    @classmethod
    def load(
        cls, environ: Optional[Mapping[str, str]] = None, cwd: Optional[Path] = None
    ) -> Settings:
        """Resolve settings.

        Args:
            environ: Environment to read, ``os.environ`` by default.
            cwd: Directory to search for the team config, the current
                 directory by default.

        Raises:
            TeamConfigError: If a team config exists but cannot be loaded.
        """
        env = dict(os.environ if environ is None else environ)
        cwd = cwd or Path.cwd()

        team = cls._load_team_config(env, cwd)
        if team is not None:
            env = cls._with_dotenv(env, team.path.parent / ".env")

        return Settings(
            git_config_file=cls._path(env, ENV_GIT_CONFIG, DEFAULT_GIT_CONFIG),
            pairs_file=cls._path(env, ENV_PAIRS_FILE, DEFAULT_PAIRS_FILE),
            team=team,
            explicit_email_template=env.get(ENV_EMAIL) or None,
            primary_branch=env.get(ENV_PRIMARY_BRANCH)
            or (team.primary_branch if team else None)
            or None,
        )

    @staticmethod
    def _path(env: Mapping[str, str], name: str, default: str) -> Path:
        # Variables defined only in .env expand too
        value = string.Template(env.get(name) or default).safe_substitute(env)
        return Path(value).expanduser()

    @staticmethod
    def _with_dotenv(env: dict[str, str], env_file: Path) -> dict[str, str]:
        if not env_file.exists():
            return env
        values = {key: value for key, value in dotenv_values(env_file).items() if value is not None}
        logger.info(f"Loaded environment variables from {env_file}")
        # Variables already in the environment take precedence
        return {**values, **env}

    @classmethod
    def _load_team_config(cls, env: Mapping[str, str], cwd: Path) -> Optional[TeamConfig]:
        explicit = env.get(ENV_TEAM_CONFIG)
        if explicit:
            path = Path(explicit).expanduser()
            if not path.is_absolute():
                path = cwd / path
            if not path.exists():
                raise TeamConfigError(f"team config not found: {path}")
        else:
            path = find_team_config(cwd)
            if path is None:
                logger.debug(f"No {DEFAULT_TEAM_CONFIG_NAME} found from {cwd}")
                return None

        team = TeamConfig.load(path)
        try:
            team.validate()
        except TeamConfigError as e:
            logger.warning(f"Team config {path} is incomplete: {e}")
        return team


def find_team_config(start: Path) -> Optional[Path]:
    """Find the nearest team config in ``start`` or one of its parents."""
    for directory in [start, *start.parents]:
        candidate = directory / DEFAULT_TEAM_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def default_email_template() -> str:
    """Derive ``git@<domain>`` from the host's reverse-DNS name.

    ``host17.corp.example.com`` gives ``git@example.com``.

    Raises:
        EmailTemplateError: If no fully-qualified name is found.
    """
    dns_names = lookup_reverse_dns_names()
    for dns_name in dns_names:
        labels = dns_name.rstrip(".").split(".")
        if len(labels) >= 2 and all(labels[-2:]):
            return "git@" + ".".join(labels[-2:])

    raise EmailTemplateError(
        "expected a hostname to be a fully-qualified domain name: " + ",".join(dns_names)
    )


def lookup_reverse_dns_names() -> list[str]:
    """Return the reverse-DNS names of the first non-loopback address of this host."""
    hostname = socket.gethostname()
    try:
        addresses = sorted({info[4][0] for info in socket.getaddrinfo(hostname, None)})
    except OSError as e:
        logger.debug(f"Could not resolve {hostname}: {e}")
        return []

    for address in addresses:
        try:
            if ipaddress.ip_address(address.split("%")[0]).is_loopback:
                continue
            name, aliases, _ = socket.gethostbyaddr(address)
        except (OSError, ValueError) as e:
            logger.debug(f"Reverse lookup of {address} failed: {e}")
            continue
        return [name, *aliases]

    return []
