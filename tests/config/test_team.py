"""Tests for the per-repository team configuration."""

import pytest

from git_pair.config.team import Author, TeamConfig
from git_pair.errors import TeamConfigError

FULL_CONFIG = """vcs: git
author:
  name: Michael Bluth
  alias: mb
  email: mb@example.com
teammates:
  - name: Lindsey Bluth
    alias: lb
  - name: George Bluth
    alias: gb
"""


def write_config(tmp_path, content):
    path = tmp_path / ".pair.yml"
    path.write_text(content)
    return path


class TestTeamConfigLoad:
    """Tests for TeamConfig.load."""

    def test_new_config_is_empty(self, tmp_path):
        config = TeamConfig(path=tmp_path / "cfg.yml")

        assert config.path == tmp_path / "cfg.yml"
        assert config.vcs == ""
        assert config.author is None
        assert config.teammates == []

    @pytest.mark.parametrize("content", ["", "abcd: 1234\n"])
    def test_empty_or_unknown_fields(self, tmp_path, content):
        config = TeamConfig.load(write_config(tmp_path, content))

        assert config.vcs == ""
        assert config.author is None
        assert config.teammates == []

    def test_sparse_author(self, tmp_path):
        config = TeamConfig.load(write_config(tmp_path, "author:\n  alias: mb\n"))
        assert config.author == Author(alias="mb")

    def test_full_config(self, tmp_path):
        config = TeamConfig.load(write_config(tmp_path, FULL_CONFIG))

        assert config.vcs == "git"
        assert config.author == Author("Michael Bluth", "mb", "mb@example.com")
        assert [mate.alias for mate in config.teammates] == ["lb", "gb"]

    def test_yaml_keywords_stay_strings(self, tmp_path):
        content = (
            "author:\n  name: Nora Olsen\n  alias: no\n"
            "teammates:\n  - name: Bond\n    alias: 007\n"
        )
        config = TeamConfig.load(write_config(tmp_path, content))

        assert config.author.alias == "no"
        assert config.aliases() == {"no": "Nora Olsen", "007": "Bond"}

    def test_primary_branch(self, tmp_path):
        config = TeamConfig.load(write_config(tmp_path, "vcs: git\nprimary_branch: main\n"))
        assert config.primary_branch == "main"

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(TeamConfigError, match="mapping"):
            TeamConfig.load(write_config(tmp_path, "- git\n"))

    def test_teammates_not_a_list(self, tmp_path):
        with pytest.raises(TeamConfigError, match="teammates"):
            TeamConfig.load(write_config(tmp_path, "teammates: lb\n"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(TeamConfigError, match="invalid YAML"):
            TeamConfig.load(write_config(tmp_path, "author: [mb\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(TeamConfigError):
            TeamConfig.load(tmp_path / "missing.yml")


class TestTeamConfigPersistence:
    """Tests for saving and reloading."""

    def test_save_and_load(self, tmp_path):
        original = TeamConfig.load(write_config(tmp_path, FULL_CONFIG))
        original.path = tmp_path / "copy.yml"
        original.save()

        assert TeamConfig.load(tmp_path / "copy.yml") == original

    def test_reload(self, tmp_path):
        path = write_config(tmp_path, "vcs: git\n")
        config = TeamConfig.load(path)

        path.write_text(FULL_CONFIG)
        config.reload()

        assert config.author.alias == "mb"
        assert len(config.teammates) == 2

    def test_equality_ignores_teammate_order(self, tmp_path):
        lb = Author(name="Lindsey Bluth", alias="lb")
        gb = Author(name="George Bluth", alias="gb")

        first = TeamConfig(path=tmp_path / "a.yml", vcs="git", teammates=[lb, gb])
        second = TeamConfig(path=tmp_path / "a.yml", vcs="git", teammates=[gb, lb])

        assert first == second
        assert first != TeamConfig(path=tmp_path / "b.yml", vcs="git", teammates=[lb, gb])


class TestTeamConfigValidate:
    """Tests for TeamConfig.validate."""

    def test_valid(self, tmp_path):
        TeamConfig.load(write_config(tmp_path, FULL_CONFIG)).validate()

    def test_empty_vcs(self, tmp_path):
        with pytest.raises(TeamConfigError, match="vcs can't be empty"):
            TeamConfig(path=tmp_path / "cfg.yml").validate()

    def test_unsupported_vcs(self, tmp_path):
        with pytest.raises(TeamConfigError, match="unsupported vcs"):
            TeamConfig(path=tmp_path / "cfg.yml", vcs="hg", author=Author(email="a@b")).validate()

    def test_missing_author(self, tmp_path):
        with pytest.raises(TeamConfigError, match="author can't be empty"):
            TeamConfig(path=tmp_path / "cfg.yml", vcs="git").validate()

    def test_missing_author_email(self, tmp_path):
        config = TeamConfig(path=tmp_path / "cfg.yml", vcs="git", author=Author(alias="mb"))
        with pytest.raises(TeamConfigError, match="author.email is required"):
            config.validate()

    def test_aliases(self, tmp_path):
        config = TeamConfig.load(write_config(tmp_path, FULL_CONFIG))
        assert config.aliases() == {
            "mb": "Michael Bluth",
            "lb": "Lindsey Bluth",
            "gb": "George Bluth",
        }
