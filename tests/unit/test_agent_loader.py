"""Agent profile loader unit tests."""

from pathlib import Path

import pytest
import yaml

from swarm.agents import (
    DEFAULT_PROFILES,
    AgentConfigError,
    AgentLoader,
    AgentLoadError,
    default_profiles,
    load_profiles,
)
from swarm.models import VoiceStyle

ROSTER_PATH = Path(__file__).parents[2] / "configs" / "agents.yaml"


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data))
    return path


class TestAgentLoader:
    """Test AgentLoader class."""

    @pytest.fixture
    def loader(self):
        return AgentLoader()

    def test_load_single_profile(self, loader, tmp_path):
        """Test a file holding one profile mapping."""
        path = write_yaml(tmp_path / "coder.yaml", {"role": "coder", "skills": ["coding"]})

        [profile] = loader.load_from_yaml(path)

        assert profile.role == "coder"
        assert loader.get_loaded_profile("coder") is profile

    def test_load_agents_list(self, loader, tmp_path):
        path = write_yaml(
            tmp_path / "team.yaml",
            {"agents": [{"role": "coder", "skills": ["coding"]}, {"role": "architect", "skills": ["system design"]}]},
        )

        profiles = loader.load_from_yaml(path)

        assert [p.role for p in profiles] == ["coder", "architect"]

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(AgentLoadError, match="not found"):
            loader.load_from_yaml(tmp_path / "nope.yaml")

    def test_empty_file(self, loader, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        with pytest.raises(AgentConfigError, match="Empty"):
            loader.load_from_yaml(path)

    def test_invalid_yaml(self, loader, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("agents: [unclosed")

        with pytest.raises(AgentLoadError, match="Invalid YAML"):
            loader.load_from_yaml(path)

    def test_agents_not_a_list(self, loader, tmp_path):
        path = write_yaml(tmp_path / "bad.yaml", {"agents": "coder"})

        with pytest.raises(AgentConfigError):
            loader.load_from_yaml(path)

    def test_invalid_profile(self, loader, tmp_path):
        """Test validation errors are wrapped."""
        path = write_yaml(tmp_path / "bad.yaml", {"role": "coder", "skills": []})

        with pytest.raises(AgentConfigError, match="Invalid agent configuration"):
            loader.load_from_yaml(path)

    def test_duplicate_role(self, loader, tmp_path):
        path = write_yaml(
            tmp_path / "dupe.yaml",
            {"agents": [{"role": "coder", "skills": ["coding"]}, {"role": "coder", "skills": ["debugging"]}]},
        )

        with pytest.raises(AgentConfigError, match="Duplicate agent role: coder"):
            loader.load_from_yaml(path)

    def test_load_directory_in_name_order(self, loader, tmp_path):
        write_yaml(tmp_path / "b.yml", {"role": "coder", "skills": ["coding"]})
        write_yaml(tmp_path / "a.yaml", {"role": "architect", "skills": ["system design"]})
        (tmp_path / "notes.txt").write_text("ignored")

        profiles = loader.load_all_from_directory(tmp_path)

        assert [p.role for p in profiles] == ["architect", "coder"]

    def test_duplicate_role_across_files(self, loader, tmp_path):
        write_yaml(tmp_path / "a.yaml", {"role": "coder", "skills": ["coding"]})
        write_yaml(tmp_path / "b.yaml", {"role": "coder", "skills": ["coding"]})

        with pytest.raises(AgentConfigError, match="Duplicate"):
            loader.load_all_from_directory(tmp_path)

    def test_empty_directory(self, loader, tmp_path):
        with pytest.raises(AgentLoadError, match="No agent profiles found"):
            loader.load_all_from_directory(tmp_path)

    def test_clear(self, loader, tmp_path):
        loader.load_from_yaml(write_yaml(tmp_path / "coder.yaml", {"role": "coder", "skills": ["coding"]}))

        loader.clear()

        assert loader.get_loaded_profile("coder") is None


class TestDefaultRoster:
    """Test the built-in and shipped rosters."""

    def test_default_profiles(self):
        profiles = default_profiles()

        assert [p.role for p in profiles] == ["architect", "coder", "researcher", "orchestrator", "optimizer"]
        assert profiles[1].voice.style == VoiceStyle.ENERGETIC
        assert profiles[1].think_interval_seconds == 30

    def test_default_profiles_are_copies(self):
        profiles = default_profiles()
        profiles[0].skills.append("painting")

        assert "painting" not in DEFAULT_PROFILES[0].skills

    def test_shipped_roster_matches_defaults(self):
        """Test configs/agents.yaml describes the built-in roster."""
        loaded = load_profiles(ROSTER_PATH)

        assert [p.model_dump() for p in loaded] == [p.model_dump() for p in DEFAULT_PROFILES]

    def test_load_profiles_directory(self, tmp_path):
        write_yaml(tmp_path / "coder.yaml", {"role": "coder", "skills": ["coding"]})

        assert [p.role for p in load_profiles(tmp_path)] == ["coder"]
