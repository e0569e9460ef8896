"""Agent profile loading from YAML files.

A profile file holds either a single profile mapping or a mapping with an
``agents`` list. A directory is loaded file by file in name order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from swarm.models import AgentProfile


class AgentLoadError(Exception):
    """Raised when agent loading fails."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (path: {path})" if path else ""))


class AgentConfigError(AgentLoadError):
    """Raised when agent configuration is invalid."""

    pass


class AgentLoader:
    """Loader for agent profiles stored as YAML.

    Keeps the profiles it has loaded, keyed by role, so a directory with two
    files defining the same role is reported instead of silently merged.
    """

    def __init__(self) -> None:
        self._loaded: dict[str, AgentProfile] = {}

    def load_from_yaml(self, path: str | Path) -> list[AgentProfile]:
        """Load the profiles defined in one YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Profiles in file order.

        Raises:
            AgentLoadError: If the file cannot be read or parsed.
            AgentConfigError: If a profile is invalid.
        """
        path = Path(path)

        if not path.exists():
            raise AgentLoadError("Configuration file not found", str(path))

        if not path.is_file():
            raise AgentLoadError("Path is not a file", str(path))

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise AgentLoadError(f"Invalid YAML: {e}", str(path)) from e
        except OSError as e:
            raise AgentLoadError(f"Cannot read file: {e}", str(path)) from e

        if not data:
            raise AgentConfigError("Empty configuration file", str(path))

        entries = data.get("agents") if isinstance(data, dict) and "agents" in data else data
        if isinstance(entries, dict):
            entries = [entries]
        if not isinstance(entries, list):
            raise AgentConfigError("Expected a profile mapping or an 'agents' list", str(path))

        profiles = [self.create_profile(entry, source_path=str(path)) for entry in entries]
        for profile in profiles:
            if profile.role in self._loaded:
                raise AgentConfigError(f"Duplicate agent role: {profile.role}", str(path))
            self._loaded[profile.role] = profile
        return profiles

    def load_all_from_directory(self, dir_path: str | Path) -> list[AgentProfile]:
        """Load every ``*.yaml`` / ``*.yml`` file in a directory.

        Args:
            dir_path: Directory containing profile files.

        Returns:
            All profiles, files taken in name order.

        Raises:
            AgentLoadError: If the directory cannot be read or holds no profiles.
        """
        dir_path = Path(dir_path)

        if not dir_path.exists():
            raise AgentLoadError("Directory not found", str(dir_path))

        if not dir_path.is_dir():
            raise AgentLoadError("Path is not a directory", str(dir_path))

        files = sorted([*dir_path.glob("*.yaml"), *dir_path.glob("*.yml")])
        profiles: list[AgentProfile] = []
        for yaml_file in files:
            profiles.extend(self.load_from_yaml(yaml_file))

        if not profiles:
            raise AgentLoadError("No agent profiles found", str(dir_path))

        return profiles

    def create_profile(
        self,
        config_data: Any,
        source_path: str | None = None,
    ) -> AgentProfile:
        """Validate one profile mapping.

        Raises:
            AgentConfigError: If the mapping is not a valid profile.
        """
        if not isinstance(config_data, dict):
            raise AgentConfigError("Agent profile must be a mapping", source_path)
        try:
            return AgentProfile.model_validate(config_data)
        except ValidationError as e:
            raise AgentConfigError(f"Invalid agent configuration: {e}", source_path) from e

    def get_loaded_profile(self, role: str) -> AgentProfile | None:
        return self._loaded.get(role)

    def clear(self) -> None:
        """Forget all loaded profiles."""
        self._loaded.clear()


def load_profiles(path: str | Path) -> list[AgentProfile]:
    """Load agent profiles from a YAML file or a directory of them.

    Args:
        path: File or directory path.

    Returns:
        The loaded profiles.
    """
    loader = AgentLoader()
    if Path(path).is_dir():
        return loader.load_all_from_directory(path)
    return loader.load_from_yaml(path)
