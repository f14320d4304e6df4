"""Configuration for Conveyor."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Dict, Any, Mapping
import os

import yaml

from conveyor.exceptions import ConveyorConfigError


@dataclass(frozen=True)
class ConveyorConfig:
    """Immutable configuration handed to the pipeline at run start."""

    # Source
    repository_url: str = ""
    """Git URL or local path of the repository to clone."""

    branch: str = "main"
    """Branch to clone."""

    # Project commands
    test_command: str = "mvn test"
    """Command running the project's tests inside the checkout."""

    build_command: str = "mvn clean package"
    """Command building/packaging the project inside the checkout."""

    test_report_pattern: str = "target/surefire-reports/*.xml"
    """Glob (relative to the checkout) of JUnit XML reports."""

    # Container image
    image: str = ""
    """Image identifier the container is tagged and pushed with."""

    dockerfile: str = "Dockerfile"
    """Dockerfile path relative to the checkout."""

    build_context: str = "."
    """Container build context relative to the checkout."""

    container_engine: str = "docker"
    """Container engine executable."""

    # Registry
    registry_url: str = ""
    """Registry host to authenticate against. Empty means the engine default."""

    registry_username: str = ""
    registry_password: str = field(default="", repr=False)

    # Deploy
    host_port: int = 8080
    container_port: int = 8080
    container_name: Optional[str] = None

    # Workspace
    workspace_dir: str = ".conveyor/workspace"
    """Root under which each run gets its own directory."""

    artifacts_dir: str = ".conveyor/artifacts"
    """Root under which each run's published artifacts are written."""

    keep_workspace: bool = False
    """Keep the run's checkout after the run finishes."""

    # Behavior
    command_timeout: float = 1800.0
    """Seconds an external command may run before it is aborted."""

    verbose: bool = False
    """Enable verbose logging output."""

    environment: Mapping[str, str] = field(default_factory=dict)
    """Variables exported to every stage's commands."""

    def __post_init__(self) -> None:
        """Freeze the environment and validate configuration."""
        object.__setattr__(
            self, "environment", MappingProxyType(dict(self.environment))
        )
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values."""
        if not self.repository_url:
            raise ConveyorConfigError(
                "repository_url must be set", "repository_url"
            )

        if not self.branch:
            raise ConveyorConfigError("branch must be set", "branch")

        if not self.image:
            raise ConveyorConfigError("image must be set", "image")

        for key in ("test_command", "build_command", "container_engine"):
            if not getattr(self, key).strip():
                raise ConveyorConfigError(f"{key} must not be empty", key)

        for key in ("host_port", "container_port"):
            port = getattr(self, key)
            if not 1 <= port <= 65535:
                raise ConveyorConfigError(
                    f"{key} must be between 1 and 65535, got {port}", key
                )

        if self.command_timeout <= 0:
            raise ConveyorConfigError(
                f"command_timeout must be positive, got {self.command_timeout}",
                "command_timeout",
            )

    @property
    def workspace_root(self) -> Path:
        """Absolute workspace root; relative paths resolve against the cwd."""
        return Path(self.workspace_dir).resolve()

    @property
    def artifacts_root(self) -> Path:
        return Path(self.artifacts_dir).resolve()

    @property
    def has_registry_credential(self) -> bool:
        """Check if a registry username and password are configured."""
        return bool(self.registry_username and self.registry_password)

    def with_overrides(self, **overrides: Any) -> "ConveyorConfig":
        """Return a copy with the given non-None values replaced."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConveyorConfig":
        """Create configuration from dictionary."""
        # Handle nested structure from YAML
        flat_data: Dict[str, Any] = {}

        if "source" in data:
            source = data["source"] or {}
            flat_data["repository_url"] = source.get("repository", "")
            flat_data["branch"] = source.get("branch", "main")

        if "commands" in data:
            commands = data["commands"] or {}
            flat_data["test_command"] = commands.get("test", "mvn test")
            flat_data["build_command"] = commands.get("build", "mvn clean package")
            flat_data["test_report_pattern"] = commands.get(
                "test_reports", "target/surefire-reports/*.xml"
            )

        if "container" in data:
            container = data["container"] or {}
            flat_data["image"] = container.get("image", "")
            flat_data["dockerfile"] = container.get("dockerfile", "Dockerfile")
            flat_data["build_context"] = container.get("context", ".")
            flat_data["container_engine"] = container.get("engine", "docker")

        if "registry" in data:
            registry = data["registry"] or {}
            flat_data["registry_url"] = registry.get("url", "") or ""
            flat_data["registry_username"] = registry.get("username", "") or ""
            flat_data["registry_password"] = registry.get("password", "") or ""

        if "deploy" in data:
            deploy = data["deploy"] or {}
            flat_data["host_port"] = int(deploy.get("host_port", 8080))
            flat_data["container_port"] = int(deploy.get("container_port", 8080))
            flat_data["container_name"] = deploy.get("container_name")

        if "workspace" in data:
            workspace = data["workspace"] or {}
            flat_data["workspace_dir"] = workspace.get("root", ".conveyor/workspace")
            flat_data["artifacts_dir"] = workspace.get(
                "artifacts", ".conveyor/artifacts"
            )
            flat_data["keep_workspace"] = bool(workspace.get("keep", False))

        if "behavior" in data:
            behavior = data["behavior"] or {}
            flat_data["command_timeout"] = float(
                behavior.get("command_timeout", 1800.0)
            )
            flat_data["verbose"] = bool(behavior.get("verbose", False))

        if "environment" in data and isinstance(data["environment"], dict):
            flat_data["environment"] = {
                str(k): str(v) for k, v in data["environment"].items()
            }

        # Also accept flat keys; they take precedence over nested sections
        for key in [
            "repository_url",
            "branch",
            "test_command",
            "build_command",
            "test_report_pattern",
            "image",
            "dockerfile",
            "build_context",
            "container_engine",
            "registry_url",
            "registry_username",
            "registry_password",
            "host_port",
            "container_port",
            "container_name",
            "workspace_dir",
            "artifacts_dir",
            "keep_workspace",
            "command_timeout",
            "verbose",
        ]:
            if key in data:
                flat_data[key] = data[key]

        return cls(**flat_data)

    @classmethod
    def from_yaml(cls, path: str, **overrides: Any) -> "ConveyorConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to the YAML file
            **overrides: Flat keys applied on top of the file when not None

        Returns:
            Validated configuration
        """
        data = cls.load_yaml(path)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(data)

    @classmethod
    def load_yaml(cls, path: str) -> Dict[str, Any]:
        """Read a YAML config file into a flat-or-nested dict, env vars substituted."""
        file_path = Path(path)
        if not file_path.exists():
            raise ConveyorConfigError(f"Config file not found: {path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConveyorConfigError(f"Invalid YAML in config file: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConveyorConfigError(
                f"Config file must contain a mapping, got {type(data).__name__}"
            )

        return cls._substitute_env_vars(data)

    @classmethod
    def _substitute_env_vars(cls, data: Any) -> Any:
        """Recursively substitute environment variables in config."""
        if isinstance(data, dict):
            return {k: cls._substitute_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars(item) for item in data]
        elif isinstance(data, str) and data.startswith("${") and data.endswith("}"):
            env_var = data[2:-1]
            return os.environ.get(env_var, "")
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary. The registry password is masked."""
        return {
            "repository_url": self.repository_url,
            "branch": self.branch,
            "test_command": self.test_command,
            "build_command": self.build_command,
            "test_report_pattern": self.test_report_pattern,
            "image": self.image,
            "dockerfile": self.dockerfile,
            "build_context": self.build_context,
            "container_engine": self.container_engine,
            "registry_url": self.registry_url,
            "registry_username": self.registry_username,
            "registry_password": "***" if self.registry_password else "",
            "host_port": self.host_port,
            "container_port": self.container_port,
            "container_name": self.container_name,
            "workspace_dir": self.workspace_dir,
            "artifacts_dir": self.artifacts_dir,
            "keep_workspace": self.keep_workspace,
            "command_timeout": self.command_timeout,
            "verbose": self.verbose,
            "environment": dict(self.environment),
        }
