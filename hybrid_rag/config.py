"""
Configuration - Load and validate .hybrid-rag.yml

Settings are read from a YAML file and validated into frozen pydantic
models. Every section and key is optional, but unknown sections or keys are
rejected instead of being silently ignored.

Lookup order:
1. Explicit path (e.g. --config on the command line)
2. HYBRID_RAG_CONFIG environment variable
3. .hybrid-rag.yml in the current directory or up to 5 parents
4. Built-in defaults
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from hybrid_rag.errors import ConfigError, describe_validation_error

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HYBRID_RAG_CONFIG"
DEFAULT_CONFIG_NAME = ".hybrid-rag.yml"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ProjectConfig(_Section):
    name: str = Field("hybrid-rag", min_length=1)


class CorpusConfig(_Section):
    path: Optional[str] = None


class RetrievalConfig(_Section):
    default_top_k: StrictInt = Field(3, ge=1)
    rrf_k: StrictInt = Field(60, ge=1)
    phrase_bonus: float = Field(5, ge=0)
    # None means "use the scorer's built-in English stop words"
    stop_words: Optional[Tuple[str, ...]] = None

    @field_validator("stop_words")
    @classmethod
    def _normalise_stop_words(cls, value):
        if value is None:
            return None
        return tuple(word.strip().lower() for word in value if word.strip())


class EmbeddingConfig(_Section):
    model: str = Field("nomic-embed-text", min_length=1)
    host: Optional[str] = None
    dimensions: Optional[StrictInt] = Field(768, ge=1)


class GenerationConfig(_Section):
    model: str = Field("llama3.1:8b", min_length=1)
    temperature: float = Field(0.3, ge=0)
    max_tokens: StrictInt = Field(256, ge=1)


class LoggingConfig(_Section):
    level: LogLevel = "INFO"
    file: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value


class AppConfig(_Section):
    """Complete application configuration"""
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    corpus: CorpusConfig = Field(default_factory=CorpusConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_sections(cls, data):
        # "corpus:" with nothing under it parses as None
        if isinstance(data, dict):
            return {
                key: value for key, value in data.items()
                if value is not None or key not in cls.model_fields
            }
        return data

    @property
    def project_name(self) -> str:
        return self.project.name

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AppConfig":
        """
        Build a validated configuration from a parsed YAML mapping

        Args:
            data: Parsed YAML content (None or empty means all defaults)

        Returns:
            AppConfig instance

        Raises:
            ConfigError: Unknown section/key or invalid value
        """
        try:
            return cls.model_validate({} if data is None else data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {describe_validation_error(e)}") from e


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """
    Locate the configuration file

    Checks HYBRID_RAG_CONFIG first, then searches for .hybrid-rag.yml in the
    start directory and up to 5 parent directories.

    Returns:
        Path to the config file, or None if nothing was found
    """
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    search_path = (start or Path.cwd()).resolve()
    for _ in range(6):
        candidate = search_path / DEFAULT_CONFIG_NAME
        if candidate.exists():
            return candidate
        if search_path.parent == search_path:
            break
        search_path = search_path.parent
    return None


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Load configuration from YAML

    Args:
        path: Explicit config path. If omitted, the file is located with
            find_config_file() and defaults are used when none exists.

    Returns:
        Validated AppConfig

    Raises:
        ConfigError: Explicit file missing, unparseable, or invalid
    """
    explicit = path is not None or bool(os.getenv(CONFIG_ENV_VAR))
    config_path = Path(path).expanduser() if path is not None else find_config_file()

    if config_path is None:
        logger.debug("No configuration file found, using defaults")
        return AppConfig()

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return AppConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e

    logger.info(f"Configuration loaded from: {config_path}")
    return AppConfig.from_dict(data)


def configure_logging(settings: LoggingConfig) -> None:
    """Configure root logging from the logging section"""
    handlers = None
    if settings.file:
        log_file_path = Path(settings.file).expanduser()
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file_path)]

    logging.basicConfig(
        level=getattr(logging, settings.level),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
