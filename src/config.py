"""
Configuration for Ragraph.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "llama3.1:8b"
    base_url: str = "http://localhost:11434"
    api_key: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: float = 120.0


class EmbedderConfig(BaseModel):
    """Embedder configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "nomic-embed-text"
    base_url: str = "http://localhost:11434"
    api_key: str | None = None
    timeout: float = 120.0
    # Optional: embedding dimension (fallback to auto-detect)
    dimension: int | None = None


class ChunkingConfig(BaseModel):
    """Document chunking defaults."""

    strategy: str = "recursive"  # fixed, sentence, paragraph, recursive, semantic
    chunk_size: int = 1000
    chunk_overlap: int = 200


class CacheConfig(BaseModel):
    """Embedding cache configuration."""

    enabled: bool = True
    max_size: int = 10000
    ttl_seconds: float = 86400.0


class RetrievalConfig(BaseModel):
    """Default retrieval parameters."""

    top_k: int = 10
    threshold: float = 0.7
    reranking_enabled: bool = True
    mmr_lambda: float = 0.5
    semantic_weight: float = 0.7
    keyword_weight: float = 0.2
    title_weight: float = 0.1


class GraphConfig(BaseModel):
    """Knowledge graph configuration."""

    default_max_depth: int = 5
    max_entities: int = 100000
    max_relationships: int = 500000


class PipelineConfig(BaseModel):
    """RAG pipeline configuration."""

    max_context_length: int = 8000
    citation_enabled: bool = True
    include_sources: bool = True
    timeout: float | None = None


class IngestionConfig(BaseModel):
    """Batch ingestion configuration."""

    max_concurrency: int = 8


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embedder: EmbedderConfig = Field(default_factory=EmbedderConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            RAGRAPH_LLM_PROVIDER: LLM provider (ollama, openai)
            RAGRAPH_LLM_MODEL: LLM model name
            RAGRAPH_LLM_API_KEY: LLM API key (for OpenAI)
            RAGRAPH_EMBEDDER_PROVIDER: Embedder provider
            RAGRAPH_EMBEDDER_MODEL: Embedder model name
            RAGRAPH_EMBEDDER_DIMENSION: Embedding dimension (optional)
            RAGRAPH_CHUNK_STRATEGY: Default chunking strategy
            RAGRAPH_CHUNK_SIZE / RAGRAPH_CHUNK_OVERLAP: Chunk window in characters
            RAGRAPH_CACHE_MAX_SIZE / RAGRAPH_CACHE_TTL: Embedding cache bounds
            RAGRAPH_RETRIEVAL_TOP_K / RAGRAPH_RETRIEVAL_THRESHOLD: Retrieval defaults
            RAGRAPH_MAX_CONTEXT_LENGTH: Context budget in characters
            RAGRAPH_INGEST_CONCURRENCY: Batch ingestion worker count
            RAGRAPH_LOG_LEVEL: Log level
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            llm=LLMConfig(
                provider=get_env("RAGRAPH_LLM_PROVIDER", "ollama"),
                model=get_env("RAGRAPH_LLM_MODEL", "llama3.1:8b"),
                base_url=get_env("RAGRAPH_LLM_BASE_URL", "http://localhost:11434"),
                api_key=get_env("RAGRAPH_LLM_API_KEY"),
                temperature=get_env("RAGRAPH_LLM_TEMPERATURE", 0.7),
                max_tokens=get_env("RAGRAPH_LLM_MAX_TOKENS", 2000),
                timeout=get_env("RAGRAPH_LLM_TIMEOUT", 120.0),
            ),
            embedder=EmbedderConfig(
                provider=get_env("RAGRAPH_EMBEDDER_PROVIDER", "ollama"),
                model=get_env("RAGRAPH_EMBEDDER_MODEL", "nomic-embed-text"),
                base_url=get_env("RAGRAPH_EMBEDDER_BASE_URL", "http://localhost:11434"),
                api_key=get_env("RAGRAPH_EMBEDDER_API_KEY"),
                timeout=get_env("RAGRAPH_EMBEDDER_TIMEOUT", 120.0),
                dimension=get_env("RAGRAPH_EMBEDDER_DIMENSION", 0) or None,
            ),
            chunking=ChunkingConfig(
                strategy=get_env("RAGRAPH_CHUNK_STRATEGY", "recursive"),
                chunk_size=get_env("RAGRAPH_CHUNK_SIZE", 1000),
                chunk_overlap=get_env("RAGRAPH_CHUNK_OVERLAP", 200),
            ),
            cache=CacheConfig(
                enabled=get_env("RAGRAPH_CACHE_ENABLED", True),
                max_size=get_env("RAGRAPH_CACHE_MAX_SIZE", 10000),
                ttl_seconds=get_env("RAGRAPH_CACHE_TTL", 86400.0),
            ),
            retrieval=RetrievalConfig(
                top_k=get_env("RAGRAPH_RETRIEVAL_TOP_K", 10),
                threshold=get_env("RAGRAPH_RETRIEVAL_THRESHOLD", 0.7),
                reranking_enabled=get_env("RAGRAPH_RERANKING_ENABLED", True),
                mmr_lambda=get_env("RAGRAPH_MMR_LAMBDA", 0.5),
            ),
            pipeline=PipelineConfig(
                max_context_length=get_env("RAGRAPH_MAX_CONTEXT_LENGTH", 8000),
                citation_enabled=get_env("RAGRAPH_CITATIONS_ENABLED", True),
            ),
            ingestion=IngestionConfig(
                max_concurrency=get_env("RAGRAPH_INGEST_CONCURRENCY", 8),
            ),
            logging=LoggingConfig(
                level=get_env("RAGRAPH_LOG_LEVEL", "INFO"),
                log_to_file=get_env("RAGRAPH_LOG_TO_FILE", False),
                log_dir=get_env("RAGRAPH_LOG_DIR", "logs"),
                file_rotation=get_env("RAGRAPH_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("RAGRAPH_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("RAGRAPH_LOG_COMPRESSION", "zip"),
                serialize=get_env("RAGRAPH_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Env fields that differ from defaults override the YAML field
        final_dict = {**config_dict}
        default = cls()
        for section in (
            "llm",
            "embedder",
            "chunking",
            "cache",
            "retrieval",
            "pipeline",
            "ingestion",
            "logging",
        ):
            default_section = getattr(default, section)
            overrides = {
                key: value
                for key, value in getattr(env_config, section).model_dump().items()
                if value != getattr(default_section, key)
            }
            if overrides:
                final_dict[section] = {**(config_dict.get(section) or {}), **overrides}

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
