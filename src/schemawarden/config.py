"""Layered configuration: .schemawarden/config.toml -> SCHEMAWARDEN_* env vars -> defaults."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ExtractorConfig:
    """Source extractor configuration."""

    source_suffixes: tuple[str, ...] = (".java",)
    exclude_dirs: tuple[str, ...] = (
        ".git",
        "build",
        "target",
        "node_modules",
        "out",
    )
    dto_markers: tuple[str, ...] = ("@Data", "@Getter", "@Value", "@Builder")
    dto_suffixes: tuple[str, ...] = ("DTO", "Dto", "VO", "Request", "Response")
    resolve_depth: int = 5


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Diff and graph analysis configuration."""

    max_depth: int = 10


@dataclass(frozen=True, slots=True)
class McpConfig:
    """MCP server configuration."""

    default_query_limit: int = 50


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass(frozen=True, slots=True)
class SchemaWardenConfig:
    """Top-level configuration container."""

    project_path: Path = field(default_factory=Path.cwd)
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    mcp: McpConfig = field(default_factory=McpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def schemawarden_dir(self) -> Path:
        """Directory for SchemaWarden project files."""
        return self.project_path / ".schemawarden"

    @property
    def config_path(self) -> Path:
        """Full path to the project's TOML config file."""
        return self.schemawarden_dir / "config.toml"

    @classmethod
    def load(cls, project_path: Path | None = None) -> SchemaWardenConfig:
        """Load config: TOML file -> env vars -> defaults."""
        project = Path(project_path) if project_path else Path.cwd()
        toml_path = project / ".schemawarden" / "config.toml"

        toml_data: dict = {}
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                toml_data = tomllib.load(f)

        extractor_data = toml_data.get("extractor", {})
        analysis_data = toml_data.get("analysis", {})
        mcp_data = toml_data.get("mcp", {})
        logging_data = toml_data.get("logging", {})

        _extractor_defaults = ExtractorConfig()
        _analysis_defaults = AnalysisConfig()
        _mcp_defaults = McpConfig()
        _logging_defaults = LoggingConfig()

        extractor = ExtractorConfig(
            source_suffixes=tuple(
                extractor_data.get("source_suffixes", _extractor_defaults.source_suffixes)
            ),
            exclude_dirs=tuple(
                extractor_data.get("exclude_dirs", _extractor_defaults.exclude_dirs)
            ),
            dto_markers=tuple(
                extractor_data.get("dto_markers", _extractor_defaults.dto_markers)
            ),
            dto_suffixes=tuple(
                extractor_data.get("dto_suffixes", _extractor_defaults.dto_suffixes)
            ),
            resolve_depth=int(
                os.environ.get(
                    "SCHEMAWARDEN_RESOLVE_DEPTH",
                    extractor_data.get("resolve_depth", _extractor_defaults.resolve_depth),
                )
            ),
        )

        analysis = AnalysisConfig(
            max_depth=int(
                os.environ.get(
                    "SCHEMAWARDEN_MAX_DEPTH",
                    analysis_data.get("max_depth", _analysis_defaults.max_depth),
                )
            ),
        )

        mcp = McpConfig(
            default_query_limit=int(
                os.environ.get(
                    "SCHEMAWARDEN_DEFAULT_QUERY_LIMIT",
                    mcp_data.get("default_query_limit", _mcp_defaults.default_query_limit),
                )
            ),
        )

        logging_config = LoggingConfig(
            level=os.environ.get(
                "SCHEMAWARDEN_LOG_LEVEL",
                logging_data.get("level", _logging_defaults.level),
            ).upper(),
        )

        return cls(
            project_path=project,
            extractor=extractor,
            analysis=analysis,
            mcp=mcp,
            logging=logging_config,
        )
