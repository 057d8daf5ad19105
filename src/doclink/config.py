"""Settings loaded from doclink.toml.

The file is looked up from the working directory upwards when no
explicit path is given.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from doclink.core.resolver import LinkPolicy

CONFIG_FILENAME = "doclink.toml"

DEFAULT_WATCH_PATTERNS = ["**/*.md", "**/*.mdx"]


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class DocsConfig:
    """Documentation configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))


@dataclass
class LinksConfig:
    """Alias reference handling."""

    policy: LinkPolicy = LinkPolicy.WARN


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_WATCH_PATTERNS),
    )


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    docs: DocsConfig
    links: LinksConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Read doclink.toml from config_path, or find it upwards from cwd.

        Missing sections fall back to defaults; with no file at all every
        setting is a default.

        Raises:
            FileNotFoundError: config_path was given but doesn't exist
            ValueError: A section or value has the wrong type
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(
            server=ServerConfig(),
            docs=DocsConfig(),
            links=LinksConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            docs=cls._parse_docs(data.get("docs"), config_dir),
            links=cls._parse_links(data.get("links")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        # source_dir is relative to the directory holding the config file
        if data is None:
            return DocsConfig(source_dir=config_dir / "docs")

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        source_dir = data.get("source_dir", "docs")
        if not isinstance(source_dir, str):
            raise ValueError("docs.source_dir must be a string")

        return DocsConfig(source_dir=config_dir / source_dir)

    @classmethod
    def _parse_links(cls, data: object) -> LinksConfig:
        if data is None:
            return LinksConfig()

        if not isinstance(data, dict):
            raise ValueError("links section must be a dictionary")

        policy = data.get("policy", LinkPolicy.WARN.value)
        if not isinstance(policy, str):
            raise ValueError("links.policy must be a string")
        try:
            return LinksConfig(policy=LinkPolicy(policy))
        except ValueError:
            allowed = ", ".join(p.value for p in LinkPolicy)
            raise ValueError(f"links.policy must be one of: {allowed}") from None

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        if watch_patterns_raw is None:
            return LiveReloadConfig(enabled=enabled)

        if not isinstance(watch_patterns_raw, list):
            raise ValueError("live_reload.watch_patterns must be a list")
        watch_patterns: list[str] = []
        for item in watch_patterns_raw:
            if not isinstance(item, str):
                raise ValueError("live_reload.watch_patterns items must be strings")
            watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        policy: LinkPolicy | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Return a copy with command-line values layered on top.

        Arguments left as None keep the configured value.
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        docs = self.docs
        if source_dir is not None:
            docs = replace(self.docs, source_dir=source_dir)

        links = self.links
        if policy is not None:
            links = replace(self.links, policy=policy)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            docs=docs,
            links=links,
            live_reload=live_reload,
        )
