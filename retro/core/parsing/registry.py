"""
Parser Registry — Routes documents to language-specific configurations.

Central registry that maps editor language ids and file extensions to
LanguageConfig instances. Enables adding new language support without
modifying core code.

Usage:
    registry = ParserRegistry()
    registry.register(TYPESCRIPT_CONFIG)

    config = registry.get_config_for_document(document)
    # language_id "typescript" or a .ts URI -> TYPESCRIPT_CONFIG
"""

from pathlib import Path, PurePosixPath
from typing import Dict, Optional, Set
from urllib.parse import urlparse, unquote

from .config import LanguageConfig
from ..types import Document


class ParserRegistry:
    """
    Registry of language configurations.

    Maps extensions and language ids to LanguageConfig instances.
    Language id wins over extension when both are known.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._configs: Dict[str, LanguageConfig] = {}  # name -> config
        self._extension_map: Dict[str, str] = {}  # ext -> config name
        self._language_id_map: Dict[str, str] = {}  # language id -> config name

    def register(self, config: LanguageConfig) -> None:
        """
        Register a language configuration.

        Raises:
            ValueError: If an extension is already registered to a different config
        """
        for ext in config.extensions:
            existing = self._extension_map.get(ext.lower())
            if existing and existing != config.name:
                raise ValueError(
                    f"Extension {ext} already registered to {existing}, "
                    f"cannot register to {config.name}"
                )

        self._configs[config.name] = config
        for ext in config.extensions:
            self._extension_map[ext.lower()] = config.name
        for language_id in config.language_ids:
            self._language_id_map[language_id] = config.name

    def unregister(self, name: str) -> bool:
        """Unregister a configuration by name. Returns False if not found."""
        config = self._configs.pop(name, None)
        if config is None:
            return False

        self._extension_map = {k: v for k, v in self._extension_map.items() if v != name}
        self._language_id_map = {k: v for k, v in self._language_id_map.items() if v != name}
        return True

    def get_config(self, file_path: Path) -> Optional[LanguageConfig]:
        """Config for a file path based on its extension."""
        config_name = self._extension_map.get(Path(file_path).suffix.lower())
        return self._configs.get(config_name) if config_name else None

    def get_config_for_language(self, language_id: str) -> Optional[LanguageConfig]:
        """Config for an editor language id (e.g. "typescriptreact")."""
        config_name = self._language_id_map.get(language_id)
        return self._configs.get(config_name) if config_name else None

    def get_config_for_document(self, document: Document) -> Optional[LanguageConfig]:
        """Config by language id, falling back to the URI's extension."""
        if document.language_id:
            config = self.get_config_for_language(document.language_id)
            if config is not None:
                return config
        return self.get_config(_uri_path(document.uri))

    def language_id_for(self, file_path: Path) -> str:
        """Primary language id for a path, or "" if unsupported."""
        config = self.get_config(file_path)
        if config is None or not config.language_ids:
            return ""
        return sorted(config.language_ids)[0]

    def supported_extensions(self) -> Set[str]:
        return set(self._extension_map.keys())

    def is_supported(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lower() in self._extension_map

    def __len__(self) -> int:
        return len(self._configs)


def _uri_path(uri: str) -> PurePosixPath:
    """Path component of a URI (or the string itself if it is a plain path)."""
    parsed = urlparse(uri)
    return PurePosixPath(unquote(parsed.path) if parsed.scheme else uri)


def default_registry() -> ParserRegistry:
    """Registry with every bundled language registered."""
    from .languages import JAVASCRIPT_CONFIG, TYPESCRIPT_CONFIG, TSX_CONFIG, PYTHON_CONFIG

    registry = ParserRegistry()
    for config in (JAVASCRIPT_CONFIG, TYPESCRIPT_CONFIG, TSX_CONFIG, PYTHON_CONFIG):
        registry.register(config)
    return registry
