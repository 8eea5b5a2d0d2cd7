"""
Language registry for mapping file names and extensions to languages.
"""

import logging
from pathlib import Path, PurePath

import yaml

logger = logging.getLogger(__name__)

# Default path to the languages configuration file
_DEFAULT_LANGUAGES_CONFIG = Path(__file__).parent.parent / "languages.yaml"


class LanguageRegistry:
    """
    Registry mapping file extensions and special basenames to language names.

    Basenames (``Dockerfile``, ``Makefile``...) are checked before extensions.
    Both lookups are case-insensitive. Unknown files map to ``None``.

    Example:
        >>> registry = LanguageRegistry()
        >>> registry.register("Elixir", [".ex", ".exs"])
        >>> registry.detect_from_path("lib/app.ex")
        'Elixir'
    """

    def __init__(self, load_defaults: bool = True):
        """
        Initialize the language registry.

        Args:
            load_defaults: If True, load default mappings from languages.yaml.
        """
        self._extension_to_language: dict[str, str] = {}
        self._filename_to_language: dict[str, str] = {}

        if load_defaults:
            self._load_from_yaml(_DEFAULT_LANGUAGES_CONFIG)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "LanguageRegistry":
        """
        Create a LanguageRegistry from a YAML configuration file.

        Raises:
            ValueError: If the config file format is invalid
        """
        registry = cls(load_defaults=False)
        registry._load_from_yaml(Path(config_path))
        return registry

    def _load_from_yaml(self, config_path: Path) -> None:
        """
        Load mappings from a YAML file.

        Expected format:
            filenames:
              Dockerfile: [dockerfile]
            extensions:
              Python: [.py, .pyw]
        """
        if not config_path.exists():
            logger.warning(f"Languages config not found: {config_path}, using empty registry")
            return

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse languages config: {e}")
            raise ValueError(f"Invalid YAML in languages config: {e}") from e

        if data is None:
            return

        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid languages config format: expected dict, got {type(data)}"
            )

        for section, target in (
            ("extensions", self._extension_to_language),
            ("filenames", self._filename_to_language),
        ):
            for language, names in (data.get(section) or {}).items():
                if not isinstance(names, list):
                    logger.warning(
                        f"Invalid {section} for {language}: expected list, got {type(names)}"
                    )
                    continue
                for name in names:
                    target[str(name).lower()] = str(language)

    def register(self, language: str, extensions: list[str]) -> "LanguageRegistry":
        """Register a language for the given extensions (including the dot)."""
        for ext in extensions:
            self._extension_to_language[ext.lower()] = language
        return self

    def register_filename(self, language: str, filenames: list[str]) -> "LanguageRegistry":
        """Register a language for exact basenames such as ``Jenkinsfile``."""
        for name in filenames:
            self._filename_to_language[name.lower()] = language
        return self

    def detect(self, extension: str) -> str | None:
        """Detect language from a file extension such as ``.py``."""
        return self._extension_to_language.get(extension.lower())

    def detect_from_path(self, file_path: str | PurePath) -> str | None:
        """
        Detect language from a file path.

        Special basenames win over extension lookup.

        Returns:
            Language name or None if not recognized
        """
        name = str(file_path).replace("\\", "/").rsplit("/", 1)[-1]
        language = self._filename_to_language.get(name.lower())
        if language is not None:
            return language
        return self.detect(PurePath(name).suffix)

    def get_all_extensions(self) -> set[str]:
        """Get all registered file extensions."""
        return set(self._extension_to_language.keys())

    def get_all_languages(self) -> set[str]:
        """Get all registered language names."""
        return set(self._extension_to_language.values()) | set(
            self._filename_to_language.values()
        )

    def is_supported(self, extension: str) -> bool:
        """Check if an extension is registered."""
        return extension.lower() in self._extension_to_language


# Global default registry instance
_default_registry = LanguageRegistry()


def get_default_registry() -> LanguageRegistry:
    """Get the global default language registry."""
    return _default_registry
