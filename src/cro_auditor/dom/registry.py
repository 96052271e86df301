# src/cro_auditor/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Optional

from .core import AnalyzerDefinition

logger = logging.getLogger(__name__)


class AnalyzerRegistry:
    """
    Central registry for the report categories.

    Dynamically discovers AnalyzerDefinition objects exposed as DEFINITION by the
    modules of the 'cro_auditor.analyzers' package.
    """

    _definitions: Dict[str, AnalyzerDefinition] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        if cls._loaded:
            return

        try:
            import cro_auditor.analyzers as analyzers_pkg

            for _, name, _ in pkgutil.iter_modules(analyzers_pkg.__path__):
                full_name = f"cro_auditor.analyzers.{name}"
                try:
                    module = importlib.import_module(full_name)
                except ImportError as e:
                    logger.error(f"Error loading analyzer module {name}: {e}")
                    continue

                defn = getattr(module, "DEFINITION", None)
                if isinstance(defn, AnalyzerDefinition):
                    cls.register(defn)

            cls._loaded = True
            logger.debug(f"Discovered {len(cls._definitions)} analyzers")
        except ImportError as e:
            logger.error(f"Could not find analyzers package: {e}")

    @classmethod
    def register(cls, defn: AnalyzerDefinition) -> None:
        """Adds (or replaces) the analyzer for a category."""
        if defn.category in cls._definitions:
            logger.warning(f"Analyzer for '{defn.category}' registered twice, keeping the latest")
        cls._definitions[defn.category] = defn
        logger.debug(f"Analyzer loaded: {defn.category}")

    @classmethod
    def get_definition(cls, category: str) -> Optional[AnalyzerDefinition]:
        return cls._definitions.get(category)

    @classmethod
    def get_definitions(cls) -> List[AnalyzerDefinition]:
        """Returns the registered analyzers in report order."""
        return sorted(cls._definitions.values(), key=lambda d: (d.order, d.category))

    @classmethod
    def get_all_categories(cls) -> List[str]:
        return [d.category for d in cls.get_definitions()]
