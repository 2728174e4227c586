"""
Indicator Registry with Auto-Discovery
======================================
Discovers indicator classes in this package and builds them by name.

Keys are case-insensitive: ``"sma"``, ``"Sma"`` and ``"SMA"`` resolve to the
same class.
"""

import importlib
import inspect
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from .base import IndicatorBase
from ....core.exceptions import IndicatorNotFoundError
from ....core.logger import get_logger

_EXCLUDED_MODULES = {"base.py", "algorithm_registry.py"}
_SOURCE_PARAMETERS = {"self", "source", "source1", "source2"}


class IndicatorRegistry:
    """
    Registry of indicator classes.

    Features:
    - Auto-discovery of concrete indicators from the indicators/ package
    - Manual registration (custom indicators outside the package)
    - Metadata derived from class docstrings and constructor signatures
    """

    def __init__(self, logger: Optional[Any] = None):
        self.logger = logger or get_logger(__name__)
        self._indicators: Dict[str, Type[IndicatorBase]] = {}
        self._metadata_cache: Dict[str, Dict[str, Any]] = {}
        self._discovery_attempted = False

    @staticmethod
    def _key(name: str) -> str:
        return name.upper()

    def auto_discover(self) -> int:
        """
        Import every indicator module next to this file and register the
        concrete ``IndicatorBase`` subclasses it defines.

        Returns:
            Number of indicators registered by this call
        """
        if self._discovery_attempted:
            return 0
        self._discovery_attempted = True

        indicators_dir = Path(__file__).parent
        discovered = 0
        for py_file in sorted(indicators_dir.glob("*.py")):
            if py_file.name.startswith("_") or py_file.name in _EXCLUDED_MODULES:
                continue
            discovered += self._load_from_module(py_file.stem)

        self.logger.info("indicator_registry.discovery_completed", {
            "total_indicators": len(self._indicators),
            "newly_discovered": discovered
        })
        return discovered

    def _load_from_module(self, module_name: str) -> int:
        try:
            module = importlib.import_module(f"{__package__}.{module_name}")
        except ImportError as e:
            self.logger.warning("indicator_registry.module_import_failed", {
                "module": module_name,
                "error": str(e)
            })
            return 0

        count = 0
        for _, obj in inspect.getmembers(module, inspect.isclass):
            # imported helpers are registered by their own module
            if obj.__module__ != module.__name__ or not self._is_indicator_class(obj):
                continue
            self.register(obj)
            count += 1

        self.logger.debug("indicator_registry.module_loaded", {
            "module": module_name,
            "indicators_found": count
        })
        return count

    @staticmethod
    def _is_indicator_class(obj: Any) -> bool:
        return (
            inspect.isclass(obj)
            and issubclass(obj, IndicatorBase)
            and not inspect.isabstract(obj)
            and not obj.__name__.startswith("_")
        )

    def register(self, indicator_cls: Type[IndicatorBase], name: Optional[str] = None) -> None:
        """
        Register an indicator class under ``name`` (class name by default).

        Raises:
            TypeError: ``indicator_cls`` is not a concrete IndicatorBase subclass
        """
        if not self._is_indicator_class(indicator_cls):
            raise TypeError(f"{indicator_cls!r} is not a concrete IndicatorBase subclass")

        key = self._key(name or indicator_cls.__name__)
        existing = self._indicators.get(key)
        if existing is not None and existing is not indicator_cls:
            self.logger.warning("indicator_registry.indicator_overwrite", {
                "name": key,
                "existing_class": existing.__qualname__,
                "new_class": indicator_cls.__qualname__
            })

        self._indicators[key] = indicator_cls
        self._metadata_cache.pop(key, None)
        self.logger.debug("indicator_registry.indicator_registered", {
            "name": key,
            "class": indicator_cls.__qualname__,
            "category": indicator_cls.category
        })

    def get(self, name: str) -> Type[IndicatorBase]:
        """
        Look up an indicator class, running discovery on first access.

        Raises:
            IndicatorNotFoundError: no class registered under ``name``
        """
        if not self._discovery_attempted:
            self.auto_discover()

        indicator_cls = self._indicators.get(self._key(name))
        if indicator_cls is None:
            self.logger.error("indicator_registry.indicator_not_found", {
                "requested": name,
                "available": sorted(self._indicators)
            })
            raise IndicatorNotFoundError(name, self._indicators.keys())
        return indicator_cls

    def create(self, name: str, **params: Any) -> IndicatorBase:
        """Instantiate a registered indicator with constructor keyword arguments."""
        return self.get(name)(**params)

    def list_indicators(self) -> List[str]:
        if not self._discovery_attempted:
            self.auto_discover()
        return sorted(self._indicators)

    def get_metadata(self, name: str) -> Dict[str, Any]:
        """
        Describe an indicator: class name, category, input kind, the first
        docstring line and its constructor parameters with defaults.
        """
        indicator_cls = self.get(name)
        key = self._key(name)
        if key not in self._metadata_cache:
            self._metadata_cache[key] = self._build_metadata(indicator_cls)
        return dict(self._metadata_cache[key])

    @staticmethod
    def _build_metadata(indicator_cls: Type[IndicatorBase]) -> Dict[str, Any]:
        doc = inspect.getdoc(indicator_cls) or ""
        parameters = {}
        for param in inspect.signature(indicator_cls.__init__).parameters.values():
            if param.name in _SOURCE_PARAMETERS or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            parameters[param.name] = None if param.default is param.empty else param.default
        return {
            "class_name": indicator_cls.__name__,
            "module": indicator_cls.__module__,
            "category": indicator_cls.category,
            "input_kind": indicator_cls.input_kind,
            "description": doc.splitlines()[0] if doc else "",
            "parameters": parameters,
        }

    def get_statistics(self) -> Dict[str, Any]:
        categories: Dict[str, int] = {}
        for indicator_cls in self._indicators.values():
            categories[indicator_cls.category] = categories.get(indicator_cls.category, 0) + 1
        return {
            "total_indicators": len(self._indicators),
            "categories": categories,
            "discovery_attempted": self._discovery_attempted
        }


_default_registry: Optional[IndicatorRegistry] = None
_registry_lock = threading.Lock()


def get_default_registry() -> IndicatorRegistry:
    """Process-wide registry, populated by auto-discovery on first use."""
    global _default_registry
    if _default_registry is None:
        with _registry_lock:
            if _default_registry is None:
                registry = IndicatorRegistry()
                registry.auto_discover()
                _default_registry = registry
    return _default_registry
