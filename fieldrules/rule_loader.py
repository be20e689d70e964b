"""
Rule Loader - Discovery and Registration of Rule Implementations

Finds ValidationRule subclasses in Python modules and registers one instance
of each in a RuleRegistry.

## Key Design Principle: The Class Carries Its Name

Every rule class declares its rule name as a class attribute:

```python
class DigitsRule(ValidationRule):
    name = "digits"
```

The loader never derives names from class or file names. Classes with an
empty ``name`` (shared bases such as ``_SizeRule``) are skipped, as are
classes merely imported into a module from elsewhere.

## Sources

1. Modules listed under ``rule_modules`` in configuration, imported by
   dotted name (the built-in families live in ``fieldrules.rules``).
2. Every ``*.py`` file in ``custom_rules_directory``, loaded by path.

Modules are processed in order, so a custom rule with a built-in's name
replaces the built-in (last registration wins).
"""

import importlib
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Optional, Type

from .messages import MessageCatalog
from .rules.base import ValidationRule

logger = logging.getLogger(__name__)


class RuleLoader:
    """Loads rule classes from modules and files and registers them."""

    def __init__(self, config_loader, messages: Optional[MessageCatalog] = None):
        """
        Initialize rule loader.

        Args:
            config_loader: ConfigLoader instance supplying rule_modules,
                custom_rules_directory and rule_settings
            messages: MessageCatalog shared by every rule instance
        """
        self.config_loader = config_loader
        self.messages = messages or MessageCatalog(config_loader.get_messages())
        self.settings = config_loader.get_rule_settings()
        self.loaded_modules: Dict[str, List[Type[ValidationRule]]] = {}  # Cache: module -> rule classes

    def register_all(self, registry) -> List[str]:
        """
        Register every configured rule in registry.

        Returns:
            Names registered, in registration order
        """
        names = []
        for module_name in self.config_loader.get_rule_modules():
            names.extend(self.register_module(registry, module_name))

        directory = self.config_loader.get_custom_rules_directory()
        if directory is not None:
            names.extend(self.register_directory(registry, directory))

        logger.info(f"Registered {len(names)} validation rules")
        return names

    def register_module(self, registry, module_name: str) -> List[str]:
        """Import a module by dotted name and register its rules."""
        classes = self.loaded_modules.get(module_name)
        if classes is None:
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                raise ImportError(f"Failed to import rule module {module_name}: {e}") from e
            classes = self._collect_rule_classes(module)
            self.loaded_modules[module_name] = classes
        return self._register_classes(registry, classes)

    def register_directory(self, registry, directory: Path) -> List[str]:
        """Load every *.py file in directory (sorted by name) and register its rules."""
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Custom rules directory not found: {directory}")

        names = []
        for rule_file in sorted(directory.glob("*.py")):
            if rule_file.name.startswith("_"):
                continue
            names.extend(self.register_file(registry, rule_file))
        return names

    def register_file(self, registry, rule_file: Path) -> List[str]:
        """Load one rule file by path and register its rules."""
        rule_file = Path(rule_file).resolve()
        cache_key = str(rule_file)
        classes = self.loaded_modules.get(cache_key)
        if classes is None:
            module_name = f"fieldrules_custom.{rule_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, rule_file)
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception as e:
                sys.modules.pop(module_name, None)
                raise ImportError(f"Failed to import rule file {rule_file}: {e}") from e
            classes = self._collect_rule_classes(module)
            if not classes:
                logger.warning(f"No rule classes found in {rule_file}")
            self.loaded_modules[cache_key] = classes
        return self._register_classes(registry, classes)

    def _collect_rule_classes(self, module: ModuleType) -> List[Type[ValidationRule]]:
        """Rule classes defined in module itself, in source order."""
        classes = []
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if (
                issubclass(obj, ValidationRule)
                and obj.__module__ == module.__name__
                and obj.name
                and not inspect.isabstract(obj)
            ):
                classes.append(obj)
        classes.sort(key=_source_line)
        return classes

    def _register_classes(self, registry, classes: List[Type[ValidationRule]]) -> List[str]:
        names = []
        for rule_class in classes:
            rule = rule_class(messages=self.messages, settings=self.settings)
            registry.register(rule)
            names.append(rule.get_name())
        return names


def _source_line(rule_class) -> int:
    try:
        return inspect.getsourcelines(rule_class)[1]
    except (OSError, TypeError):
        return 0
