import logging
from typing import List, Optional, Set, Tuple

from bean_atlas.models.domain_models import MethodSignature
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.services.class_registry import ClassRegistry

logger = logging.getLogger(__name__)

class MethodInventory:
    """Collects the public method signatures a class exposes."""

    def __init__(self, registry: ClassRegistry, config: Optional[IntrospectionConfig] = None):
        self.registry = registry
        self.config = config or IntrospectionConfig()

    def methods(self, class_name: str, include_ancestors: bool = False,
                stop_class: Optional[str] = None) -> List[MethodSignature]:
        """Public methods of `class_name`.

        Declared-only by default. With `include_ancestors`, inherited public
        methods are added (an override hides the method it overrides) and,
        when `stop_class` is given, every signature the stop class itself
        exposes is removed.
        """
        class_info = self.registry.require(class_name)
        if not include_ancestors:
            return [method for method in class_info.methods if method.is_public]

        found = self._public_methods_with_ancestors(class_name)
        if stop_class is not None:
            excluded = set(self._public_methods_with_ancestors(stop_class))
            found = [method for method in found if method not in excluded]
        return found

    def property_candidates(self, class_name: str) -> List[MethodSignature]:
        """Declared public, non-static methods: the raw material for properties."""
        return [method for method in self.methods(class_name) if not method.is_static]

    def find_declared_method(self, class_name: Optional[str], name: str,
                             parameter_types: Tuple[str, ...]) -> Optional[MethodSignature]:
        """Direct lookup of a method declared on `class_name`, whatever its visibility."""
        class_info = self.registry.get(class_name)
        if class_info is None:
            return None
        return class_info.declared_method(name, parameter_types)

    def _public_methods_with_ancestors(self, class_name: str) -> List[MethodSignature]:
        self.registry.require(class_name)
        found: List[MethodSignature] = []
        seen: Set[Tuple[str, Tuple[str, ...]]] = set()
        for type_name in [class_name] + self._walkable_supertypes(class_name):
            class_info = self.registry.get(type_name)
            if class_info is None:
                continue
            for method in class_info.methods:
                key = (method.name, method.parameter_types)
                if not method.is_public or key in seen:
                    continue
                seen.add(key)
                found.append(method)
        return found

    def _walkable_supertypes(self, class_name: str) -> List[str]:
        # make sure placeholders exist for unknown superclasses before walking the graph
        self.registry.superclass_chain(class_name)
        supertypes = self.registry.supertypes_of(class_name)
        if self.config.include_object_methods:
            return supertypes
        return [name for name in supertypes
                if self.registry.get(name) is not None and not self.registry.get(name).external]
