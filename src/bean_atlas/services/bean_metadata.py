import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from bean_atlas.models.descriptors import (
    BeanDescriptor,
    EventSetDescriptor,
    ExplicitBeanInfo,
    FeatureDescriptor,
    MethodDescriptor,
    PropertyDescriptor,
)
from bean_atlas.models.domain_models import MethodSignature
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.models.java_types import property_sort_key
from bean_atlas.services.class_registry import ClassRegistry
from bean_atlas.services.descriptor_merger import DescriptorMerger, valid_index
from bean_atlas.services.event_resolver import EventResolver
from bean_atlas.services.method_inventory import MethodInventory
from bean_atlas.services.property_resolver import PropertyResolver

logger = logging.getLogger(__name__)


def _copies(descriptors: Optional[Sequence[FeatureDescriptor]]) -> Optional[List]:
    if descriptors is None:
        return None
    return [descriptor.copy() for descriptor in descriptors]


class BeanMetadata:
    """Properties, methods and events of one bean class.

    Each aspect starts from the explicit info when one is supplied and is
    introspected from the class's public methods otherwise. Ancestor
    metadata is folded in afterwards with merge_bean_info, and finalize()
    freezes the result into its published shape.
    """

    def __init__(self, bean_class: str, registry: ClassRegistry,
                 explicit: Optional[ExplicitBeanInfo] = None,
                 stop_class: Optional[str] = None,
                 config: Optional[IntrospectionConfig] = None):
        self.bean_class = bean_class
        self.registry = registry
        self.config = config or IntrospectionConfig()
        self.inventory = MethodInventory(registry, self.config)
        self.merger = DescriptorMerger(bean_class, registry, self.inventory)

        self.property_descriptors: Optional[List[PropertyDescriptor]] = None
        self.method_descriptors: Optional[List[MethodDescriptor]] = None
        self.event_set_descriptors: Optional[List[EventSetDescriptor]] = None
        self.default_property_index: Optional[int] = None
        self.default_event_index: Optional[int] = None
        self.additional: List[ExplicitBeanInfo] = []
        self.explicit_properties = False
        self.explicit_methods = False
        self.explicit_events = False
        self.finalized = False
        self._explicit_bean_descriptor: Optional[BeanDescriptor] = None
        self._bean_descriptor: Optional[BeanDescriptor] = None

        registry.require(bean_class)
        if explicit is not None:
            self._adopt_explicit(explicit)

        if self.method_descriptors is None:
            self.method_descriptors = self.introspect_methods()
        if self.property_descriptors is None:
            self.property_descriptors = PropertyResolver(self.inventory, self.config).resolve(bean_class, stop_class)
        if self.event_set_descriptors is None:
            self.event_set_descriptors = EventResolver(registry, self.inventory, self.config).resolve(bean_class)

    @classmethod
    def build(cls, bean_class: str, registry: ClassRegistry, explicit: Optional[ExplicitBeanInfo] = None,
              stop_class: Optional[str] = None, config: Optional[IntrospectionConfig] = None) -> 'BeanMetadata':
        return cls(bean_class, registry, explicit, stop_class, config)

    def _adopt_explicit(self, explicit: ExplicitBeanInfo) -> None:
        self.property_descriptors = _copies(explicit.property_descriptors)
        self.method_descriptors = _copies(explicit.method_descriptors)
        self.event_set_descriptors = _copies(explicit.event_set_descriptors)
        self.default_property_index = valid_index(explicit.default_property_index, self.property_descriptors)
        self.default_event_index = valid_index(explicit.default_event_index, self.event_set_descriptors)
        self.additional = list(explicit.additional or [])
        self._explicit_bean_descriptor = explicit.bean_descriptor
        self.explicit_properties = self.property_descriptors is not None
        self.explicit_methods = self.method_descriptors is not None
        self.explicit_events = self.event_set_descriptors is not None

    def introspect_methods(self) -> Optional[List[MethodDescriptor]]:
        """One descriptor per declared public method, static ones included."""
        methods = self.inventory.methods(self.bean_class)
        if not methods:
            return None
        return [MethodDescriptor(method) for method in methods]

    @property
    def bean_descriptor(self) -> BeanDescriptor:
        if self._bean_descriptor is None:
            if self._explicit_bean_descriptor is not None:
                self._bean_descriptor = self._explicit_bean_descriptor.copy()
            else:
                self._bean_descriptor = BeanDescriptor(self.bean_class)
        return self._bean_descriptor

    def merge_bean_info(self, other: Union['BeanMetadata', ExplicitBeanInfo], force: bool = False) -> None:
        """Fold `other` (ancestor metadata or an additional explicit info) into this bean.

        An aspect is merged when `force` is set or when it was not explicitly
        supplied. `other` is left untouched.
        """
        logger.debug(f"Merging inherited metadata into {self.bean_class} (force={force})")
        if force or not self.explicit_properties:
            inherited = other.property_descriptors
            if inherited is not None:
                if self.property_descriptors is not None:
                    self.property_descriptors, self.default_property_index = self.merger.merge_properties(
                        self.property_descriptors, self.default_property_index,
                        inherited, other.default_property_index, self.explicit_properties)
                else:
                    self.property_descriptors = _copies(inherited)
                    self.default_property_index = valid_index(other.default_property_index, inherited)

        if force or not self.explicit_methods:
            inherited = other.method_descriptors
            if inherited is not None:
                if self.method_descriptors is not None:
                    self.method_descriptors = self.merger.merge_methods(self.method_descriptors, inherited)
                else:
                    self.method_descriptors = _copies(inherited)

        if force or not self.explicit_events:
            inherited = other.event_set_descriptors
            if inherited is not None:
                if self.event_set_descriptors is not None:
                    self.event_set_descriptors, self.default_event_index = self.merger.merge_events(
                        self.event_set_descriptors, self.default_event_index,
                        inherited, other.default_event_index, self.explicit_events)
                else:
                    self.event_set_descriptors = _copies(inherited)
                    self.default_event_index = valid_index(other.default_event_index, inherited)

    def finalize(self) -> 'BeanMetadata':
        """Replace missing aspects with empty lists and sort properties by name.

        The default property index is remapped so it still names the same
        property after sorting.
        """
        if self.event_set_descriptors is None:
            self.event_set_descriptors = []
        if self.method_descriptors is None:
            self.method_descriptors = []
        if self.property_descriptors is None:
            self.property_descriptors = []

        index = valid_index(self.default_property_index, self.property_descriptors)
        default_name = self.property_descriptors[index].name if index is not None else None
        self.property_descriptors.sort(key=property_sort_key)
        self.default_property_index = None
        if default_name is not None:
            for position, descriptor in enumerate(self.property_descriptors):
                if descriptor.name == default_name:
                    self.default_property_index = position
                    break
        self.default_event_index = valid_index(self.default_event_index, self.event_set_descriptors)
        self.finalized = True
        return self

    def find_method(self, name: str, parameter_types: Tuple[str, ...] = ()) -> Optional[MethodSignature]:
        """Signature lookup over the method descriptors, by name and parameter types."""
        for descriptor in self.method_descriptors or []:
            if descriptor.method.matches(name, parameter_types):
                return descriptor.method
        return None

    def property(self, name: str) -> Optional[PropertyDescriptor]:
        for descriptor in self.property_descriptors or []:
            if descriptor.name == name:
                return descriptor
        return None

    def event(self, name: str) -> Optional[EventSetDescriptor]:
        for descriptor in self.event_set_descriptors or []:
            if descriptor.name == name:
                return descriptor
        return None

    def to_dict(self) -> Dict:
        """Convert the metadata to a JSON-serializable dictionary."""
        return {
            "bean_class": self.bean_class,
            "bean_descriptor": self.bean_descriptor.to_dict(),
            "properties": [descriptor.to_dict() for descriptor in self.property_descriptors or []],
            "methods": [descriptor.to_dict() for descriptor in self.method_descriptors or []],
            "events": [descriptor.to_dict() for descriptor in self.event_set_descriptors or []],
            "default_property_index": self.default_property_index,
            "default_event_index": self.default_event_index,
        }

    def __repr__(self) -> str:
        return f"BeanMetadata({self.bean_class!r})"
