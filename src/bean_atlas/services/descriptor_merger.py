import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from bean_atlas.models.descriptors import (
    EventSetDescriptor,
    FeatureDescriptor,
    IndexedPropertyDescriptor,
    IntrospectionError,
    MethodDescriptor,
    PropertyDescriptor,
)
from bean_atlas.models.java_types import BOOLEAN, VOID, capitalize, component_type, is_array
from bean_atlas.services.class_registry import ClassRegistry
from bean_atlas.services.method_inventory import MethodInventory
from bean_atlas.services.property_resolver import PREFIX_GET, PREFIX_IS, PREFIX_SET

logger = logging.getLogger(__name__)

NORMAL = 'normal'
INDEXED = 'indexed'


def valid_index(index: Optional[int], descriptors: Optional[Sequence]) -> Optional[int]:
    """Return `index` if it addresses an element of `descriptors`, else None."""
    if index is None or descriptors is None or not 0 <= index < len(descriptors):
        return None
    return index


def _default_name(own: Sequence[FeatureDescriptor], own_default: Optional[int],
                  inherited: Sequence[FeatureDescriptor], inherited_default: Optional[int]) -> Optional[str]:
    if valid_index(own_default, own) is not None:
        return own[own_default].name
    if valid_index(inherited_default, inherited) is not None:
        return inherited[inherited_default].name
    return None


def _index_of(name: Optional[str], descriptors: Sequence[FeatureDescriptor]) -> Optional[int]:
    if name is None:
        return None
    for index, descriptor in enumerate(descriptors):
        if descriptor.name == name:
            return index
    return None


def _kind(descriptor: PropertyDescriptor) -> str:
    return INDEXED if descriptor.is_indexed else NORMAL


class DescriptorMerger:
    """Merges descriptors inherited from an ancestor into a bean's own descriptors.

    Inherited descriptors are copied before they are stored or modified, so
    the ancestor's metadata is never touched.
    """

    def __init__(self, bean_class: str, registry: ClassRegistry, inventory: MethodInventory):
        self.bean_class = bean_class
        self.registry = registry
        self.inventory = inventory

    def merge_methods(self, own: List[MethodDescriptor],
                      inherited: Sequence[MethodDescriptor]) -> List[MethodDescriptor]:
        merged: Dict[str, MethodDescriptor] = {descriptor.method.qualified_name: descriptor for descriptor in own}
        for descriptor in inherited:
            key = descriptor.method.qualified_name
            existing = merged.get(key)
            if existing is None:
                merged[key] = descriptor.copy()
            else:
                existing.merge(descriptor)
        return list(merged.values())

    def merge_events(self, own: List[EventSetDescriptor], own_default: Optional[int],
                     inherited: Sequence[EventSetDescriptor], inherited_default: Optional[int],
                     explicit: bool) -> Tuple[List[EventSetDescriptor], Optional[int]]:
        default_name = _default_name(own, own_default, inherited, inherited_default)
        merged: Dict[str, EventSetDescriptor] = {descriptor.name: descriptor for descriptor in own}
        for descriptor in inherited:
            existing = merged.get(descriptor.name)
            if existing is None:
                merged[descriptor.name] = descriptor.copy()
            else:
                existing.merge(descriptor)

        events = list(merged.values())
        default_index = own_default
        if default_name is not None and not explicit:
            default_index = _index_of(default_name, events)
        return events, default_index

    def merge_properties(self, own: List[PropertyDescriptor], own_default: Optional[int],
                         inherited: Sequence[PropertyDescriptor], inherited_default: Optional[int],
                         explicit: bool) -> Tuple[List[PropertyDescriptor], Optional[int]]:
        default_name = _default_name(own, own_default, inherited, inherited_default)
        merged: Dict[str, PropertyDescriptor] = {descriptor.name: descriptor for descriptor in own}
        for ancestor in inherited:
            current = merged.get(ancestor.name)
            if current is None:
                merged[ancestor.name] = ancestor.copy()
                continue
            merged[ancestor.name] = self.merge_property(current, ancestor)

        properties = list(merged.values())
        default_index = own_default
        if default_name is not None and not explicit:
            default_index = _index_of(default_name, properties)
        return properties, default_index

    def merge_property(self, own: PropertyDescriptor, ancestor: PropertyDescriptor) -> PropertyDescriptor:
        """Reconcile two descriptors of the same property; returns the one to keep."""
        reconcile = self._PROPERTY_RULES[(_kind(own), _kind(ancestor))]
        try:
            merged = reconcile(self, own, ancestor)
        except IntrospectionError as e:
            logger.warning(f"Keeping own descriptor of {own.name} in {self.bean_class}: {e}")
            merged = own
        if merged is not own:
            merged.merge_attributes(own)
        # merge_attributes also takes the ancestor's name
        merged.merge_attributes(ancestor)
        return merged

    def _merge_normal_into_normal(self, own: PropertyDescriptor,
                                  ancestor: PropertyDescriptor) -> PropertyDescriptor:
        own_get, own_set = own.read_method, own.write_method
        ancestor_get, ancestor_set = ancestor.read_method, ancestor.write_method
        own_type, ancestor_type = own.property_type, ancestor.property_type

        if own_type is not None and own_type == ancestor_type:
            if ancestor_get is not None and (own_get is None or ancestor_get == own_get):
                own.set_read_method(ancestor_get)
            if ancestor_set is not None and (own_set is None or ancestor_set == own_set):
                own.set_write_method(ancestor_set)
            if (own_type == BOOLEAN and own_get is not None and ancestor_get is not None
                    and ancestor_get.name.startswith(PREFIX_IS)):
                own.set_read_method(ancestor_get)
            return own

        if (own_get is None or own_set is None) and ancestor_get is not None:
            rebuilt = PropertyDescriptor(ancestor.name, ancestor_get, ancestor_set)
            if own_get is not None:
                for method in self.inventory.methods(self.bean_class):
                    if (method != own_get and method.name == own_get.name
                            and not method.parameter_types and method.return_type == ancestor_type):
                        rebuilt.set_read_method(method)
                        break
            return rebuilt
        return own

    def _merge_normal_into_indexed(self, own: IndexedPropertyDescriptor,
                                   ancestor: PropertyDescriptor) -> PropertyDescriptor:
        own_get, own_set = own.read_method, own.write_method
        ancestor_get, ancestor_set = ancestor.read_method, ancestor.write_method
        ancestor_type = ancestor.property_type
        own_indexed_type = own.indexed_property_type

        if is_array(ancestor_type) and component_type(ancestor_type) == own_indexed_type:
            if own_get is None and ancestor_get is not None:
                own.set_read_method(ancestor_get)
            if own_set is None and ancestor_set is not None:
                own.set_write_method(ancestor_set)

        if own_indexed_type == BOOLEAN and ancestor_type == BOOLEAN:
            indexed_setter = own.indexed_write_method
            if own_get is None and own_set is None and indexed_setter is not None and ancestor_get is not None:
                boolean_setter = self.inventory.find_declared_method(self.bean_class, indexed_setter.name,
                                                                     (BOOLEAN,))
                if boolean_setter is not None:
                    return PropertyDescriptor(own.name, ancestor_get, boolean_setter)
        return own

    def _merge_indexed_into_normal(self, own: PropertyDescriptor,
                                   ancestor: IndexedPropertyDescriptor) -> PropertyDescriptor:
        own_get, own_set = own.read_method, own.write_method
        own_type = own.property_type

        if is_array(own_type) and component_type(own_type) == ancestor.indexed_property_type:
            merged = ancestor.copy()
            if own_get is not None:
                merged.set_read_method(own_get)
            if own_set is not None:
                merged.set_write_method(own_set)
            return merged

        if own_get is None or own_set is None:
            self._fill_from_direct_superclass(own)
        return own

    def _merge_indexed_into_indexed(self, own: IndexedPropertyDescriptor,
                                    ancestor: IndexedPropertyDescriptor) -> PropertyDescriptor:
        if own.indexed_property_type != ancestor.indexed_property_type:
            return own
        if own.read_method is None and ancestor.read_method is not None:
            own.set_read_method(ancestor.read_method)
        if own.write_method is None and ancestor.write_method is not None:
            own.set_write_method(ancestor.write_method)
        if own.indexed_read_method is None and ancestor.indexed_read_method is not None:
            own.set_indexed_read_method(ancestor.indexed_read_method)
        if own.indexed_write_method is None and ancestor.indexed_write_method is not None:
            own.set_indexed_write_method(ancestor.indexed_write_method)
        return own

    def _fill_from_direct_superclass(self, own: PropertyDescriptor) -> None:
        """Complete a half-paired property with accessors declared on the bean's superclass."""
        superclass = self.registry.superclass_of(self.bean_class)
        if superclass is None:
            return
        own_type = own.property_type
        suffix = capitalize(own.name)
        if own.read_method is None:
            prefix = PREFIX_IS if own_type == BOOLEAN else PREFIX_GET
            method = self.inventory.find_declared_method(superclass, prefix + suffix, ())
            if method is not None and not method.is_static and method.return_type == own_type:
                own.set_read_method(method)
        else:
            method = self.inventory.find_declared_method(superclass, PREFIX_SET + suffix, (own_type,))
            if method is not None and not method.is_static and method.return_type == VOID:
                own.set_write_method(method)

    _PROPERTY_RULES: Dict[Tuple[str, str], Callable] = {
        (NORMAL, NORMAL): _merge_normal_into_normal,
        (INDEXED, NORMAL): _merge_normal_into_indexed,
        (NORMAL, INDEXED): _merge_indexed_into_normal,
        (INDEXED, INDEXED): _merge_indexed_into_indexed,
    }
