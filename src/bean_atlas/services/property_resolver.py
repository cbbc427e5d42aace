import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from bean_atlas.models.descriptors import IndexedPropertyDescriptor, IntrospectionError, PropertyDescriptor
from bean_atlas.models.domain_models import MethodSignature
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.models.java_types import BOOLEAN, INT, VOID, decapitalize
from bean_atlas.services.method_inventory import MethodInventory

logger = logging.getLogger(__name__)

PREFIX_GET = 'get'
PREFIX_IS = 'is'
PREFIX_SET = 'set'

ADD_PROPERTY_CHANGE_LISTENER = 'addPropertyChangeListener'
REMOVE_PROPERTY_CHANGE_LISTENER = 'removePropertyChangeListener'


@dataclass
class PropertyCandidates:
    """Getter and setter candidates collected for one property name."""
    getters: List[MethodSignature] = field(default_factory=list)
    setters: List[MethodSignature] = field(default_factory=list)
    constrained: bool = False


@dataclass
class AccessorSelection:
    """At most one accessor of each kind, picked from the candidates."""
    getter: Optional[MethodSignature] = None
    setter: Optional[MethodSignature] = None
    indexed_getter: Optional[MethodSignature] = None
    indexed_setter: Optional[MethodSignature] = None

    @property
    def presence(self) -> Tuple[bool, bool, bool, bool]:
        return (self.getter is not None, self.setter is not None,
                self.indexed_getter is not None, self.indexed_setter is not None)

    @property
    def has_normal(self) -> bool:
        return self.getter is not None or self.setter is not None

    @property
    def has_indexed(self) -> bool:
        return self.indexed_getter is not None or self.indexed_setter is not None

    @property
    def normal_type(self) -> Optional[str]:
        if self.getter is not None:
            return self.getter.return_type
        if self.setter is not None:
            return self.setter.parameter_types[0]
        return None

    @property
    def indexed_type(self) -> Optional[str]:
        if self.indexed_getter is not None:
            return self.indexed_getter.return_type
        if self.indexed_setter is not None:
            return self.indexed_setter.parameter_types[1]
        return None


@dataclass
class PropertyResolution:
    """Which accessors end up in the descriptor for one property."""
    indexed: bool = False
    getter: Optional[MethodSignature] = None
    setter: Optional[MethodSignature] = None
    indexed_getter: Optional[MethodSignature] = None
    indexed_setter: Optional[MethodSignature] = None


def _is_get_named(method: Optional[MethodSignature]) -> bool:
    return method is not None and method.name.startswith(PREFIX_GET)


def _normal_only(selection: AccessorSelection) -> PropertyResolution:
    return PropertyResolution(getter=selection.getter, setter=selection.setter)


def _indexed_only(indexed_getter: Optional[MethodSignature],
                  indexed_setter: Optional[MethodSignature]) -> PropertyResolution:
    return PropertyResolution(indexed=True, indexed_getter=indexed_getter, indexed_setter=indexed_setter)


def _normal_and_indexed(selection: AccessorSelection, indexed_getter: Optional[MethodSignature],
                        indexed_setter: Optional[MethodSignature]) -> PropertyResolution:
    return PropertyResolution(indexed=True, getter=selection.getter, setter=selection.setter,
                              indexed_getter=indexed_getter, indexed_setter=indexed_setter)


def _mixed_all_accessors(selection: AccessorSelection) -> PropertyResolution:
    if _is_get_named(selection.indexed_getter):
        return _normal_and_indexed(selection, selection.indexed_getter, selection.indexed_setter)
    if selection.normal_type != BOOLEAN and selection.getter.name.startswith(PREFIX_IS):
        return _indexed_only(None, selection.indexed_setter)
    return _normal_only(selection)


def _mixed_getter_with_indexed_pair(selection: AccessorSelection) -> PropertyResolution:
    indexed_getter = selection.indexed_getter if _is_get_named(selection.indexed_getter) else None
    return _normal_and_indexed(selection, indexed_getter, selection.indexed_setter)


def _mixed_setter_with_indexed_pair(selection: AccessorSelection) -> PropertyResolution:
    indexed_getter = selection.indexed_getter if _is_get_named(selection.indexed_getter) else None
    return _indexed_only(indexed_getter, selection.indexed_setter)


def _mixed_with_indexed_getter(selection: AccessorSelection) -> PropertyResolution:
    if _is_get_named(selection.indexed_getter):
        return _normal_and_indexed(selection, selection.indexed_getter, None)
    return _normal_only(selection)


def _mixed_with_indexed_setter(selection: AccessorSelection) -> PropertyResolution:
    return _indexed_only(None, selection.indexed_setter)


# Keyed by presence of (getter, setter, indexed getter, indexed setter).
# A complete normal pair with a partial indexed pair never gets here.
_MIXED_RULES: Dict[Tuple[bool, bool, bool, bool], Callable[[AccessorSelection], PropertyResolution]] = {
    (True, True, True, True): _mixed_all_accessors,
    (True, False, True, True): _mixed_getter_with_indexed_pair,
    (False, True, True, True): _mixed_setter_with_indexed_pair,
    (True, False, True, False): _mixed_with_indexed_getter,
    (False, True, True, False): _mixed_with_indexed_getter,
    (True, False, False, True): _mixed_with_indexed_setter,
    (False, True, False, True): _mixed_with_indexed_setter,
}


def _complete_normal_pair(selection: AccessorSelection) -> bool:
    return (selection.getter is not None and selection.setter is not None
            and (selection.indexed_getter is None or selection.indexed_setter is None))


def _normal_without_indexed(selection: AccessorSelection) -> bool:
    return selection.has_normal and not selection.has_indexed


def _mixed(selection: AccessorSelection) -> bool:
    return selection.has_normal and selection.has_indexed


def _indexed_without_normal(selection: AccessorSelection) -> bool:
    return not selection.has_normal and selection.has_indexed


def _complete_indexed_pair(selection: AccessorSelection) -> bool:
    return (selection.has_normal and selection.indexed_getter is not None
            and selection.indexed_setter is not None)


def _resolve_mixed(selection: AccessorSelection) -> Optional[PropertyResolution]:
    return _MIXED_RULES[selection.presence](selection)


def _resolve_indexed(selection: AccessorSelection) -> Optional[PropertyResolution]:
    if selection.indexed_getter is not None and selection.indexed_getter.name.startswith(PREFIX_IS):
        if selection.indexed_setter is not None:
            return _indexed_only(None, selection.indexed_setter)
        return None
    return _indexed_only(selection.indexed_getter, selection.indexed_setter)


def _resolve_complete_indexed(selection: AccessorSelection) -> Optional[PropertyResolution]:
    return _indexed_only(selection.indexed_getter, selection.indexed_setter)


# Evaluated in order, first matching rule wins.
PAIRING_RULES = [
    ("normal pair", _complete_normal_pair, _normal_only),
    ("normal only", _normal_without_indexed, _normal_only),
    ("mixed", _mixed, _resolve_mixed),
    ("indexed only", _indexed_without_normal, _resolve_indexed),
    ("indexed pair", _complete_indexed_pair, _resolve_complete_indexed),
]


def collect_getter(method: MethodSignature, table: Dict[str, PropertyCandidates]) -> None:
    """Record `method` as a getter candidate if it looks like get<X>/is<X>."""
    name = method.name
    prefix_length = 0
    if name.startswith(PREFIX_GET):
        prefix_length = len(PREFIX_GET)
    if name.startswith(PREFIX_IS):
        prefix_length = len(PREFIX_IS)
    if prefix_length == 0:
        return

    property_name = decapitalize(name[prefix_length:])
    if not property_name:
        return
    if not method.return_type or method.return_type == VOID:
        return
    if prefix_length == len(PREFIX_IS) and method.return_type != BOOLEAN:
        return

    params = method.parameter_types
    if len(params) > 1 or (len(params) == 1 and params[0] != INT):
        return

    table.setdefault(property_name, PropertyCandidates()).getters.append(method)


def collect_setter(method: MethodSignature, table: Dict[str, PropertyCandidates],
                   veto_exception: str) -> None:
    """Record `method` as a setter candidate if it looks like set<X>."""
    if method.return_type != VOID or not method.name.startswith(PREFIX_SET):
        return

    property_name = decapitalize(method.name[len(PREFIX_SET):])
    if not property_name:
        return

    params = method.parameter_types
    if not params or len(params) > 2 or (len(params) == 2 and params[0] != INT):
        return

    candidates = table.setdefault(property_name, PropertyCandidates())
    if method.declares_exception(veto_exception):
        candidates.constrained = True
    candidates.setters.append(method)


def select_accessors(candidates: PropertyCandidates) -> AccessorSelection:
    """Pick at most one normal and one indexed accessor of each kind."""
    selection = AccessorSelection()

    for getter in candidates.getters:
        if not getter.parameter_types:
            # boolean "is" getters take priority once discovered
            if selection.getter is None or getter.name.startswith(PREFIX_IS):
                selection.getter = getter
        elif getter.parameter_types == (INT,):
            current = selection.indexed_getter
            if (current is None or getter.name.startswith(PREFIX_GET)
                    or (getter.name.startswith(PREFIX_IS) and not current.name.startswith(PREFIX_GET))):
                selection.indexed_getter = getter

    if selection.getter is not None:
        property_type = selection.getter.return_type
        for setter in candidates.setters:
            if setter.parameter_types == (property_type,):
                selection.setter = setter
                break
    else:
        for setter in candidates.setters:
            if len(setter.parameter_types) == 1:
                selection.setter = setter

    if selection.indexed_getter is not None:
        indexed_type = selection.indexed_getter.return_type
        for setter in candidates.setters:
            if setter.parameter_types == (INT, indexed_type):
                selection.indexed_setter = setter
                break
    else:
        for setter in candidates.setters:
            if len(setter.parameter_types) == 2 and setter.parameter_types[0] == INT:
                selection.indexed_setter = setter

    return selection


def resolve_pairing(selection: AccessorSelection) -> Optional[PropertyResolution]:
    """Apply the pairing rules; None means the property is invalid."""
    for rule_name, matches, resolve in PAIRING_RULES:
        if matches(selection):
            resolution = resolve(selection)
            logger.debug(f"Pairing rule '{rule_name}' matched {selection.presence}")
            return resolution
    return None


class PropertyResolver:
    """Pairs a class's accessor methods into property descriptors."""

    def __init__(self, inventory: MethodInventory, config: Optional[IntrospectionConfig] = None):
        self.inventory = inventory
        self.config = config or IntrospectionConfig()

    def resolve(self, class_name: str, stop_class: Optional[str] = None) -> Optional[List[PropertyDescriptor]]:
        """Property descriptors of `class_name`, or None when it declares no public instance methods."""
        candidates = self.inventory.property_candidates(class_name)
        if not candidates:
            return None

        table: Dict[str, PropertyCandidates] = {}
        for method in candidates:
            collect_getter(method, table)
            collect_setter(method, table, self.config.property_veto_exception)

        bound = self._supports_property_change(class_name, stop_class)
        properties = []
        for property_name, property_candidates in table.items():
            selection = select_accessors(property_candidates)
            resolution = resolve_pairing(selection)
            if resolution is None:
                logger.debug(f"Dropping property {property_name} of {class_name}: no valid pairing")
                continue
            descriptor = self._build_descriptor(class_name, property_name, resolution)
            if descriptor is None:
                continue
            descriptor.bound = bound
            if property_candidates.constrained:
                descriptor.constrained = True
            properties.append(descriptor)
        return properties

    def _build_descriptor(self, class_name: str, property_name: str,
                          resolution: PropertyResolution) -> Optional[PropertyDescriptor]:
        boolean_setter = self._boolean_setter_fallback(class_name, resolution)
        try:
            if boolean_setter is not None:
                return PropertyDescriptor(property_name, None, boolean_setter)
            if not resolution.indexed:
                return PropertyDescriptor(property_name, resolution.getter, resolution.setter)
            try:
                return IndexedPropertyDescriptor(property_name, resolution.getter, resolution.setter,
                                                 resolution.indexed_getter, resolution.indexed_setter)
            except IntrospectionError as e:
                logger.debug(f"Falling back to indexed accessors only for {property_name}: {e}")
                return IndexedPropertyDescriptor(property_name, None, None,
                                                 resolution.indexed_getter, resolution.indexed_setter)
        except IntrospectionError as e:
            logger.warning(f"Dropping property {property_name} of {class_name}: {e}")
            return None

    def _boolean_setter_fallback(self, class_name: str,
                                 resolution: PropertyResolution) -> Optional[MethodSignature]:
        """A boolean indexed setter can stand for a plain `<setterName>(boolean)` declared on the class.

        When that setter exists it replaces the whole indexed pair, indexed getter included.
        """
        indexed_setter = resolution.indexed_setter
        if (not resolution.indexed or indexed_setter is None
                or resolution.getter is not None or resolution.setter is not None):
            return None
        if indexed_setter.parameter_types[1] != BOOLEAN:
            return None
        return self.inventory.find_declared_method(class_name, indexed_setter.name, (BOOLEAN,))

    def _supports_property_change(self, class_name: str, stop_class: Optional[str]) -> bool:
        listener_type = self.config.property_change_listener_type
        can_add = can_remove = False
        for method in self.inventory.methods(class_name, include_ancestors=True, stop_class=stop_class):
            if method.matches(ADD_PROPERTY_CHANGE_LISTENER, (listener_type,)):
                can_add = True
            elif method.matches(REMOVE_PROPERTY_CHANGE_LISTENER, (listener_type,)):
                can_remove = True
        return can_add and can_remove
