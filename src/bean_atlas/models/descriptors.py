import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from bean_atlas.models.domain_models import MethodSignature
from bean_atlas.models.java_types import INT, VOID, array_of, simple_name


class IntrospectionError(Exception):
    """Raised when introspection cannot produce a consistent descriptor."""


def _signature_dict(method: Optional[MethodSignature]) -> Optional[Dict]:
    return method.to_dict() if method else None


class FeatureDescriptor:
    """Common display attributes shared by every descriptor kind."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.display_name: Optional[str] = None
        self.short_description: Optional[str] = None
        self.expert = False
        self.hidden = False
        self.preferred = False
        self.values: Dict[str, Any] = {}

    def set_value(self, key: str, value: Any) -> None:
        self.values[key] = value

    def get_value(self, key: str) -> Any:
        return self.values.get(key)

    def merge(self, other: 'FeatureDescriptor') -> None:
        """Absorb `other`: missing texts are filled, flags are OR-ed."""
        if self.name is None:
            self.name = other.name
        if self.display_name is None:
            self.display_name = other.display_name
        if self.short_description is None:
            self.short_description = other.short_description
        self.expert |= other.expert
        self.hidden |= other.hidden
        self.preferred |= other.preferred
        for key, value in other.values.items():
            self.values.setdefault(key, value)

    def copy(self) -> 'FeatureDescriptor':
        clone = copy.copy(self)
        clone.values = dict(self.values)
        return clone

    def _feature_dict(self) -> Dict:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "short_description": self.short_description,
            "expert": self.expert,
            "hidden": self.hidden,
            "preferred": self.preferred,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class MethodDescriptor(FeatureDescriptor):

    def __init__(self, method: MethodSignature):
        super().__init__(method.name)
        self.method = method

    def merge(self, other: 'MethodDescriptor') -> None:
        super().merge(other)
        if self.method is None:
            self.method = other.method

    def to_dict(self) -> Dict:
        data = self._feature_dict()
        data["method"] = _signature_dict(self.method)
        data["qualified_name"] = self.method.qualified_name
        return data


class PropertyDescriptor(FeatureDescriptor):
    """A named bean property with an optional read and write method.

    The property type is whatever the accessors agree on; assigning an
    accessor that disagrees with the other one raises IntrospectionError.
    """

    def __init__(self, name: str, read_method: Optional[MethodSignature] = None,
                 write_method: Optional[MethodSignature] = None):
        if not name:
            raise IntrospectionError("Property name must not be empty")
        super().__init__(name)
        self.read_method: Optional[MethodSignature] = None
        self.write_method: Optional[MethodSignature] = None
        self.bound = False
        self.constrained = False
        self.set_read_method(read_method)
        self.set_write_method(write_method)

    @property
    def property_type(self) -> Optional[str]:
        if self.read_method is not None:
            return self.read_method.return_type
        if self.write_method is not None:
            return self.write_method.parameter_types[0]
        return None

    @property
    def is_indexed(self) -> bool:
        return False

    def set_read_method(self, getter: Optional[MethodSignature]) -> None:
        if getter is not None:
            if getter.parameter_types:
                raise IntrospectionError(f"Read method {getter.name} of {self.name} must take no arguments")
            if getter.return_type == VOID:
                raise IntrospectionError(f"Read method {getter.name} of {self.name} returns void")
            if self.write_method is not None and self.write_method.parameter_types[0] != getter.return_type:
                raise IntrospectionError(f"Type mismatch between read and write methods of {self.name}")
        self.read_method = getter

    def set_write_method(self, setter: Optional[MethodSignature]) -> None:
        if setter is not None:
            if len(setter.parameter_types) != 1:
                raise IntrospectionError(f"Write method {setter.name} of {self.name} must take one argument")
            if self.read_method is not None and self.read_method.return_type != setter.parameter_types[0]:
                raise IntrospectionError(f"Type mismatch between read and write methods of {self.name}")
        self.write_method = setter

    def merge_attributes(self, other: 'PropertyDescriptor') -> None:
        """Union flags and fill texts from `other`; the name is always taken from `other`."""
        self.hidden |= other.hidden
        self.expert |= other.expert
        self.preferred |= other.preferred
        self.bound |= other.bound
        self.constrained |= other.constrained
        self.name = other.name
        if self.short_description is None and other.short_description is not None:
            self.short_description = other.short_description
        if self.display_name is None and other.display_name is not None:
            self.display_name = other.display_name

    def to_dict(self) -> Dict:
        data = self._feature_dict()
        data.update({
            "kind": "indexed" if self.is_indexed else "normal",
            "property_type": self.property_type,
            "read_method": _signature_dict(self.read_method),
            "write_method": _signature_dict(self.write_method),
            "bound": self.bound,
            "constrained": self.constrained,
        })
        return data


class IndexedPropertyDescriptor(PropertyDescriptor):
    """A property with `T get<Name>(int)` / `void set<Name>(int, T)` accessors.

    Plain accessors, when present, must agree with `T[]`.
    """

    def __init__(self, name: str, read_method: Optional[MethodSignature] = None,
                 write_method: Optional[MethodSignature] = None,
                 indexed_read_method: Optional[MethodSignature] = None,
                 indexed_write_method: Optional[MethodSignature] = None):
        self.indexed_read_method: Optional[MethodSignature] = None
        self.indexed_write_method: Optional[MethodSignature] = None
        super().__init__(name, read_method, write_method)
        self.set_indexed_read_method(indexed_read_method)
        self.set_indexed_write_method(indexed_write_method)

    @property
    def is_indexed(self) -> bool:
        return True

    @property
    def indexed_property_type(self) -> Optional[str]:
        if self.indexed_read_method is not None:
            return self.indexed_read_method.return_type
        if self.indexed_write_method is not None:
            return self.indexed_write_method.parameter_types[1]
        return None

    def _check_plain_type(self, plain_type: Optional[str], indexed_type: Optional[str]) -> None:
        if plain_type is not None and indexed_type is not None and plain_type != array_of(indexed_type):
            raise IntrospectionError(
                f"Type mismatch between plain type {plain_type} and indexed type {indexed_type} of {self.name}")

    def set_read_method(self, getter: Optional[MethodSignature]) -> None:
        super().set_read_method(getter)
        self._check_plain_type(self.property_type, self.indexed_property_type)

    def set_write_method(self, setter: Optional[MethodSignature]) -> None:
        super().set_write_method(setter)
        self._check_plain_type(self.property_type, self.indexed_property_type)

    def set_indexed_read_method(self, getter: Optional[MethodSignature]) -> None:
        if getter is not None:
            if getter.parameter_types != (INT,):
                raise IntrospectionError(f"Indexed read method {getter.name} must take a single int")
            if getter.return_type == VOID:
                raise IntrospectionError(f"Indexed read method {getter.name} returns void")
            if (self.indexed_write_method is not None
                    and self.indexed_write_method.parameter_types[1] != getter.return_type):
                raise IntrospectionError(f"Type mismatch between indexed accessors of {self.name}")
            self._check_plain_type(self.property_type, getter.return_type)
        self.indexed_read_method = getter

    def set_indexed_write_method(self, setter: Optional[MethodSignature]) -> None:
        if setter is not None:
            if len(setter.parameter_types) != 2 or setter.parameter_types[0] != INT:
                raise IntrospectionError(f"Indexed write method {setter.name} must take (int, value)")
            if (self.indexed_read_method is not None
                    and self.indexed_read_method.return_type != setter.parameter_types[1]):
                raise IntrospectionError(f"Type mismatch between indexed accessors of {self.name}")
            self._check_plain_type(self.property_type, setter.parameter_types[1])
        self.indexed_write_method = setter

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data.update({
            "indexed_property_type": self.indexed_property_type,
            "indexed_read_method": _signature_dict(self.indexed_read_method),
            "indexed_write_method": _signature_dict(self.indexed_write_method),
        })
        return data


class EventSetDescriptor(FeatureDescriptor):

    def __init__(self, name: str, listener_type: str, listener_methods: Sequence[MethodSignature],
                 add_listener_method: MethodSignature, remove_listener_method: MethodSignature,
                 get_listener_method: Optional[MethodSignature] = None):
        if add_listener_method is None or remove_listener_method is None:
            raise IntrospectionError(f"Event {name} needs both add and remove listener methods")
        super().__init__(name)
        self.listener_type = listener_type
        self.listener_methods = tuple(listener_methods)
        self.add_listener_method = add_listener_method
        self.remove_listener_method = remove_listener_method
        self.get_listener_method = get_listener_method
        self.unicast = False
        self.in_default_event_set = True

    def merge(self, other: 'EventSetDescriptor') -> None:
        super().merge(other)
        if self.add_listener_method is None:
            self.add_listener_method = other.add_listener_method
        if self.remove_listener_method is None:
            self.remove_listener_method = other.remove_listener_method
        if self.get_listener_method is None:
            self.get_listener_method = other.get_listener_method
        if not self.listener_methods:
            self.listener_methods = other.listener_methods
        if self.listener_type is None:
            self.listener_type = other.listener_type
        self.in_default_event_set &= other.in_default_event_set

    def to_dict(self) -> Dict:
        data = self._feature_dict()
        data.update({
            "listener_type": self.listener_type,
            "listener_methods": [method.to_dict() for method in self.listener_methods],
            "add_listener_method": _signature_dict(self.add_listener_method),
            "remove_listener_method": _signature_dict(self.remove_listener_method),
            "get_listener_method": _signature_dict(self.get_listener_method),
            "unicast": self.unicast,
            "in_default_event_set": self.in_default_event_set,
        })
        return data


class BeanDescriptor(FeatureDescriptor):

    def __init__(self, bean_class: str, customizer_class: Optional[str] = None):
        super().__init__(simple_name(bean_class))
        self.bean_class = bean_class
        self.customizer_class = customizer_class

    def to_dict(self) -> Dict:
        data = self._feature_dict()
        data["bean_class"] = self.bean_class
        data["customizer_class"] = self.customizer_class
        return data


@dataclass
class ExplicitBeanInfo:
    """Caller-supplied metadata for a class.

    Any aspect left as None is derived by introspection instead.
    """
    bean_descriptor: Optional[BeanDescriptor] = None
    property_descriptors: Optional[List[PropertyDescriptor]] = None
    method_descriptors: Optional[List[MethodDescriptor]] = None
    event_set_descriptors: Optional[List[EventSetDescriptor]] = None
    default_property_index: Optional[int] = None
    default_event_index: Optional[int] = None
    additional: Optional[List['ExplicitBeanInfo']] = None
