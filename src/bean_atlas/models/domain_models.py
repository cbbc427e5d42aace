from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Tuple, Optional

from bean_atlas.models.java_types import simple_name, package_of

class ClassKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION = "annotation"

@dataclass(frozen=True)
class MethodSignature:
    """A method as seen by introspection: name, erased types and modifiers.

    Two signatures are equal only when every field matches, which makes
    equality behave like method identity (same declaring class, same name,
    same parameter and return types).
    """
    name: str
    parameter_types: Tuple[str, ...]
    return_type: str
    declaring_class: str
    modifiers: Tuple[str, ...] = ('public',)
    exception_types: Tuple[str, ...] = ()

    @property
    def is_public(self) -> bool:
        return 'public' in self.modifiers

    @property
    def is_static(self) -> bool:
        return 'static' in self.modifiers

    @property
    def qualified_name(self) -> str:
        """Overload-aware key: the name followed by `_<type>` per parameter."""
        return self.name + ''.join(f"_{param}" for param in self.parameter_types)

    def matches(self, name: str, parameter_types: Tuple[str, ...]) -> bool:
        return self.name == name and self.parameter_types == tuple(parameter_types)

    def declares_exception(self, exception_type: str) -> bool:
        return exception_type in self.exception_types

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "parameter_types": list(self.parameter_types),
            "return_type": self.return_type,
            "declaring_class": self.declaring_class,
            "modifiers": list(self.modifiers),
            "exception_types": list(self.exception_types),
        }

@dataclass
class ClassInfo:
    name: str
    kind: ClassKind = ClassKind.CLASS
    superclass: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    methods: List[MethodSignature] = field(default_factory=list)
    modifiers: Tuple[str, ...] = ('public',)
    file_path: Optional[str] = None
    outer_class: Optional[str] = None
    package: Optional[str] = None
    external: bool = False

    def __post_init__(self):
        # nested classes carry their package explicitly; "a.b.Outer.Inner" is ambiguous
        if self.package is None:
            self.package = package_of(self.name)

    @property
    def simple_name(self) -> str:
        return simple_name(self.name)

    @property
    def is_interface(self) -> bool:
        return self.kind in (ClassKind.INTERFACE, ClassKind.ANNOTATION)

    @property
    def is_nested(self) -> bool:
        return self.outer_class is not None

    def declared_method(self, name: str, parameter_types: Tuple[str, ...]) -> Optional[MethodSignature]:
        """Look up a method declared directly on this class, of any visibility."""
        for method in self.methods:
            if method.matches(name, parameter_types):
                return method
        return None

    def to_dict(self) -> Dict:
        """Convert ClassInfo to a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "simple_name": self.simple_name,
            "package": self.package,
            "kind": self.kind.value,
            "superclass": self.superclass,
            "interfaces": list(self.interfaces),
            "modifiers": list(self.modifiers),
            "file_path": self.file_path,
            "outer_class": self.outer_class,
            "external": self.external,
            "methods": [method.to_dict() for method in self.methods],
        }
