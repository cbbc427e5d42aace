from typing import Optional

PRIMITIVE_TYPES = frozenset({
    'byte', 'short', 'int', 'long', 'float', 'double', 'boolean', 'char', 'void'
})

INT = 'int'
BOOLEAN = 'boolean'
VOID = 'void'
OBJECT = 'java.lang.Object'

ARRAY_SUFFIX = '[]'


def is_array(type_name: Optional[str]) -> bool:
    return bool(type_name) and type_name.endswith(ARRAY_SUFFIX)


def component_type(type_name: Optional[str]) -> Optional[str]:
    """Return the component type of an array type, or None for non-arrays."""
    if not is_array(type_name):
        return None
    return type_name[:-len(ARRAY_SUFFIX)]


def array_of(type_name: str) -> str:
    return type_name + ARRAY_SUFFIX


def simple_name(type_name: str) -> str:
    return type_name.rsplit('.', 1)[-1]


def package_of(type_name: str) -> str:
    return type_name.rsplit('.', 1)[0] if '.' in type_name else ''


def decapitalize(name: str) -> str:
    """Lower-case the first character, unless the first two are both upper case.

    "FooBah" becomes "fooBah" and "X" becomes "x", but "URL" stays "URL".
    """
    if not name:
        return name
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[0].lower() + name[1:]


def capitalize(name: Optional[str]) -> Optional[str]:
    """Upper-case the first character, unless the second one is upper case."""
    if name is None:
        return None
    if not name or (len(name) > 1 and name[1].isupper()):
        return name
    return name[0].upper() + name[1:]


def property_sort_key(descriptor) -> str:
    return descriptor.name
