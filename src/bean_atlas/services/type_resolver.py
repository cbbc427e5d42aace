from abc import ABC, abstractmethod
import re
from typing import Dict, Iterable, List, Optional, Sequence, Set

from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.models.java_types import ARRAY_SUFFIX, OBJECT

_ANNOTATION = re.compile(r'@[\w.]+(\s*\([^)]*\))?\s*')
_DIMENSION = re.compile(r'\[\s*\]')


class BaseTypeResolver(ABC):
    """Abstract base class for type resolvers across different languages."""

    @abstractmethod
    def resolve_type_name(self, type_name: str, imports: dict, package: str,
                          enclosing_classes: Sequence[str] = (),
                          type_variables: Optional[Dict[str, str]] = None) -> str:
        """Resolve a type name to its erased, fully qualified name."""
        pass


class JavaTypeResolver(BaseTypeResolver):
    """Resolves Java source types to erased fully qualified names.

    Generic arguments are dropped, type variables become their first bound
    (or java.lang.Object) and varargs become arrays. Simple names are looked
    up in enclosing classes, single-type imports, the current package,
    on-demand imports and java.lang, in that order.
    """

    def __init__(self, config: IntrospectionConfig, class_cache: Set[str],
                 known_types: Iterable[str] = ()):
        self.config = config
        self.class_cache = class_cache
        self.known_types = set(known_types)

    def resolve_type_name(self, type_name: str, imports: dict, package: str,
                          enclosing_classes: Sequence[str] = (),
                          type_variables: Optional[Dict[str, str]] = None) -> str:
        """Resolve type name to its erased fully qualified name."""
        if not type_name:
            return ""

        type_name = _ANNOTATION.sub('', type_name).strip()
        dimensions = 0
        if type_name.endswith('...'):
            dimensions += 1
            type_name = type_name[:-3].strip()

        base_type = self.erase_generics(type_name)
        dimensions += len(_DIMENSION.findall(base_type))
        base_type = _DIMENSION.sub('', base_type).strip()

        resolved = self._resolve_base_type(base_type, imports, package, enclosing_classes, type_variables or {})
        return resolved + ARRAY_SUFFIX * dimensions

    def _resolve_base_type(self, base_type: str, imports: dict, package: str,
                           enclosing_classes: Sequence[str], type_variables: Dict[str, str]) -> str:
        if base_type in self.config.primitive_types:
            return base_type
        if base_type in type_variables:
            return type_variables[base_type]

        if '.' in base_type:
            head, rest = base_type.split('.', 1)
            if head[:1].isupper():
                resolved_head = self._resolve_simple_name(head, imports, package, enclosing_classes)
                if resolved_head is not None:
                    return f"{resolved_head}.{rest}"
            return base_type

        resolved = self._resolve_simple_name(base_type, imports, package, enclosing_classes)
        if resolved is not None:
            return resolved
        # an unknown simple name can only come from the current package
        return f"{package}.{base_type}" if package else base_type

    def _resolve_simple_name(self, name: str, imports: dict, package: str,
                             enclosing_classes: Sequence[str]) -> Optional[str]:
        for outer in enclosing_classes:
            nested = f"{outer}.{name}"
            if nested in self.class_cache:
                return nested
        if name in imports:
            return imports[name]
        same_package_type = f"{package}.{name}" if package else name
        if same_package_type in self.class_cache:
            return same_package_type
        resolved = self._resolve_from_wildcard_imports(name, imports)
        if resolved:
            return resolved
        if name in self.config.java_lang_types:
            return f"java.lang.{name}"
        return None

    def parse_type_parameters(self, type_parameters: str, imports: dict, package: str,
                              enclosing_classes: Sequence[str] = (),
                              type_variables: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Map each declared type variable of "<T extends A & B, U>" to its erasure."""
        erasures = dict(type_variables or {})
        content = type_parameters.strip()
        if content.startswith('<'):
            end = self.find_matching_bracket(content, 0)
            content = content[1:end] if end != -1 else content[1:]
        for part in self.split_by_top_level_comma(content):
            part = _ANNOTATION.sub('', part).strip()
            match = re.match(r'^(\w+)(?:\s+extends\s+(.+))?$', part, re.DOTALL)
            if not match:
                continue
            variable, bounds = match.group(1), match.group(2)
            erasure = OBJECT
            if bounds:
                first_bound = self.split_by_top_level(bounds, '&')[0]
                erasure = self.resolve_type_name(first_bound, imports, package, enclosing_classes, erasures)
            erasures[variable] = erasure
        return erasures

    def erase_generics(self, type_name: str) -> str:
        """Drop every <...> group, including the ones inside qualified names."""
        erased = ""
        pos = 0
        while pos < len(type_name):
            if type_name[pos] == '<':
                end = self.find_matching_bracket(type_name, pos)
                if end == -1:
                    break
                pos = end + 1
                continue
            erased += type_name[pos]
            pos += 1
        return re.sub(r'\s*\.\s*', '.', erased).strip()

    def find_matching_bracket(self, text: str, start_pos: int) -> int:
        if start_pos >= len(text) or text[start_pos] != '<':
            return -1
        bracket_count = 1
        pos = start_pos + 1
        while pos < len(text) and bracket_count > 0:
            if text[pos] == '<':
                bracket_count += 1
            elif text[pos] == '>':
                bracket_count -= 1
            pos += 1
        return pos - 1 if bracket_count == 0 else -1

    def split_by_top_level_comma(self, content: str) -> List[str]:
        return self.split_by_top_level(content, ',')

    def split_by_top_level(self, content: str, separator: str) -> List[str]:
        parts = []
        current_part = ""
        bracket_depth = 0
        for char in content:
            if char == '<':
                bracket_depth += 1
                current_part += char
            elif char == '>':
                bracket_depth -= 1
                current_part += char
            elif char == separator and bracket_depth == 0:
                if current_part.strip():
                    parts.append(current_part.strip())
                current_part = ""
            else:
                current_part += char
        if current_part.strip():
            parts.append(current_part.strip())
        return parts

    def _resolve_from_wildcard_imports(self, class_name: str, imports: dict) -> Optional[str]:
        if not class_name or not class_name[0].isupper():
            return None
        wildcard_packages = [import_path for import_key, import_path in imports.items()
                             if import_key.startswith('*')]
        for package in wildcard_packages:
            potential_full_name = f"{package}.{class_name}"
            if (potential_full_name in self.class_cache or potential_full_name in self.known_types
                    or self._is_known_java_class(package, class_name)):
                return potential_full_name
        return None

    def _is_known_java_class(self, package: str, class_name: str) -> bool:
        java_classes = {
            'java.util': {
                'List', 'Set', 'Map', 'Collection', 'ArrayList', 'LinkedList', 'HashSet',
                'TreeSet', 'HashMap', 'TreeMap', 'LinkedHashMap', 'Vector', 'Stack',
                'Queue', 'Deque', 'Optional', 'Iterator', 'Date', 'Calendar', 'Locale',
                'EventListener', 'EventObject', 'TooManyListenersException', 'Properties'
            },
            'java.io': {
                'File', 'InputStream', 'OutputStream', 'Reader', 'Writer', 'IOException',
                'Serializable'
            },
            'java.beans': {
                'PropertyChangeListener', 'PropertyChangeEvent', 'PropertyChangeSupport',
                'PropertyVetoException', 'VetoableChangeListener', 'VetoableChangeSupport'
            },
            'java.awt.event': {
                'ActionListener', 'ActionEvent', 'MouseListener', 'MouseEvent', 'KeyListener', 'KeyEvent'
            },
            'javax.swing.event': {
                'ChangeListener', 'ChangeEvent'
            },
            'java.time': {
                'LocalDate', 'LocalTime', 'LocalDateTime', 'ZonedDateTime', 'Instant',
                'Duration', 'Period'
            }
        }
        return package in java_classes and class_name in java_classes[package]
