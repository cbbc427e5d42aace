import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from tree_sitter import Node, Parser

from bean_atlas.processors.base_processor import BaseFileProcessor
from bean_atlas.processors.tree_sitter_helpers import (
    extract_imports,
    extract_package,
    node_text,
    qualified_name,
    walk_type_declarations,
)
from bean_atlas.models.domain_models import ClassInfo, ClassKind, MethodSignature
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.models.java_types import ARRAY_SUFFIX, OBJECT
from bean_atlas.services.class_cache_builder import ClassCacheBuilder
from bean_atlas.services.type_resolver import JavaTypeResolver

logger = logging.getLogger(__name__)

_KINDS = {
    'class_declaration': ClassKind.CLASS,
    'interface_declaration': ClassKind.INTERFACE,
    'enum_declaration': ClassKind.ENUM,
    'record_declaration': ClassKind.RECORD,
    'annotation_type_declaration': ClassKind.ANNOTATION,
}

_IMPLICIT_SUPERCLASSES = {
    ClassKind.CLASS: OBJECT,
    ClassKind.ENUM: 'java.lang.Enum',
    ClassKind.RECORD: 'java.lang.Record',
}

_MODIFIER_KEYWORDS = {
    'public', 'private', 'protected', 'static', 'final', 'abstract', 'synchronized',
    'volatile', 'transient', 'native', 'default', 'strictfp', 'sealed', 'non-sealed'
}

class JavaFileProcessor(BaseFileProcessor):
    """Processor for Java source files.

    Every member type declaration (top-level or nested, but not local or
    anonymous) becomes a ClassInfo holding its declared methods as erased
    MethodSignatures.
    """

    def __init__(self, config: IntrospectionConfig, parser: Parser, known_types: Iterable[str] = ()):
        super().__init__(config, parser)
        self.known_types = set(known_types)
        self.class_cache_builder = ClassCacheBuilder(parser)

    def process_file(self, file_path: Path, class_cache: Set[str] = None) -> List[ClassInfo]:
        """Process a single Java file and return the classes it declares."""
        try:
            content = self._read_file_content(file_path)
            if not content.strip():
                return []
            return self.process_source(content, str(file_path), class_cache)
        except Exception as e:
            logger.error(f"Error processing file {file_path}: {e}")
            return []

    def process_source(self, source: str, file_path: Optional[str] = None,
                       class_cache: Set[str] = None) -> List[ClassInfo]:
        source_bytes = source.encode('utf-8')
        tree = self.parser.parse(source_bytes)
        root_node = tree.root_node

        package = extract_package(root_node, source_bytes)
        imports = extract_imports(root_node, source_bytes)
        local_classes = self.class_cache_builder.collect_class_names(root_node, source_bytes)
        type_resolver = JavaTypeResolver(self.config, set(class_cache or ()) | local_classes, self.known_types)

        classes = []
        for declaration, enclosing in walk_type_declarations(root_node):
            class_info = self._parse_declaration(declaration, enclosing, source_bytes, package, imports,
                                                 file_path, type_resolver)
            if class_info:
                classes.append(class_info)
        return classes

    def _read_file_content(self, file_path: Path) -> str:
        """Read file content with encoding fallback."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return f.read()
        except UnicodeDecodeError:
            with open(file_path, 'r', encoding='latin1') as f:
                return f.read()

    def _parse_declaration(self, declaration: Node, enclosing: Tuple[Node, ...], source_bytes: bytes,
                           package: str, imports: Dict[str, str], file_path: Optional[str],
                           type_resolver: JavaTypeResolver) -> Optional[ClassInfo]:
        """Parse a single class, interface, enum, record or annotation declaration."""
        try:
            full_class_name = qualified_name(source_bytes, package, declaration, enclosing)
            if not full_class_name:
                return None

            enclosing_names = [qualified_name(source_bytes, package, outer, enclosing[:i])
                               for i, outer in enumerate(enclosing)]
            # innermost first, so nested types shadow outer ones
            scope = [full_class_name] + list(reversed(enclosing_names))
            type_variables: Dict[str, str] = {}
            for node in enclosing + (declaration,):
                type_variables = self._declared_type_variables(node, source_bytes, imports, package,
                                                               scope, type_variables, type_resolver)

            kind = _KINDS[declaration.type]
            modifiers = self._extract_modifiers(declaration, source_bytes)
            if enclosing and _KINDS[enclosing[-1].type] in (ClassKind.INTERFACE, ClassKind.ANNOTATION):
                modifiers = self._with_implicit(modifiers, ('public', 'static'))

            superclass = None
            if kind == ClassKind.CLASS:
                superclass = self._extract_extends(declaration, source_bytes, imports, package, scope,
                                                   type_variables, type_resolver)
            if superclass is None and full_class_name != OBJECT:
                superclass = _IMPLICIT_SUPERCLASSES.get(kind)

            interfaces = self._extract_implements(declaration, source_bytes, imports, package, scope,
                                                  type_variables, type_resolver)
            methods = self._extract_class_methods(declaration, kind, full_class_name, source_bytes, imports,
                                                  package, scope, type_variables, type_resolver)

            return ClassInfo(
                name=full_class_name,
                kind=kind,
                superclass=superclass,
                interfaces=interfaces,
                methods=methods,
                modifiers=modifiers,
                file_path=file_path,
                outer_class=enclosing_names[-1] if enclosing_names else None,
                package=package,
            )
        except Exception as e:
            logger.error(f"Error parsing class node: {e}")
            return None

    def _declared_type_variables(self, declaration: Node, source_bytes: bytes, imports: Dict[str, str],
                                 package: str, scope: Sequence[str], type_variables: Dict[str, str],
                                 type_resolver: JavaTypeResolver) -> Dict[str, str]:
        type_parameters = declaration.child_by_field_name('type_parameters')
        if type_parameters is None:
            return type_variables
        return type_resolver.parse_type_parameters(node_text(source_bytes, type_parameters), imports, package,
                                                   scope, type_variables)

    def _extract_modifiers(self, node: Node, source_bytes: bytes) -> Tuple[str, ...]:
        """Extract keyword modifiers; annotations are left out."""
        modifiers = []
        for child in node.children:
            if child.type == 'modifiers':
                for modifier in child.children:
                    if modifier.type in _MODIFIER_KEYWORDS:
                        modifiers.append(node_text(source_bytes, modifier))
        return tuple(modifiers)

    def _with_implicit(self, modifiers: Tuple[str, ...], implicit: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(m for m in implicit if m not in modifiers) + modifiers

    def _extract_extends(self, declaration: Node, source_bytes: bytes, imports: Dict[str, str], package: str,
                         scope: Sequence[str], type_variables: Dict[str, str],
                         type_resolver: JavaTypeResolver) -> Optional[str]:
        superclass = declaration.child_by_field_name('superclass')
        if superclass is None:
            return None
        for type_node in superclass.named_children:
            return type_resolver.resolve_type_name(node_text(source_bytes, type_node), imports, package,
                                                   scope, type_variables)
        return None

    def _extract_implements(self, declaration: Node, source_bytes: bytes, imports: Dict[str, str],
                            package: str, scope: Sequence[str], type_variables: Dict[str, str],
                            type_resolver: JavaTypeResolver) -> Tuple[str, ...]:
        """Interfaces a class implements, or the ones an interface extends."""
        interfaces = []
        for child in declaration.children:
            if child.type not in ('super_interfaces', 'extends_interfaces'):
                continue
            for type_list in child.named_children:
                if type_list.type != 'type_list':
                    continue
                for type_node in type_list.named_children:
                    interfaces.append(type_resolver.resolve_type_name(
                        node_text(source_bytes, type_node), imports, package, scope, type_variables))
        return tuple(interfaces)

    def _member_nodes(self, declaration: Node) -> List[Node]:
        body = declaration.child_by_field_name('body')
        if body is None:
            return []
        members = []
        for child in body.named_children:
            if child.type == 'enum_body_declarations':
                members.extend(child.named_children)
            else:
                members.append(child)
        return members

    def _extract_class_methods(self, declaration: Node, kind: ClassKind, full_class_name: str,
                               source_bytes: bytes, imports: Dict[str, str], package: str,
                               scope: Sequence[str], type_variables: Dict[str, str],
                               type_resolver: JavaTypeResolver) -> List[MethodSignature]:
        """Extract ONLY methods that belong directly to this type. Constructors are not methods."""
        implicitly_public = kind in (ClassKind.INTERFACE, ClassKind.ANNOTATION)
        methods = []
        for member in self._member_nodes(declaration):
            if member.type not in ('method_declaration', 'annotation_type_element_declaration'):
                continue
            method = self._process_method_node(member, full_class_name, implicitly_public, source_bytes,
                                               imports, package, scope, type_variables, type_resolver)
            if method:
                methods.append(method)

        if kind == ClassKind.RECORD:
            methods.extend(self._record_accessors(declaration, full_class_name, methods, source_bytes,
                                                  imports, package, scope, type_variables, type_resolver))
        return methods

    def _process_method_node(self, method_node: Node, full_class_name: str, implicitly_public: bool,
                             source_bytes: bytes, imports: Dict[str, str], package: str,
                             scope: Sequence[str], type_variables: Dict[str, str],
                             type_resolver: JavaTypeResolver) -> Optional[MethodSignature]:
        """Process a single method declaration into its erased signature."""
        try:
            name_node = method_node.child_by_field_name('name')
            type_node = method_node.child_by_field_name('type')
            if name_node is None or type_node is None:
                return None

            modifiers = self._extract_modifiers(method_node, source_bytes)
            if implicitly_public and 'private' not in modifiers:
                modifiers = self._with_implicit(modifiers, ('public',))
            method_variables = self._declared_type_variables(method_node, source_bytes, imports, package,
                                                             scope, type_variables, type_resolver)

            return_type = type_resolver.resolve_type_name(node_text(source_bytes, type_node), imports, package,
                                                          scope, method_variables)
            return_type += ARRAY_SUFFIX * self._dimension_count(method_node, source_bytes)
            parameters = self._extract_method_parameters(method_node, source_bytes, imports, package,
                                                         scope, method_variables, type_resolver)
            throws = self._extract_throws(method_node, source_bytes, imports, package, scope,
                                          method_variables, type_resolver)
            return MethodSignature(
                name=node_text(source_bytes, name_node),
                parameter_types=tuple(parameters),
                return_type=return_type,
                declaring_class=full_class_name,
                modifiers=modifiers,
                exception_types=tuple(throws),
            )
        except Exception as e:
            logger.debug(f"Error processing method node: {e}")
            return None

    def _dimension_count(self, node: Node, source_bytes: bytes) -> int:
        dimensions = node.child_by_field_name('dimensions')
        if dimensions is None:
            return 0
        return node_text(source_bytes, dimensions).count('[')

    def _extract_method_parameters(self, method_node: Node, source_bytes: bytes, imports: Dict[str, str],
                                   package: str, scope: Sequence[str], type_variables: Dict[str, str],
                                   type_resolver: JavaTypeResolver) -> List[str]:
        """Extract erased parameter types; varargs become arrays."""
        parameters_node = method_node.child_by_field_name('parameters')
        if parameters_node is None:
            return []
        parameter_types = []
        for child in parameters_node.named_children:
            if child.type == 'formal_parameter':
                type_text = node_text(source_bytes, child.child_by_field_name('type'))
                resolved = type_resolver.resolve_type_name(type_text, imports, package, scope, type_variables)
                parameter_types.append(resolved + ARRAY_SUFFIX * self._dimension_count(child, source_bytes))
            elif child.type == 'spread_parameter':
                for part in child.named_children:
                    if part.type not in ('modifiers', 'variable_declarator'):
                        type_text = node_text(source_bytes, part) + '...'
                        parameter_types.append(type_resolver.resolve_type_name(
                            type_text, imports, package, scope, type_variables))
                        break
        return parameter_types

    def _extract_throws(self, method_node: Node, source_bytes: bytes, imports: Dict[str, str], package: str,
                        scope: Sequence[str], type_variables: Dict[str, str],
                        type_resolver: JavaTypeResolver) -> List[str]:
        """Extract throws clause."""
        throws = []
        for child in method_node.children:
            if child.type == 'throws':
                for exception_node in child.named_children:
                    throws.append(type_resolver.resolve_type_name(
                        node_text(source_bytes, exception_node), imports, package, scope, type_variables))
                break
        return throws

    def _record_accessors(self, declaration: Node, full_class_name: str, declared: List[MethodSignature],
                          source_bytes: bytes, imports: Dict[str, str], package: str,
                          scope: Sequence[str], type_variables: Dict[str, str],
                          type_resolver: JavaTypeResolver) -> List[MethodSignature]:
        """Implicit public accessors of record components not declared explicitly."""
        components = declaration.child_by_field_name('parameters')
        if components is None:
            return []
        accessors = []
        for component in components.named_children:
            if component.type != 'formal_parameter':
                continue
            name = node_text(source_bytes, component.child_by_field_name('name'))
            if any(method.matches(name, ()) for method in declared):
                continue
            component_type = type_resolver.resolve_type_name(
                node_text(source_bytes, component.child_by_field_name('type')), imports, package,
                scope, type_variables)
            accessors.append(MethodSignature(name, (), component_type, full_class_name, ('public',)))
        return accessors
