import re
from typing import Dict, Iterator, Optional, Tuple

import tree_sitter_java
from tree_sitter import Language, Node, Parser

TYPE_DECLARATIONS = frozenset({
    'class_declaration', 'interface_declaration', 'enum_declaration',
    'record_declaration', 'annotation_type_declaration'
})

# Bodies whose direct children can be member type declarations. Method bodies
# are absent on purpose: local and anonymous classes are not members.
TYPE_BODIES = frozenset({
    'class_body', 'interface_body', 'enum_body', 'enum_body_declarations', 'annotation_type_body'
})


def load_java_language() -> Language:
    """Load the Java grammar shipped by the tree-sitter-java wheel."""
    return Language(tree_sitter_java.language())


def create_parser(language: Optional[Language] = None) -> Parser:
    return Parser(language or load_java_language())


def node_text(source_bytes: bytes, node: Optional[Node]) -> str:
    """
    Converts a node's [start_byte:end_byte] into the corresponding string.
    Tree-sitter nodes only store byte offsets, so we slice the source bytes.
    """
    if node is None:
        return ""
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def declaration_name(source_bytes: bytes, declaration: Node) -> Optional[str]:
    name_node = declaration.child_by_field_name('name')
    if name_node is None:
        return None
    return node_text(source_bytes, name_node)


def walk_type_declarations(node: Node, enclosing: Tuple[Node, ...] = ()) -> Iterator[Tuple[Node, Tuple[Node, ...]]]:
    """Yield every member type declaration with its enclosing declarations, outermost first."""
    for child in node.named_children:
        if child.type in TYPE_DECLARATIONS:
            yield child, enclosing
            body = child.child_by_field_name('body')
            if body is not None:
                yield from walk_type_declarations(body, enclosing + (child,))
        elif child.type in TYPE_BODIES:
            yield from walk_type_declarations(child, enclosing)


def extract_package(root_node: Node, source_bytes: bytes) -> str:
    for child in root_node.named_children:
        if child.type == 'package_declaration':
            for part in child.named_children:
                if part.type in ('scoped_identifier', 'identifier'):
                    return node_text(source_bytes, part)
    return ""


def extract_imports(root_node: Node, source_bytes: bytes) -> Dict[str, str]:
    """Single-type imports keyed by simple name, on-demand imports keyed by "*<package>"."""
    imports = {}
    for child in root_node.named_children:
        if child.type != 'import_declaration':
            continue
        # static imports bring in members, not types
        if any(part.type == 'static' for part in child.children):
            continue
        import_path = re.sub(r'\s+', '', node_text(source_bytes, child))
        import_path = import_path[len('import'):].rstrip(';')
        if import_path.endswith('.*'):
            package_path = import_path[:-2]
            imports[f"*{package_path}"] = package_path
        else:
            imports[import_path.split('.')[-1]] = import_path
    return imports


def qualified_name(source_bytes: bytes, package: str, declaration: Node,
                   enclosing: Tuple[Node, ...]) -> Optional[str]:
    """Fully-qualified, dot-separated name of a (possibly nested) declaration."""
    names = [declaration_name(source_bytes, outer) for outer in enclosing]
    names.append(declaration_name(source_bytes, declaration))
    if any(name is None for name in names):
        return None
    nested_path = '.'.join(names)
    return f"{package}.{nested_path}" if package else nested_path
