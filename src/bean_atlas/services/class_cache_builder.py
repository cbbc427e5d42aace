import logging
from pathlib import Path
from typing import List, Set

from tree_sitter import Node, Parser

from bean_atlas.processors.tree_sitter_helpers import extract_package, qualified_name, walk_type_declarations

logger = logging.getLogger(__name__)

class ClassCacheBuilder:
    """Builds cache of all available classes for type resolution."""

    def __init__(self, parser: Parser):
        self.parser = parser

    def build_class_cache(self, files: List[Path]) -> Set[str]:
        """Build cache of all available classes."""
        class_cache = set()
        for file in files:
            try:
                with open(file, 'rb') as f:
                    source_bytes = f.read()
                tree = self.parser.parse(source_bytes)
                class_cache.update(self.collect_class_names(tree.root_node, source_bytes))
            except Exception as e:
                logger.debug(f"Error building class cache for {file}: {e}")
                continue
        return class_cache

    def collect_class_names(self, root_node: Node, source_bytes: bytes) -> Set[str]:
        """Fully-qualified names of every member type declared in one compilation unit."""
        package = extract_package(root_node, source_bytes)
        names = set()
        for declaration, enclosing in walk_type_declarations(root_node):
            full_class_name = qualified_name(source_bytes, package, declaration, enclosing)
            if full_class_name:
                names.add(full_class_name)
        return names
