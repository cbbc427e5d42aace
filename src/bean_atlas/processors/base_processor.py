from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from tree_sitter import Node, Parser
from bean_atlas.models.domain_models import ClassInfo
from bean_atlas.models.introspection_config import IntrospectionConfig

class BaseFileProcessor(ABC):
    """Abstract base class for turning source files of different languages into class tables."""

    def __init__(self, config: IntrospectionConfig, parser: Parser):
        self.config = config
        self.parser = parser

    @abstractmethod
    def process_file(self, file_path: Path, class_cache: Set[str] = None) -> List[ClassInfo]:
        """Process a single source file and return the classes it declares."""
        pass

    @abstractmethod
    def process_source(self, source: str, file_path: Optional[str] = None,
                       class_cache: Set[str] = None) -> List[ClassInfo]:
        """Process source text directly."""
        pass

    @abstractmethod
    def _read_file_content(self, file_path: Path) -> str:
        """Read the content of a file with appropriate encoding."""
        pass

    @abstractmethod
    def _parse_declaration(self, declaration: Node, enclosing: Tuple[Node, ...], source_bytes: bytes,
                           package: str, imports: Dict[str, str], file_path: Optional[str],
                           type_resolver) -> Optional[ClassInfo]:
        """Parse a single type declaration node."""
        pass
