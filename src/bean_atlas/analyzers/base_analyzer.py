from abc import ABC, abstractmethod
from pathlib import Path
from typing import Tuple, List, Dict

from bean_atlas.models.domain_models import ClassInfo
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.services.bean_metadata import BeanMetadata
from bean_atlas.services.class_registry import ClassRegistry

class BaseBeanAnalyzer(ABC):
    """Abstract base class for bean analyzers across different source languages."""

    def __init__(self, config: IntrospectionConfig):
        self.config = config

    @abstractmethod
    def parse_project(self, root: Path, project_id: str) -> Tuple[List[ClassInfo], ClassRegistry]:
        """Parse a project directory and return its classes and the populated registry."""
        pass

    @abstractmethod
    def introspect(self, classes: List[ClassInfo], registry: ClassRegistry) -> Dict[str, BeanMetadata]:
        """Build bean metadata for every parsed class."""
        pass

    @abstractmethod
    def export_results(self, classes: List[ClassInfo], beans: Dict[str, BeanMetadata],
                       registry: ClassRegistry, output_path: Path) -> None:
        """Export introspection results to the specified output path."""
        pass

    @abstractmethod
    def generate_statistics(self, classes: List[ClassInfo], beans: Dict[str, BeanMetadata]) -> Dict:
        """Generate introspection statistics for the project."""
        pass
