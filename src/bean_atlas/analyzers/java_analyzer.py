import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from tree_sitter import Language

from bean_atlas.analyzers.base_analyzer import BaseBeanAnalyzer
from bean_atlas.models.descriptors import ExplicitBeanInfo
from bean_atlas.models.domain_models import ClassInfo
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.processors.java_processor import JavaFileProcessor
from bean_atlas.processors.tree_sitter_helpers import create_parser, load_java_language
from bean_atlas.services.bean_metadata import BeanMetadata
from bean_atlas.services.class_cache_builder import ClassCacheBuilder
from bean_atlas.services.class_registry import ClassRegistry, jdk_stubs
from bean_atlas.services.introspector import BeanIntrospector
from bean_atlas.services.result_exporter import ResultExporter
from bean_atlas.services.statistics_generator import StatisticsGenerator

logger = logging.getLogger(__name__)

class JavaBeanAnalyzer(BaseBeanAnalyzer):
    """Analyzer for Java projects: parses sources with tree-sitter and introspects every class as a bean."""

    def __init__(self, config: IntrospectionConfig = None,
                 explicit_infos: Optional[Mapping[str, ExplicitBeanInfo]] = None):
        super().__init__(config or IntrospectionConfig())
        self.explicit_infos = dict(explicit_infos or {})

        # Initialize Tree-sitter components
        try:
            self.language: Language = load_java_language()
            self.parser = create_parser(self.language)
        except Exception as e:
            logger.error(f"Failed to initialize Tree-sitter for Java: {e}")
            raise

        # Initialize services
        known_types = [stub.name for stub in jdk_stubs()]
        self.file_processor = JavaFileProcessor(self.config, self.parser, known_types)
        self.class_cache_builder = ClassCacheBuilder(self.parser)
        self.statistics_generator = StatisticsGenerator()
        self.result_exporter = ResultExporter()

    def parse_project(self, root: Path, project_id: str) -> Tuple[List[ClassInfo], ClassRegistry]:
        """Parse a Java project directory."""
        logger.info(f"Starting to parse Java project: {project_id} at {root}")

        # Find all Java files
        java_files = [path for path in root.rglob("*.java")
                      if not any(part in self.config.excluded_dirs for part in path.relative_to(root).parts)]
        logger.info(f"Found {len(java_files)} Java files")

        if not java_files:
            logger.warning("No Java files found")
            return [], ClassRegistry()

        # Build class cache for type resolution
        logger.info("Building class cache for type resolution...")
        class_cache = self.class_cache_builder.build_class_cache(java_files)
        logger.info(f"Built class cache with {len(class_cache)} classes")

        # Process files
        logger.info("Processing Java files...")
        classes = []
        for i, java_file in enumerate(java_files):
            logger.debug(f"Processing file {i+1}/{len(java_files)}: {java_file}")
            classes.extend(self.file_processor.process_file(java_file, class_cache))

        logger.info(f"Processed {len(classes)} classes/interfaces/enums/records")
        if not classes:
            logger.warning("No classes were successfully parsed")

        return classes, ClassRegistry(classes)

    def parse_source(self, source: str, registry: Optional[ClassRegistry] = None) -> Tuple[List[ClassInfo], ClassRegistry]:
        """Parse a single compilation unit given as text, registering its classes."""
        registry = registry if registry is not None else ClassRegistry()
        classes = self.file_processor.process_source(source, class_cache={info.name for info in registry})
        for class_info in classes:
            registry.register(class_info)
        return classes, registry

    def introspect(self, classes: List[ClassInfo], registry: ClassRegistry) -> Dict[str, BeanMetadata]:
        """Introspect every class; a class that fails is logged and skipped."""
        introspector = BeanIntrospector(registry, self.explicit_infos, self.config)
        beans = {}
        for class_info in classes:
            try:
                beans[class_info.name] = introspector.get_bean_info(class_info.name)
            except Exception as e:
                logger.error(f"Error introspecting {class_info.name}: {e}")
                continue
        logger.info(f"Introspected {len(beans)} beans")
        return beans

    def export_results(self, classes: List[ClassInfo], beans: Dict[str, BeanMetadata],
                       registry: ClassRegistry, output_path: Path) -> None:
        """Export introspection results."""
        self.result_exporter.export_results(classes, beans, registry, output_path)

    def generate_statistics(self, classes: List[ClassInfo], beans: Dict[str, BeanMetadata]) -> Dict:
        """Generate introspection statistics."""
        return self.statistics_generator.generate_statistics(classes, beans)
