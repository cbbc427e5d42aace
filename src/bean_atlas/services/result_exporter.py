import json
import logging
from pathlib import Path
from typing import Dict, List

from pyvis.network import Network

from bean_atlas.models.domain_models import ClassInfo
from bean_atlas.services.bean_metadata import BeanMetadata
from bean_atlas.services.class_registry import ClassRegistry
from bean_atlas.services.statistics_generator import StatisticsGenerator

logger = logging.getLogger(__name__)

class ResultExporter:
    """Exports introspection results to JSON files and an interactive hierarchy page."""

    # Color mapping for different class kinds
    COLOR_MAP = {
        "class": "#3b82f6", "interface": "#a21caf", "enum": "#10b981",
        "record": "#f59e0b", "annotation": "#8b5cf6", "external": "#6b7280"
    }
    EDGE_COLORS = {"extends": "#f59e0b", "implements": "#a21caf"}

    def export_results(self, classes: List[ClassInfo], beans: Dict[str, BeanMetadata],
                       registry: ClassRegistry, output_path: Path) -> None:
        """Export introspection results into `output_path`."""
        output_path.mkdir(parents=True, exist_ok=True)
        self._export_classes(classes, output_path)
        self._export_beans(beans, output_path)
        stats_generator = StatisticsGenerator()
        stats = stats_generator.generate_statistics(classes, beans)
        self._export_statistics(stats, output_path)
        self.export_hierarchy_html(registry, output_path / 'hierarchy.html')

    def _export_classes(self, classes: List[ClassInfo], output_path: Path) -> None:
        with open(output_path / 'classes.json', 'w', encoding='utf-8') as f:
            json.dump([class_info.to_dict() for class_info in classes], f, indent=2, ensure_ascii=False)

    def _export_beans(self, beans: Dict[str, BeanMetadata], output_path: Path) -> None:
        beans_data = {name: metadata.to_dict() for name, metadata in beans.items()}
        with open(output_path / 'beans.json', 'w', encoding='utf-8') as f:
            json.dump(beans_data, f, indent=2, ensure_ascii=False)

    def _export_statistics(self, stats: Dict, output_path: Path) -> None:
        with open(output_path / 'statistics.json', 'w', encoding='utf-8') as f:
            json.dump(stats, f, indent=2, ensure_ascii=False)

    def export_hierarchy_html(self, registry: ClassRegistry, output_html_path: Path) -> None:
        """Export the type hierarchy to an interactive HTML visualization."""
        net = Network(height="900px", width="100%", directed=True, notebook=False, cdn_resources="remote")
        net.barnes_hut()

        for name, data in registry.graph.nodes(data=True):
            class_info = registry.get(name)
            if data.get("external", True):
                color = self.COLOR_MAP["external"]
            else:
                color = self.COLOR_MAP.get(data.get("kind"), self.COLOR_MAP["class"])
            title = name
            if class_info is not None:
                title = f"{name}\n{len(class_info.methods)} methods"
            net.add_node(name, label=name.rsplit('.', 1)[-1], color=color, title=title)

        for source, target, data in registry.graph.edges(data=True):
            relationship = data.get("relationship", "extends")
            net.add_edge(source, target, color=self.EDGE_COLORS.get(relationship, "#374151"), title=relationship)

        net.set_options("""
        var options = {
          "physics": {
            "enabled": true,
            "stabilization": {"iterations": 100}
          },
          "interaction": {
            "multiselect": true,
            "selectConnectedEdges": false
          }
        }
        """)

        net.write_html(str(output_html_path))
        logger.info(f"Exported type hierarchy to {output_html_path}")
