from typing import Dict, Any, List
from bean_atlas.models.domain_models import ClassInfo
from bean_atlas.services.bean_metadata import BeanMetadata

class StatisticsGenerator:
    """Generates bean introspection statistics."""

    def generate_statistics(self, classes: List[ClassInfo], beans: Dict[str, BeanMetadata]) -> Dict:
        """Generate bean introspection statistics."""
        stats = {
            'total_classes': len(classes),
            'total_beans': len(beans),
            'class_kinds': self._count_class_kinds(classes),
            'total_methods': sum(len(class_info.methods) for class_info in classes),
            'property_stats': self._analyze_properties(beans),
            'event_stats': self._analyze_events(beans),
            'package_distribution': self._analyze_packages(classes),
            'bean_metrics': self._calculate_bean_metrics(beans)
        }
        return stats

    def _count_class_kinds(self, classes: List[ClassInfo]) -> Dict[str, int]:
        class_kinds = {}
        for class_info in classes:
            kind = class_info.kind.value
            class_kinds[kind] = class_kinds.get(kind, 0) + 1
        return class_kinds

    def _analyze_properties(self, beans: Dict[str, BeanMetadata]) -> Dict[str, int]:
        stats = {'total': 0, 'normal': 0, 'indexed': 0, 'bound': 0, 'constrained': 0,
                 'read_only': 0, 'write_only': 0}
        for metadata in beans.values():
            for descriptor in metadata.property_descriptors or []:
                stats['total'] += 1
                stats['indexed' if descriptor.is_indexed else 'normal'] += 1
                if descriptor.bound:
                    stats['bound'] += 1
                if descriptor.constrained:
                    stats['constrained'] += 1
                if descriptor.read_method is not None and descriptor.write_method is None:
                    stats['read_only'] += 1
                elif descriptor.write_method is not None and descriptor.read_method is None:
                    stats['write_only'] += 1
        return stats

    def _analyze_events(self, beans: Dict[str, BeanMetadata]) -> Dict[str, Any]:
        listener_types = {}
        total = unicast = 0
        for metadata in beans.values():
            for descriptor in metadata.event_set_descriptors or []:
                total += 1
                if descriptor.unicast:
                    unicast += 1
                listener_types[descriptor.listener_type] = listener_types.get(descriptor.listener_type, 0) + 1
        return {
            'total': total,
            'unicast': unicast,
            'listener_types': listener_types
        }

    def _analyze_packages(self, classes: List[ClassInfo]) -> Dict[str, int]:
        packages = {}
        for class_info in classes:
            package = class_info.package if class_info.package else '<default>'
            packages[package] = packages.get(package, 0) + 1
        return packages

    def _calculate_bean_metrics(self, beans: Dict[str, BeanMetadata]) -> Dict[str, Any]:
        max_properties_per_bean = 0
        avg_properties_per_bean = 0
        total_method_descriptors = 0
        if beans:
            property_counts = [len(metadata.property_descriptors or []) for metadata in beans.values()]
            max_properties_per_bean = max(property_counts)
            avg_properties_per_bean = sum(property_counts) / len(property_counts)
            total_method_descriptors = sum(len(metadata.method_descriptors or []) for metadata in beans.values())
        return {
            'max_properties_per_bean': max_properties_per_bean,
            'avg_properties_per_bean': round(avg_properties_per_bean, 2),
            'total_method_descriptors': total_method_descriptors
        }
