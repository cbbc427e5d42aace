from typing import Set, Dict
from bean_atlas.models.introspection_config import IntrospectionConfig

class IntrospectionConfigBuilder:
    """Builder pattern for creating introspection configuration."""

    def __init__(self):
        self.config_data = {}

    def with_listener_marker_type(self, type_name: str) -> 'IntrospectionConfigBuilder':
        self.config_data['listener_marker_type'] = type_name
        return self

    def with_event_object_type(self, type_name: str) -> 'IntrospectionConfigBuilder':
        self.config_data['event_object_type'] = type_name
        return self

    def with_property_change_listener_type(self, type_name: str) -> 'IntrospectionConfigBuilder':
        self.config_data['property_change_listener_type'] = type_name
        return self

    def with_custom_java_lang_types(self, java_lang_types: Set[str]) -> 'IntrospectionConfigBuilder':
        self.config_data['java_lang_types'] = java_lang_types
        return self

    def with_excluded_dirs(self, excluded_dirs: Set[str]) -> 'IntrospectionConfigBuilder':
        self.config_data['excluded_dirs'] = excluded_dirs
        return self

    def with_object_methods(self, include_object_methods: bool) -> 'IntrospectionConfigBuilder':
        self.config_data['include_object_methods'] = include_object_methods
        return self

    def with_language_specific_config(self, language: str, config: Dict) -> 'IntrospectionConfigBuilder':
        self.config_data.setdefault('language_specific_configs', {})[language] = config
        return self

    def build(self) -> IntrospectionConfig:
        return IntrospectionConfig(**self.config_data)
