from typing import Optional

from bean_atlas.analyzers.java_analyzer import JavaBeanAnalyzer
from bean_atlas.analyzers.base_analyzer import BaseBeanAnalyzer
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.factory.config_builder import IntrospectionConfigBuilder

class AnalyzerFactory:
    """Factory for creating language-specific bean analyzers."""

    @staticmethod
    def create_analyzer(language: str, config: Optional[IntrospectionConfig] = None) -> BaseBeanAnalyzer:
        """Create an analyzer for the specified language."""
        language = language.lower()
        if language == 'java':
            return JavaBeanAnalyzer(config or IntrospectionConfig())
        else:
            raise ValueError(f"Unsupported language: {language}")

    @staticmethod
    def create_default_analyzer() -> BaseBeanAnalyzer:
        """Create a default analyzer (Java)."""
        return JavaBeanAnalyzer(IntrospectionConfig())

    @staticmethod
    def create_declared_only_analyzer() -> BaseBeanAnalyzer:
        """Create an analyzer that leaves JDK types such as java.lang.Object out of ancestor walks."""
        config = IntrospectionConfigBuilder().with_object_methods(False).build()
        return JavaBeanAnalyzer(config)
