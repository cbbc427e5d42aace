from dataclasses import dataclass, field
from typing import Set, Dict

from bean_atlas.models.java_types import PRIMITIVE_TYPES

@dataclass(frozen=True)
class IntrospectionConfig:
    """Configuration for bean introspection and the Java source front end."""
    listener_marker_type: str = 'java.util.EventListener'
    event_object_type: str = 'java.util.EventObject'
    property_veto_exception: str = 'java.beans.PropertyVetoException'
    too_many_listeners_exception: str = 'java.util.TooManyListenersException'
    property_change_listener_type: str = 'java.beans.PropertyChangeListener'
    primitive_types: Set[str] = field(default_factory=lambda: set(PRIMITIVE_TYPES))
    java_lang_types: Set[str] = field(default_factory=lambda: {
        'Object', 'String', 'Class', 'Integer', 'Long', 'Double', 'Float', 'Boolean',
        'Character', 'Byte', 'Short', 'Number', 'Void', 'Enum', 'Record', 'Iterable',
        'Comparable', 'CharSequence', 'Runnable', 'Thread', 'Exception', 'RuntimeException',
        'Throwable', 'Error', 'Cloneable', 'StringBuilder', 'Math', 'System'
    })
    excluded_dirs: Set[str] = field(default_factory=lambda: {
        '.git', '.idea', 'target', 'build', 'out', 'bin', '.vscode', 'node_modules', '__pycache__'
    })
    # When False, JDK stubs (java.lang.Object etc.) are left out of ancestor walks,
    # so beans do not pick up the "class" property from Object.getClass().
    include_object_methods: bool = True
    # Add language-specific configurations as needed
    language_specific_configs: Dict[str, Dict] = field(default_factory=dict)
