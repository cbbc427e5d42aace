import logging
import threading
from enum import Enum
from typing import Dict, Mapping, Optional

from bean_atlas.models.descriptors import ExplicitBeanInfo, IntrospectionError
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.services.bean_metadata import BeanMetadata
from bean_atlas.services.class_registry import ClassRegistry

logger = logging.getLogger(__name__)


class IntrospectionFlags(Enum):
    USE_ALL_BEANINFO = 1
    IGNORE_IMMEDIATE_BEANINFO = 2
    IGNORE_ALL_BEANINFO = 3


class BeanIntrospector:
    """Builds finalized bean metadata for registered classes.

    The metadata of a class is its own introspected (or explicit) metadata
    merged with that of every superclass up to the stop class. Results built
    without a stop class and with all explicit infos honoured are cached.
    """

    def __init__(self, registry: ClassRegistry,
                 explicit_infos: Optional[Mapping[str, ExplicitBeanInfo]] = None,
                 config: Optional[IntrospectionConfig] = None):
        self.registry = registry
        self.explicit_infos: Dict[str, ExplicitBeanInfo] = dict(explicit_infos or {})
        self.config = config or IntrospectionConfig()
        self._cache: Dict[str, BeanMetadata] = {}
        self._lock = threading.RLock()

    def register_explicit_info(self, class_name: str, explicit: ExplicitBeanInfo) -> None:
        with self._lock:
            self.explicit_infos[class_name] = explicit
            self._cache.pop(class_name, None)

    def get_bean_info(self, class_name: str, stop_class: Optional[str] = None,
                      flags: IntrospectionFlags = IntrospectionFlags.USE_ALL_BEANINFO) -> BeanMetadata:
        self.registry.require(class_name)
        if stop_class is not None and not self.registry.is_ancestor(stop_class, class_name):
            raise IntrospectionError(f"{stop_class} is not a superclass of {class_name}")

        cacheable = stop_class is None and flags == IntrospectionFlags.USE_ALL_BEANINFO
        with self._lock:
            if cacheable and class_name in self._cache:
                return self._cache[class_name]
            metadata = self._build(class_name, stop_class, flags).finalize()
            if cacheable:
                self._cache[class_name] = metadata
        logger.debug(f"Introspected {class_name}: {len(metadata.property_descriptors)} properties, "
                     f"{len(metadata.event_set_descriptors)} events")
        return metadata

    def _build(self, class_name: str, stop_class: Optional[str], flags: IntrospectionFlags) -> BeanMetadata:
        explicit = None
        if flags == IntrospectionFlags.USE_ALL_BEANINFO:
            explicit = self.explicit_infos.get(class_name)
        metadata = BeanMetadata.build(class_name, self.registry, explicit, stop_class, self.config)
        for additional in reversed(metadata.additional):
            metadata.merge_bean_info(additional, force=True)

        superclass = self.registry.superclass_of(class_name)
        if superclass == stop_class:
            return metadata
        if superclass is None:
            raise IntrospectionError(f"{stop_class} is not a superclass of {class_name}")
        if not self.config.include_object_methods and self.registry.get(superclass).external:
            return metadata

        super_flags = flags
        if flags == IntrospectionFlags.IGNORE_IMMEDIATE_BEANINFO:
            super_flags = IntrospectionFlags.USE_ALL_BEANINFO
        metadata.merge_bean_info(self._build(superclass, stop_class, super_flags), force=False)
        return metadata

    def flush_caches(self) -> None:
        with self._lock:
            self._cache.clear()

    def flush_from_caches(self, class_name: str) -> None:
        with self._lock:
            self._cache.pop(class_name, None)
