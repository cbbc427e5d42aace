import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from bean_atlas.models.descriptors import EventSetDescriptor
from bean_atlas.models.domain_models import MethodSignature
from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.models.java_types import component_type, decapitalize
from bean_atlas.services.class_registry import ClassRegistry
from bean_atlas.services.method_inventory import MethodInventory

logger = logging.getLogger(__name__)

PREFIX_ADD = 'add'
PREFIX_REMOVE = 'remove'
PREFIX_GET = 'get'
SUFFIX_LISTENER = 'Listener'


@dataclass
class EventCandidates:
    """Listener registration methods collected for one event name."""
    listener_type: Optional[str] = None
    listener_methods: Tuple[MethodSignature, ...] = ()
    add_method: Optional[MethodSignature] = None
    remove_method: Optional[MethodSignature] = None
    get_method: Optional[MethodSignature] = None
    unicast: bool = False


class EventResolver:
    """Pairs add/remove listener methods into event set descriptors."""

    def __init__(self, registry: ClassRegistry, inventory: MethodInventory,
                 config: Optional[IntrospectionConfig] = None):
        self.registry = registry
        self.inventory = inventory
        self.config = config or IntrospectionConfig()

    def resolve(self, class_name: str) -> Optional[List[EventSetDescriptor]]:
        """Event set descriptors of `class_name`, or None when it declares no public methods."""
        methods = self.inventory.methods(class_name)
        if not methods:
            return None

        table: Dict[str, EventCandidates] = {}
        for method in methods:
            self._collect_listener_method(PREFIX_ADD, method, table)
            self._collect_listener_method(PREFIX_REMOVE, method, table)
            self._collect_get_listeners_method(method, table)

        events = []
        for event_name, candidates in table.items():
            if candidates.add_method is None or candidates.remove_method is None:
                logger.debug(f"Dropping event {event_name} of {class_name}: add/remove pair is incomplete")
                continue
            descriptor = EventSetDescriptor(
                decapitalize(event_name),
                candidates.listener_type,
                candidates.listener_methods,
                candidates.add_method,
                candidates.remove_method,
                candidates.get_method,
            )
            descriptor.unicast = candidates.unicast
            events.append(descriptor)
        return events

    def _collect_listener_method(self, prefix: str, method: MethodSignature,
                                 table: Dict[str, EventCandidates]) -> None:
        name = method.name
        if not (name.startswith(prefix) and name.endswith(SUFFIX_LISTENER)):
            return

        listener_name = name[len(prefix):]
        event_name = listener_name[:listener_name.rfind(SUFFIX_LISTENER)]
        if not event_name:
            return

        if len(method.parameter_types) != 1:
            return
        listener_type = method.parameter_types[0]
        if not self.registry.is_assignable(self.config.listener_marker_type, listener_type):
            return
        if not listener_type.endswith(listener_name):
            return

        candidates = table.setdefault(event_name, EventCandidates())
        if candidates.listener_type is None:
            candidates.listener_type = listener_type
            candidates.listener_methods = self.listener_callbacks(listener_type)

        if prefix == PREFIX_ADD:
            candidates.add_method = method
            if method.declares_exception(self.config.too_many_listeners_exception):
                candidates.unicast = True
        else:
            candidates.remove_method = method

    def _collect_get_listeners_method(self, method: MethodSignature,
                                      table: Dict[str, EventCandidates]) -> None:
        name = method.name
        if not (name.startswith(PREFIX_GET) and name.endswith(SUFFIX_LISTENER + 's')):
            return

        listener_name = name[len(PREFIX_GET):-1]
        event_name = listener_name[:listener_name.rfind(SUFFIX_LISTENER)]
        if not event_name or method.parameter_types:
            return

        element_type = component_type(method.return_type)
        if element_type is None or not element_type.endswith(listener_name):
            return

        table.setdefault(event_name, EventCandidates()).get_method = method

    def listener_callbacks(self, listener_type: str) -> Tuple[MethodSignature, ...]:
        """Methods declared on the listener taking a single event object."""
        listener_info = self.registry.get(listener_type)
        if listener_info is None:
            return ()
        return tuple(
            method for method in listener_info.methods
            if len(method.parameter_types) == 1
            and self.registry.is_assignable(self.config.event_object_type, method.parameter_types[0])
        )
