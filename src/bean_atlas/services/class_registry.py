import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import networkx as nx

from bean_atlas.models.descriptors import IntrospectionError
from bean_atlas.models.domain_models import ClassInfo, ClassKind, MethodSignature
from bean_atlas.models.java_types import OBJECT, PRIMITIVE_TYPES

logger = logging.getLogger(__name__)

_MethodSpec = Tuple[str, Tuple[str, ...], str]


def _stub(name: str, kind: ClassKind = ClassKind.CLASS, superclass: Optional[str] = OBJECT,
          interfaces: Sequence[str] = (), methods: Sequence[_MethodSpec] = (),
          static_methods: Sequence[_MethodSpec] = ()) -> ClassInfo:
    signatures = [MethodSignature(m_name, params, ret, name, ('public',)) for m_name, params, ret in methods]
    signatures += [MethodSignature(m_name, params, ret, name, ('public', 'static'))
                   for m_name, params, ret in static_methods]
    if kind in (ClassKind.INTERFACE, ClassKind.ANNOTATION):
        superclass = None
    return ClassInfo(name=name, kind=kind, superclass=superclass, interfaces=tuple(interfaces),
                     methods=signatures, external=True)


def jdk_stubs() -> List[ClassInfo]:
    """The JDK types the bean heuristics depend on, with their public methods."""
    return [
        _stub(OBJECT, superclass=None, methods=[
            ('getClass', (), 'java.lang.Class'),
            ('hashCode', (), 'int'),
            ('equals', (OBJECT,), 'boolean'),
            ('toString', (), 'java.lang.String'),
            ('notify', (), 'void'),
            ('notifyAll', (), 'void'),
            ('wait', (), 'void'),
            ('wait', ('long',), 'void'),
            ('wait', ('long', 'int'), 'void'),
        ]),
        _stub('java.lang.Enum', interfaces=('java.lang.Comparable', 'java.io.Serializable'), methods=[
            ('name', (), 'java.lang.String'),
            ('ordinal', (), 'int'),
            ('compareTo', ('java.lang.Enum',), 'int'),
            ('getDeclaringClass', (), 'java.lang.Class'),
        ], static_methods=[
            ('valueOf', ('java.lang.Class', 'java.lang.String'), 'java.lang.Enum'),
        ]),
        _stub('java.lang.Record'),
        _stub('java.lang.Comparable', kind=ClassKind.INTERFACE, methods=[
            ('compareTo', (OBJECT,), 'int'),
        ]),
        _stub('java.io.Serializable', kind=ClassKind.INTERFACE),
        _stub('java.lang.Throwable', interfaces=('java.io.Serializable',)),
        _stub('java.lang.Exception', superclass='java.lang.Throwable'),
        _stub('java.lang.RuntimeException', superclass='java.lang.Exception'),
        _stub('java.beans.PropertyVetoException', superclass='java.lang.Exception'),
        _stub('java.util.TooManyListenersException', superclass='java.lang.Exception'),
        _stub('java.util.EventListener', kind=ClassKind.INTERFACE),
        _stub('java.util.EventObject', interfaces=('java.io.Serializable',), methods=[
            ('getSource', (), OBJECT),
        ]),
        _stub('java.beans.PropertyChangeEvent', superclass='java.util.EventObject', methods=[
            ('getPropertyName', (), 'java.lang.String'),
            ('getNewValue', (), OBJECT),
            ('getOldValue', (), OBJECT),
            ('getPropagationId', (), OBJECT),
            ('setPropagationId', (OBJECT,), 'void'),
        ]),
        _stub('java.beans.PropertyChangeListener', kind=ClassKind.INTERFACE,
              interfaces=('java.util.EventListener',), methods=[
                  ('propertyChange', ('java.beans.PropertyChangeEvent',), 'void'),
              ]),
        _stub('java.beans.VetoableChangeListener', kind=ClassKind.INTERFACE,
              interfaces=('java.util.EventListener',), methods=[
                  ('vetoableChange', ('java.beans.PropertyChangeEvent',), 'void'),
              ]),
        _stub('java.awt.AWTEvent', superclass='java.util.EventObject', methods=[
            ('getID', (), 'int'),
        ]),
        _stub('java.awt.event.ActionEvent', superclass='java.awt.AWTEvent', methods=[
            ('getActionCommand', (), 'java.lang.String'),
            ('getModifiers', (), 'int'),
            ('getWhen', (), 'long'),
        ]),
        _stub('java.awt.event.ActionListener', kind=ClassKind.INTERFACE,
              interfaces=('java.util.EventListener',), methods=[
                  ('actionPerformed', ('java.awt.event.ActionEvent',), 'void'),
              ]),
        _stub('javax.swing.event.ChangeEvent', superclass='java.util.EventObject'),
        _stub('javax.swing.event.ChangeListener', kind=ClassKind.INTERFACE,
              interfaces=('java.util.EventListener',), methods=[
                  ('stateChanged', ('javax.swing.event.ChangeEvent',), 'void'),
              ]),
    ]


class ClassRegistry:
    """Method-signature tables for every known class, plus the type hierarchy.

    The hierarchy is a networkx DiGraph with an edge from each type to each of
    its direct supertypes, labelled "extends" or "implements".
    """

    def __init__(self, classes: Iterable[ClassInfo] = (), include_jdk_stubs: bool = True):
        self.graph = nx.DiGraph()
        self._classes: Dict[str, ClassInfo] = {}
        if include_jdk_stubs:
            for stub in jdk_stubs():
                self.register(stub)
        for class_info in classes:
            self.register(class_info)

    def register(self, class_info: ClassInfo) -> None:
        name = class_info.name
        if name in self._classes and not self._classes[name].external:
            logger.debug(f"Replacing registered class {name}")
        self._classes[name] = class_info
        self.graph.add_node(name, kind=class_info.kind.value, external=class_info.external)
        self.graph.remove_edges_from(list(self.graph.out_edges(name)))
        if class_info.superclass:
            self.graph.add_edge(name, class_info.superclass, relationship="extends")
        relationship = "extends" if class_info.is_interface else "implements"
        for interface in class_info.interfaces:
            self.graph.add_edge(name, interface, relationship=relationship)

    def get(self, name: Optional[str]) -> Optional[ClassInfo]:
        if name is None:
            return None
        return self._classes.get(name)

    def require(self, name: str) -> ClassInfo:
        class_info = self._classes.get(name)
        if class_info is None:
            raise IntrospectionError(f"Class {name} is not registered")
        return class_info

    def __contains__(self, name: str) -> bool:
        return name in self._classes

    def __iter__(self) -> Iterator[ClassInfo]:
        return iter(self._classes.values())

    def __len__(self) -> int:
        return len(self._classes)

    def project_classes(self) -> List[ClassInfo]:
        return [class_info for class_info in self._classes.values() if not class_info.external]

    def superclass_of(self, name: str) -> Optional[str]:
        """Return the direct superclass, registering a placeholder if it is unknown."""
        class_info = self.get(name)
        if class_info is None or not class_info.superclass:
            return None
        superclass = class_info.superclass
        if superclass not in self._classes:
            logger.debug(f"Superclass {superclass} of {name} is unknown, registering a placeholder")
            self.register(ClassInfo(name=superclass, superclass=OBJECT if superclass != OBJECT else None,
                                    external=True))
        return superclass

    def superclass_chain(self, name: str) -> List[str]:
        """Superclasses of `name`, nearest first."""
        chain = []
        seen = {name}
        current = self.superclass_of(name)
        while current is not None:
            if current in seen:
                logger.warning(f"Cyclic inheritance detected at {current} while walking {name}")
                break
            chain.append(current)
            seen.add(current)
            current = self.superclass_of(current)
        return chain

    def supertypes_of(self, name: str) -> List[str]:
        """All supertypes of `name` (classes and interfaces), breadth-first, nearest first."""
        if name not in self.graph:
            return []
        ordered = []
        for _, supertype in nx.bfs_edges(self.graph, name):
            ordered.append(supertype)
        return ordered

    def is_assignable(self, target: str, source: str) -> bool:
        """True when a value of type `source` can be assigned to `target`."""
        if target == source:
            return True
        if source in PRIMITIVE_TYPES or target in PRIMITIVE_TYPES:
            return False
        if target == OBJECT:
            return True
        if source not in self.graph or target not in self.graph:
            return False
        return nx.has_path(self.graph, source, target)

    def is_ancestor(self, ancestor: str, name: str) -> bool:
        return ancestor in self.superclass_chain(name)

    def to_dict(self) -> Dict:
        """Convert the hierarchy to a JSON-serializable dictionary."""
        return {
            "nodes": sorted(self.graph.nodes),
            "edges": [{"source": source, "target": target, "relationship": data.get("relationship")}
                      for source, target, data in self.graph.edges(data=True)]
        }
