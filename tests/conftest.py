from dataclasses import replace

import pytest

from bean_atlas.models.domain_models import ClassInfo, ClassKind, MethodSignature
from bean_atlas.models.java_types import OBJECT, VOID
from bean_atlas.services.class_registry import ClassRegistry


def _method(name, params=(), ret=VOID, owner='com.example.Bean', modifiers=('public',), throws=()):
    return MethodSignature(name, tuple(params), ret, owner, tuple(modifiers), tuple(throws))


@pytest.fixture
def method():
    """Builds a MethodSignature: method('getX', ret='int')."""
    return _method


@pytest.fixture
def registry():
    return ClassRegistry()


@pytest.fixture
def add_class(registry):
    """Registers a class whose methods are re-owned by it, and returns the ClassInfo."""
    def _add(name, methods=(), superclass=OBJECT, interfaces=(), kind=ClassKind.CLASS):
        class_info = ClassInfo(
            name=name,
            kind=kind,
            superclass=superclass,
            interfaces=tuple(interfaces),
            methods=[replace(m, declaring_class=name) for m in methods],
        )
        registry.register(class_info)
        return class_info
    return _add
