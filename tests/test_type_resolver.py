import pytest

from bean_atlas.models.introspection_config import IntrospectionConfig
from bean_atlas.services.type_resolver import JavaTypeResolver

PACKAGE = 'com.example'
IMPORTS = {
    'Map': 'java.util.Map',
    'List': 'java.util.List',
    '*java.util': 'java.util',
    '*com.lib': 'com.lib',
}


@pytest.fixture
def resolver():
    class_cache = {'com.example.Widget', 'com.example.Widget.Inner', 'com.example.Gadget'}
    return JavaTypeResolver(IntrospectionConfig(), class_cache, known_types={'com.lib.Helper'})


@pytest.mark.parametrize('type_name, expected', [
    ('int', 'int'),
    ('boolean[]', 'boolean[]'),
    ('String', 'java.lang.String'),
    ('String...', 'java.lang.String[]'),
    ('List<String>', 'java.util.List'),
    ('Map<String, List<Integer>>[][]', 'java.util.Map[][]'),
    ('Map.Entry<String, Integer>', 'java.util.Map.Entry'),
    ('Gadget', 'com.example.Gadget'),
    ('EventListener', 'java.util.EventListener'),
    ('Helper', 'com.lib.Helper'),
    ('@Nullable String', 'java.lang.String'),
    ('java.io.File', 'java.io.File'),
    ('Unknown', 'com.example.Unknown'),
])
def test_resolve_type_name(resolver, type_name, expected):
    assert resolver.resolve_type_name(type_name, IMPORTS, PACKAGE) == expected


def test_nested_type_in_enclosing_class(resolver):
    assert resolver.resolve_type_name('Inner', IMPORTS, PACKAGE, ['com.example.Widget']) == 'com.example.Widget.Inner'


def test_type_variables_are_erased(resolver):
    variables = resolver.parse_type_parameters('<T extends Number & Comparable<T>, U>', IMPORTS, PACKAGE)

    assert variables == {'T': 'java.lang.Number', 'U': 'java.lang.Object'}
    assert resolver.resolve_type_name('T[]', IMPORTS, PACKAGE, type_variables=variables) == 'java.lang.Number[]'


def test_default_package(resolver):
    assert resolver.resolve_type_name('Thing', {}, '') == 'Thing'


def test_split_by_top_level_comma(resolver):
    assert resolver.split_by_top_level_comma('Map<K, V>, List<T>') == ['Map<K, V>', 'List<T>']
