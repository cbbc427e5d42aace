from bean_atlas.factory.config_builder import IntrospectionConfigBuilder
from bean_atlas.services.method_inventory import MethodInventory


def test_declared_public_methods(registry, add_class, method):
    add_class('com.example.Bean', [
        method('getName', ret='java.lang.String'),
        method('reset', modifiers=('private',)),
        method('of', ('java.lang.String',), 'com.example.Bean', modifiers=('public', 'static')),
    ])
    inventory = MethodInventory(registry)

    assert [m.name for m in inventory.methods('com.example.Bean')] == ['getName', 'of']
    assert [m.name for m in inventory.property_candidates('com.example.Bean')] == ['getName']


def test_find_declared_method_any_visibility(registry, add_class, method):
    add_class('com.example.Bean', [method('setFlag', ('boolean',), modifiers=('private',))])
    inventory = MethodInventory(registry)

    found = inventory.find_declared_method('com.example.Bean', 'setFlag', ('boolean',))
    assert found is not None and found.modifiers == ('private',)
    assert inventory.find_declared_method('com.example.Bean', 'setFlag', ('int',)) is None
    assert inventory.find_declared_method('com.example.Missing', 'setFlag', ()) is None


def test_ancestor_methods_hidden_by_overrides(registry, add_class, method):
    add_class('com.example.Base', [method('getName', ret='java.lang.String'), method('close')])
    add_class('com.example.Child', [method('getName', ret='java.lang.String')], superclass='com.example.Base')
    inventory = MethodInventory(registry)

    found = inventory.methods('com.example.Child', include_ancestors=True)
    names = [m.name for m in found]
    assert names.count('getName') == 1
    assert next(m for m in found if m.name == 'getName').declaring_class == 'com.example.Child'
    assert 'close' in names
    assert 'getClass' in names


def test_stop_class_excludes_its_inventory(registry, add_class, method):
    add_class('com.example.Base', [method('close')])
    add_class('com.example.Child', [method('open')], superclass='com.example.Base')
    inventory = MethodInventory(registry)

    found = inventory.methods('com.example.Child', include_ancestors=True, stop_class='com.example.Base')
    assert [m.name for m in found] == ['open']


def test_object_methods_can_be_left_out(registry, add_class, method):
    add_class('com.example.Base', [method('close')])
    add_class('com.example.Child', [method('open')], superclass='com.example.Base')
    config = IntrospectionConfigBuilder().with_object_methods(False).build()
    inventory = MethodInventory(registry, config)

    found = inventory.methods('com.example.Child', include_ancestors=True)
    assert [m.name for m in found] == ['open', 'close']
