from bean_atlas.services.method_inventory import MethodInventory
from bean_atlas.services.property_resolver import (
    AccessorSelection,
    PropertyCandidates,
    PropertyResolver,
    resolve_pairing,
    select_accessors,
)

BEAN = 'com.example.Bean'


def resolve(registry, add_class, methods):
    add_class(BEAN, methods)
    properties = PropertyResolver(MethodInventory(registry)).resolve(BEAN)
    return {descriptor.name: descriptor for descriptor in properties}


def test_get_set_pair(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getWidth', ret='int'),
        method('setWidth', ('int',)),
    ])
    width = properties['width']
    assert not width.is_indexed
    assert width.read_method.name == 'getWidth'
    assert width.write_method.name == 'setWidth'
    assert not width.bound and not width.constrained


def test_is_getter_wins_for_boolean(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getActive', ret='boolean'),
        method('isActive', ret='boolean'),
        method('setActive', ('boolean',)),
    ])
    assert properties['active'].read_method.name == 'isActive'


def test_malformed_candidates_are_ignored(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('isCount', ret='int'),
        method('getName', ('java.lang.String',), 'java.lang.String'),
        method('get', ret='int'),
        method('setLabel', ('java.lang.String',), 'boolean'),
        method('getSize', ret='int', modifiers=('public', 'static')),
        method('getHidden', ret='int', modifiers=('protected',)),
    ])
    assert properties == {}


def test_setter_without_matching_getter_type(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getSize', ret='int'),
        method('setSize', ('java.lang.String',)),
    ])
    size = properties['size']
    assert size.read_method.name == 'getSize'
    assert size.write_method is None


def test_last_one_argument_setter_without_getter(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('setValue', ('int',)),
        method('setValue', ('java.lang.String',)),
    ])
    assert properties['value'].property_type == 'java.lang.String'


def test_indexed_only_pair(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getItem', ('int',), 'java.lang.String'),
        method('setItem', ('int', 'java.lang.String')),
    ])
    item = properties['item']
    assert item.is_indexed
    assert item.property_type is None
    assert item.indexed_property_type == 'java.lang.String'
    assert item.indexed_read_method.name == 'getItem'
    assert item.indexed_write_method.name == 'setItem'


def test_normal_and_indexed_accessors_combine(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getItems', ret='java.lang.String[]'),
        method('setItems', ('java.lang.String[]',)),
        method('getItems', ('int',), 'java.lang.String'),
        method('setItems', ('int', 'java.lang.String')),
    ])
    items = properties['items']
    assert items.is_indexed
    assert items.read_method.parameter_types == ()
    assert items.write_method.parameter_types == ('java.lang.String[]',)
    assert items.indexed_read_method.parameter_types == ('int',)
    assert items.indexed_write_method.parameter_types == ('int', 'java.lang.String')


def test_is_named_indexed_getter_keeps_normal_pair(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getFlags', ret='boolean[]'),
        method('setFlags', ('boolean[]',)),
        method('isFlags', ('int',), 'boolean'),
        method('setFlags', ('int', 'boolean')),
    ])
    flags = properties['flags']
    assert not flags.is_indexed
    assert flags.property_type == 'boolean[]'


def test_complete_normal_pair_with_partial_indexed(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getValues', ret='int[]'),
        method('setValues', ('int[]',)),
        method('getValues', ('int',), 'int'),
    ])
    assert not properties['values'].is_indexed


def test_getter_with_indexed_getter(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getData', ret='int[]'),
        method('getData', ('int',), 'int'),
    ])
    data = properties['data']
    assert data.is_indexed
    assert data.read_method.name == 'getData'
    assert data.indexed_read_method.name == 'getData'


def test_setter_with_indexed_setter_keeps_indexed_setter(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('setData', ('int[]',)),
        method('setData', ('int', 'int')),
    ])
    data = properties['data']
    assert data.is_indexed
    assert data.write_method is None
    assert data.indexed_write_method.parameter_types == ('int', 'int')


def test_indexed_type_conflict_falls_back_to_indexed_accessors(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getData', ret='int[]'),
        method('getData', ('int',), 'java.lang.String'),
    ])
    data = properties['data']
    assert data.is_indexed
    assert data.read_method is None
    assert data.indexed_property_type == 'java.lang.String'


def test_is_named_indexed_getter_alone_is_invalid(registry, add_class, method):
    properties = resolve(registry, add_class, [method('isOn', ('int',), 'boolean')])
    assert 'on' not in properties


def test_boolean_indexed_setter_uses_plain_boolean_setter(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('setEnabled', ('int', 'boolean')),
        method('setEnabled', ('boolean',), modifiers=('private',)),
    ])
    enabled = properties['enabled']
    assert not enabled.is_indexed
    assert enabled.read_method is None
    assert enabled.write_method.parameter_types == ('boolean',)
    assert enabled.write_method.modifiers == ('private',)


def test_plain_boolean_setter_replaces_indexed_pair(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getFlag', ('int',), 'boolean'),
        method('setFlag', ('int', 'boolean')),
        method('setFlag', ('boolean',), modifiers=('private',)),
    ])
    flag = properties['flag']
    assert not flag.is_indexed
    assert flag.read_method is None
    assert flag.write_method.parameter_types == ('boolean',)


def test_constrained_setter(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getWidth', ret='int'),
        method('setWidth', ('int',), throws=('java.beans.PropertyVetoException',)),
    ])
    assert properties['width'].constrained


def test_bound_requires_add_and_remove(registry, add_class, method):
    listener = 'java.beans.PropertyChangeListener'
    properties = resolve(registry, add_class, [
        method('getWidth', ret='int'),
        method('addPropertyChangeListener', (listener,)),
        method('removePropertyChangeListener', (listener,)),
    ])
    assert properties['width'].bound


def test_bound_needs_both_listener_methods(registry, add_class, method):
    properties = resolve(registry, add_class, [
        method('getWidth', ret='int'),
        method('addPropertyChangeListener', ('java.beans.PropertyChangeListener',)),
    ])
    assert not properties['width'].bound


def test_bound_sees_inherited_listener_methods(registry, add_class, method):
    listener = 'java.beans.PropertyChangeListener'
    add_class('com.example.Base', [
        method('addPropertyChangeListener', (listener,)),
        method('removePropertyChangeListener', (listener,)),
    ])
    add_class(BEAN, [method('getWidth', ret='int')], superclass='com.example.Base')
    resolver = PropertyResolver(MethodInventory(registry))

    assert resolver.resolve(BEAN)[0].bound
    assert not resolver.resolve(BEAN, stop_class='com.example.Base')[0].bound


def test_no_public_instance_methods(registry, add_class, method):
    add_class(BEAN, [method('helper', modifiers=('private',))])
    assert PropertyResolver(MethodInventory(registry)).resolve(BEAN) is None


def test_selection_tie_breaks(method):
    candidates = PropertyCandidates(getters=[
        method('isOn', ('int',), 'boolean'),
        method('getOn', ('int',), 'boolean'),
        method('isOn', ('int',), 'boolean', owner='com.example.Other'),
    ])
    selection = select_accessors(candidates)
    assert selection.indexed_getter.name == 'getOn'


def test_empty_selection_is_invalid():
    assert resolve_pairing(AccessorSelection()) is None
