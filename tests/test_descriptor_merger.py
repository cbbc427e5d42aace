import pytest

from bean_atlas.models.descriptors import (
    EventSetDescriptor,
    IndexedPropertyDescriptor,
    MethodDescriptor,
    PropertyDescriptor,
)
from bean_atlas.services.descriptor_merger import DescriptorMerger
from bean_atlas.services.method_inventory import MethodInventory

BASE = 'com.example.Base'
SUB = 'com.example.Sub'


@pytest.fixture
def merger(registry):
    return DescriptorMerger(SUB, registry, MethodInventory(registry))


def test_same_type_fills_missing_setter(registry, add_class, method, merger):
    add_class(SUB, [method('getWidth', ret='int')], superclass=BASE)
    own = PropertyDescriptor('width', method('getWidth', ret='int', owner=SUB))
    ancestor = PropertyDescriptor('width', method('getWidth', ret='int', owner=BASE),
                                  method('setWidth', ('int',), owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert merged is own
    assert merged.read_method.declaring_class == SUB
    assert merged.write_method.declaring_class == BASE
    assert ancestor.read_method.declaring_class == BASE


def test_boolean_is_getter_of_ancestor_wins(method, merger):
    own = PropertyDescriptor('active', method('getActive', ret='boolean', owner=SUB),
                             method('setActive', ('boolean',), owner=SUB))
    ancestor = PropertyDescriptor('active', method('isActive', ret='boolean', owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert merged.read_method.name == 'isActive'
    assert merged.write_method.declaring_class == SUB


def test_different_type_rebuilds_from_ancestor(method, merger):
    own = PropertyDescriptor('size', None, method('setSize', ('java.lang.String',), owner=SUB))
    own.bound = True
    ancestor = PropertyDescriptor('size', method('getSize', ret='int', owner=BASE),
                                  method('setSize', ('int',), owner=BASE))
    ancestor.display_name = 'Size'

    merged = merger.merge_property(own, ancestor)

    assert merged is not own and merged is not ancestor
    assert merged.property_type == 'int'
    assert merged.read_method.declaring_class == BASE
    assert merged.bound
    assert merged.display_name == 'Size'


def test_different_type_prefers_matching_declared_getter(registry, add_class, method, merger):
    narrow = method('getSize', ret='java.lang.Long')
    bridge = method('getSize', ret='java.lang.Number')
    add_class(SUB, [narrow, bridge], superclass=BASE)
    own = PropertyDescriptor('size', registry.get(SUB).methods[0])
    ancestor = PropertyDescriptor('size', method('getSize', ret='java.lang.Number', owner=BASE),
                                  method('setSize', ('java.lang.Number',), owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert merged.read_method == registry.get(SUB).methods[1]
    assert merged.write_method.declaring_class == BASE


def test_indexed_own_takes_plain_accessors_of_array_ancestor(method, merger):
    own = IndexedPropertyDescriptor('items', None, None, method('getItems', ('int',), 'java.lang.String', owner=SUB))
    ancestor = PropertyDescriptor('items', method('getItems', ret='java.lang.String[]', owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert merged is own
    assert merged.read_method.declaring_class == BASE


def test_boolean_indexed_setter_pairs_with_ancestor_getter(registry, add_class, method, merger):
    add_class(SUB, [
        method('setFlag', ('int', 'boolean')),
        method('setFlag', ('boolean',), modifiers=('private',)),
    ], superclass=BASE)
    own = IndexedPropertyDescriptor('flag', None, None, None, registry.get(SUB).methods[0])
    ancestor = PropertyDescriptor('flag', method('isFlag', ret='boolean', owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert not merged.is_indexed
    assert merged.read_method.name == 'isFlag'
    assert merged.write_method == registry.get(SUB).methods[1]


def test_array_own_adopts_indexed_ancestor(method, merger):
    own = PropertyDescriptor('items', method('getItems', ret='java.lang.String[]', owner=SUB))
    ancestor = IndexedPropertyDescriptor('items', None, None,
                                         method('getItems', ('int',), 'java.lang.String', owner=BASE),
                                         method('setItems', ('int', 'java.lang.String'), owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert merged.is_indexed
    assert merged is not ancestor
    assert merged.read_method.declaring_class == SUB
    assert merged.indexed_write_method.declaring_class == BASE
    assert ancestor.read_method is None


def test_non_array_own_completed_from_direct_superclass(registry, add_class, method, merger):
    add_class(BASE, [
        method('setCount', ('int',)),
        method('resetCount', modifiers=('public', 'static')),
    ])
    add_class(SUB, [method('getCount', ret='int')], superclass=BASE)
    own = PropertyDescriptor('count', registry.get(SUB).methods[0])
    ancestor = IndexedPropertyDescriptor('count', None, None, method('getCount', ('int',), 'int', owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert merged is own
    assert merged.write_method == registry.get(BASE).methods[0]


def test_indexed_pairs_fill_each_other(method, merger):
    own = IndexedPropertyDescriptor('cell', None, None, method('getCell', ('int',), 'int', owner=SUB))
    ancestor = IndexedPropertyDescriptor('cell', None, None, method('getCell', ('int',), 'int', owner=BASE),
                                         method('setCell', ('int', 'int'), owner=BASE))

    merged = merger.merge_property(own, ancestor)

    assert merged.indexed_read_method.declaring_class == SUB
    assert merged.indexed_write_method.declaring_class == BASE


def test_incompatible_indexed_types_keep_own(method, merger):
    own = IndexedPropertyDescriptor('c', None, None, method('getC', ('int',), 'int', owner=SUB))
    ancestor = IndexedPropertyDescriptor('c', None, None,
                                         method('getC', ('int',), 'java.lang.String', owner=BASE),
                                         method('setC', ('int', 'java.lang.String'), owner=BASE))
    ancestor.hidden = True

    merged = merger.merge_property(own, ancestor)

    assert merged is own
    assert merged.indexed_write_method is None
    assert merged.hidden


def test_complete_pair_of_other_type_keeps_own(method, merger):
    own = PropertyDescriptor('size', method('getSize', ret='int', owner=SUB),
                             method('setSize', ('int',), owner=SUB))
    ancestor = PropertyDescriptor('size', method('getSize', ret='long', owner=BASE))
    ancestor.short_description = 'Size in bytes'

    merged = merger.merge_property(own, ancestor)

    assert merged is own
    assert merged.property_type == 'int'
    assert merged.read_method.declaring_class == SUB
    assert merged.short_description == 'Size in bytes'


def test_merge_properties_copies_new_entries(method, merger):
    own = [PropertyDescriptor('height', method('getHeight', ret='int', owner=SUB))]
    width = PropertyDescriptor('width', method('getWidth', ret='int', owner=BASE))
    inherited = [width, PropertyDescriptor('height', method('getHeight', ret='int', owner=BASE))]

    merged, default = merger.merge_properties(own, None, inherited, 0, explicit=False)

    assert [p.name for p in merged] == ['height', 'width']
    assert merged[1] is not width
    assert default == 1


def test_merging_twice_changes_nothing(method, merger):
    own = [PropertyDescriptor('height', method('getHeight', ret='int', owner=SUB))]
    inherited = [PropertyDescriptor('width', method('getWidth', ret='int', owner=BASE),
                                    method('setWidth', ('int',), owner=BASE))]

    once, default = merger.merge_properties(own, None, inherited, 0, explicit=False)
    twice, default_again = merger.merge_properties(once, default, inherited, 0, explicit=False)

    assert [p.name for p in twice] == ['height', 'width']
    assert default_again == default == 1
    assert twice[1].write_method == inherited[0].write_method


def test_explicit_properties_keep_own_default(method, merger):
    own = [PropertyDescriptor('height', method('getHeight', ret='int', owner=SUB))]
    inherited = [PropertyDescriptor('width', method('getWidth', ret='int', owner=BASE))]

    merged, default = merger.merge_properties(own, None, inherited, 0, explicit=True)

    assert len(merged) == 2
    assert default is None


def test_merge_methods_by_qualified_name(method, merger):
    own = [MethodDescriptor(method('run', ('int',), owner=SUB))]
    same = MethodDescriptor(method('run', ('int',), owner=BASE))
    same.display_name = 'Run'
    overload = MethodDescriptor(method('run', ('long',), owner=BASE))

    merged = merger.merge_methods(own, [same, overload])

    assert [d.method.qualified_name for d in merged] == ['run_int', 'run_long']
    assert merged[0].method.declaring_class == SUB
    assert merged[0].display_name == 'Run'
    assert merged[1] is not overload


def test_merge_events_recomputes_default_by_name(method, merger):
    def event(name, owner):
        listener = f"com.example.{name.capitalize()}Listener"
        return EventSetDescriptor(name, listener, (),
                                  method(f"add{name.capitalize()}Listener", (listener,), owner=owner),
                                  method(f"remove{name.capitalize()}Listener", (listener,), owner=owner))

    own = [event('click', SUB)]
    inherited = [event('key', BASE), event('click', BASE)]

    merged, default = merger.merge_events(own, None, inherited, 0, explicit=False)

    assert [e.name for e in merged] == ['click', 'key']
    assert default == 1

    merged, default = merger.merge_events([event('click', SUB)], 0, inherited, 0, explicit=False)
    assert default == 0
