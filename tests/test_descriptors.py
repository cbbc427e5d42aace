import pytest

from bean_atlas.models.descriptors import (
    BeanDescriptor,
    EventSetDescriptor,
    IndexedPropertyDescriptor,
    IntrospectionError,
    MethodDescriptor,
    PropertyDescriptor,
)


def test_property_type_follows_accessors(method):
    getter = method('getWidth', ret='int')
    setter = method('setWidth', ('int',))
    descriptor = PropertyDescriptor('width', getter, setter)
    assert descriptor.property_type == 'int'
    assert PropertyDescriptor('width', None, setter).property_type == 'int'
    assert PropertyDescriptor('width').property_type is None


def test_property_rejects_bad_accessors(method):
    with pytest.raises(IntrospectionError):
        PropertyDescriptor('')
    with pytest.raises(IntrospectionError):
        PropertyDescriptor('width', method('getWidth', ('int',), 'int'))
    with pytest.raises(IntrospectionError):
        PropertyDescriptor('width', method('getWidth'))
    with pytest.raises(IntrospectionError):
        PropertyDescriptor('width', method('getWidth', ret='int'), method('setWidth', ('java.lang.String',)))


def test_indexed_plain_type_must_match_array(method):
    descriptor = IndexedPropertyDescriptor(
        'items',
        method('getItems', ret='java.lang.String[]'),
        None,
        method('getItems', ('int',), 'java.lang.String'),
        method('setItems', ('int', 'java.lang.String')),
    )
    assert descriptor.is_indexed
    assert descriptor.indexed_property_type == 'java.lang.String'

    with pytest.raises(IntrospectionError):
        IndexedPropertyDescriptor('items', method('getItems', ret='int[]'), None,
                                  method('getItems', ('int',), 'java.lang.String'))
    with pytest.raises(IntrospectionError):
        IndexedPropertyDescriptor('items', None, None, None, method('setItems', ('long', 'int')))


def test_merge_attributes_takes_other_name(method):
    own = PropertyDescriptor('width', method('getWidth', ret='int'))
    other = PropertyDescriptor('Width')
    other.hidden = True
    other.bound = True
    other.display_name = 'The width'
    own.short_description = 'mine'
    other.short_description = 'theirs'

    own.merge_attributes(other)

    assert own.name == 'Width'
    assert own.hidden and own.bound
    assert not own.constrained
    assert own.display_name == 'The width'
    assert own.short_description == 'mine'


def test_copy_does_not_share_values(method):
    descriptor = MethodDescriptor(method('run'))
    descriptor.set_value('category', 'action')
    clone = descriptor.copy()
    clone.set_value('category', 'other')
    assert descriptor.get_value('category') == 'action'
    assert clone.method == descriptor.method


def test_event_set_requires_add_and_remove(method):
    add = method('addFooListener', ('com.example.FooListener',))
    with pytest.raises(IntrospectionError):
        EventSetDescriptor('foo', 'com.example.FooListener', (), add, None)


def test_event_set_merge(method):
    add = method('addFooListener', ('com.example.FooListener',))
    remove = method('removeFooListener', ('com.example.FooListener',))
    get = method('getFooListeners', ret='com.example.FooListener[]')
    own = EventSetDescriptor('foo', 'com.example.FooListener', (), add, remove)
    other = EventSetDescriptor('foo', 'com.example.FooListener', (), add, remove, get)
    other.in_default_event_set = False
    other.expert = True

    own.merge(other)

    assert own.get_listener_method == get
    assert own.in_default_event_set is False
    assert own.expert


def test_bean_descriptor_uses_simple_name():
    descriptor = BeanDescriptor('com.example.Outer.Inner')
    assert descriptor.name == 'Inner'
    assert descriptor.to_dict()['bean_class'] == 'com.example.Outer.Inner'
