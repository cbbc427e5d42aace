from bean_atlas.models.java_types import (
    array_of,
    capitalize,
    component_type,
    decapitalize,
    is_array,
    package_of,
    simple_name,
)


def test_decapitalize():
    assert decapitalize("FooBah") == "fooBah"
    assert decapitalize("X") == "x"
    assert decapitalize("URL") == "URL"
    assert decapitalize("") == ""


def test_capitalize():
    assert capitalize("foo") == "Foo"
    assert capitalize("aB") == "aB"
    assert capitalize("") == ""
    assert capitalize(None) is None


def test_array_helpers():
    assert is_array("int[]")
    assert not is_array("int")
    assert not is_array(None)
    assert component_type("int[][]") == "int[]"
    assert component_type("java.lang.String") is None
    assert array_of("java.lang.String") == "java.lang.String[]"


def test_names():
    assert simple_name("com.example.Outer.Inner") == "Inner"
    assert simple_name("Bean") == "Bean"
    assert package_of("com.example.Bean") == "com.example"
    assert package_of("Bean") == ""
