"""Test module for simple_xml_dom package initialization."""


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import simple_xml_dom

    # Assert
    assert isinstance(simple_xml_dom.__version__, str)
    assert simple_xml_dom.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    import simple_xml_dom

    assert simple_xml_dom.__author__ == "Simple XML DOM Team"


def test_package_all_exports() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import simple_xml_dom

    # Assert
    for name in simple_xml_dom.__all__:
        assert hasattr(simple_xml_dom, name), name
    assert {"parse_string", "open_document", "save_document", "XMLNode", "DomConfig"} <= set(
        simple_xml_dom.__all__
    )


def test_quick_start() -> None:
    """Test the top-level workflow: create, attach, render, parse back."""
    from simple_xml_dom import attach, create, parse_string, render, set_attribute

    root = create("Root")
    item = attach(root, create("Item"))
    set_attribute(item, "ID", "1")

    parsed = parse_string(render(root)).unwrap()

    assert parsed.name == "Root"
    assert parsed.children[0].get_attribute("ID") == "1"
