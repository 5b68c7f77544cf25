"""Tests for the type registry and field options."""

from dataclasses import dataclass
from enum import IntEnum

import pytest

from flatjson.exceptions import RegistrationError
from flatjson.registry import FieldOptions
from flatjson.registry import TypeRegistry
from flatjson.registry import TypeRegistryProtocol


@dataclass
class Account:
    id: int
    secret: str


class Other:
    pass


class TestFieldOptions:
    """Tests for FieldOptions."""

    def test_exclude_removes_fields(self) -> None:
        """Excluded fields are dropped."""
        options = FieldOptions.create(exclude=["secret"])

        assert options.apply({"id": 1, "secret": "x"}) == {"id": 1}

    def test_include_restricts_fields_in_include_order(self) -> None:
        """Only included fields remain, ordered as listed."""
        options = FieldOptions.create(include=["c", "a"])

        result = options.apply({"a": 1, "b": 2, "c": 3})

        assert list(result.items()) == [("c", 3), ("a", 1)]

    def test_exclude_applied_before_include(self) -> None:
        """A field both included and excluded is dropped."""
        options = FieldOptions.create(include=["a", "b"], exclude=["a"])

        assert options.apply({"a": 1, "b": 2, "c": 3}) == {"b": 2}

    def test_include_skips_missing_fields(self) -> None:
        """Included names absent from the object are ignored."""
        options = FieldOptions.create(include=["a", "missing"])

        assert options.apply({"a": 1}) == {"a": 1}

    def test_create_removes_duplicates(self) -> None:
        """Duplicate names collapse, keeping first occurrence order."""
        options = FieldOptions.create(include=["b", "a", "b"])

        assert options.include == ("b", "a")

    def test_create_rejects_bare_string(self) -> None:
        """A string is not accepted as a list of names."""
        with pytest.raises(RegistrationError, match="iterable of strings"):
            FieldOptions.create(exclude="secret")

    def test_create_rejects_non_string_names(self) -> None:
        """Field names must be strings."""
        with pytest.raises(RegistrationError, match="must be strings"):
            FieldOptions.create(include=["a", 1])

    def test_empty_options(self) -> None:
        """Options with neither list are empty and filter nothing."""
        options = FieldOptions.create()

        assert options.is_empty
        assert options.apply({"a": 1}) == {"a": 1}


class TestTypeRegistry:
    """Tests for TypeRegistry."""

    def test_satisfies_protocol(self, registry: TypeRegistry) -> None:
        """The concrete registry fulfils the serializer's contract."""
        assert isinstance(registry, TypeRegistryProtocol)

    def test_register_with_tag(self, registry: TypeRegistry) -> None:
        """Registered classes report their tag."""
        registry.register(Account, "account")

        assert registry.has_type(Account)
        assert Account in registry
        assert registry.get_type_tag(Account) == "account"
        assert registry.get_type("account") is Account
        assert len(registry) == 1

    def test_default_tag_is_qualname(self, registry: TypeRegistry) -> None:
        """Without a tag the class's qualified name is used."""
        registry.register(Account)

        assert registry.get_type_tag(Account) == "Account"

    def test_register_returns_class(self, registry: TypeRegistry) -> None:
        """register can be used inline."""
        assert registry.register(Account, "account") is Account

    def test_decorator(self, registry: TypeRegistry) -> None:
        """serializable registers the decorated class."""

        @registry.serializable("point", include=["x"])
        class Point:
            pass

        assert registry.get_type_tag(Point) == "point"
        assert registry.get_options("point") == FieldOptions(include=("x",))

    def test_unregistered_type(self, registry: TypeRegistry) -> None:
        """Unknown classes are not registered and have no tag."""
        assert not registry.has_type(Account)
        assert registry.get_type("account") is None
        with pytest.raises(KeyError):
            registry.get_type_tag(Account)

    def test_lookup_uses_exact_type(self, registry: TypeRegistry) -> None:
        """Subclasses of a registered class are not registered."""

        class SubAccount(Account):
            pass

        registry.register(Account, "account")

        assert not registry.has_type(SubAccount)

    def test_get_options(self, registry: TypeRegistry) -> None:
        """Options are stored per tag."""
        registry.register(Account, "account", exclude=["secret"])

        assert registry.get_options("account") == FieldOptions(exclude=("secret",))

    def test_get_options_without_filtering(self, registry: TypeRegistry) -> None:
        """Tags without field options report None."""
        registry.register(Account, "account")

        assert registry.get_options("account") is None
        assert registry.get_options("unknown") is None

    def test_reregister_replaces_tag_and_options(self, registry: TypeRegistry) -> None:
        """Registering a class again replaces its previous entry."""
        registry.register(Account, "account", exclude=["secret"])
        registry.register(Account, "acct")

        assert registry.get_type_tag(Account) == "acct"
        assert registry.get_type("account") is None
        assert registry.get_options("acct") is None
        assert registry.registered_types() == {"acct": Account}

    def test_unregister(self, registry: TypeRegistry) -> None:
        """Unregistered classes are forgotten entirely."""
        registry.register(Account, "account")
        registry.unregister(Account)

        assert not registry.has_type(Account)
        assert registry.get_type("account") is None
        assert len(registry) == 0

    def test_unregister_unknown_raises(self, registry: TypeRegistry) -> None:
        """Unregistering an unknown class raises KeyError."""
        with pytest.raises(KeyError):
            registry.unregister(Account)

    def test_duplicate_tag_raises(self, registry: TypeRegistry) -> None:
        """A tag can only be bound to one class."""
        registry.register(Account, "shared")

        with pytest.raises(RegistrationError, match="already registered for 'Account'"):
            registry.register(Other, "shared")

    @pytest.mark.parametrize("tag", ["__object__", "__array__"])
    def test_reserved_tag_raises(self, registry: TypeRegistry, tag: str) -> None:
        """Reserved tags cannot be claimed by registered types."""
        with pytest.raises(RegistrationError, match="reserved"):
            registry.register(Account, tag)

    def test_empty_tag_raises(self, registry: TypeRegistry) -> None:
        """Tags must be non-empty strings."""
        with pytest.raises(RegistrationError, match="non-empty string"):
            registry.register(Account, "")

    def test_non_class_raises(self, registry: TypeRegistry) -> None:
        """Only classes can be registered."""
        with pytest.raises(RegistrationError, match="Expected a class"):
            registry.register(Account(1, "x"), "account")  # type: ignore[arg-type]

    @pytest.mark.parametrize("cls", [int, str, dict, list, tuple, type(None)])
    def test_builtin_type_raises(self, registry: TypeRegistry, cls: type) -> None:
        """Built-in primitives and containers have fixed handling."""
        with pytest.raises(RegistrationError, match="cannot be registered"):
            registry.register(cls, "builtin")

    def test_primitive_subclass_raises(self, registry: TypeRegistry) -> None:
        """Subclasses of primitives are always inlined, so registering them is rejected."""

        class Color(IntEnum):
            RED = 1

        with pytest.raises(RegistrationError, match="cannot be registered"):
            registry.register(Color, "color")

        assert not registry.has_type(Color)

    def test_container_subclass_can_be_registered(self, registry: TypeRegistry) -> None:
        """Subclasses of dict or list are ordinary classes and may be registered."""

        class Bag(dict):
            pass

        registry.register(Bag, "bag")

        assert registry.has_type(Bag)
