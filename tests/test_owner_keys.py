"""Tests for owner key derivation."""

from notification_center.domain.models import KeyMode
from notification_center.services.owner_keys import owner_key


class Widget:
    class Inner:
        pass


def test_instances_of_same_type_share_key():
    assert owner_key(Widget()) == owner_key(Widget())


def test_key_uses_module_and_qualname():
    assert owner_key(Widget.Inner()) == f"{__name__}.Widget.Inner"


def test_class_owner_stands_for_its_instances():
    assert owner_key(Widget) == owner_key(Widget())


def test_builtin_values_have_keys():
    assert owner_key("text") == "builtins.str"
    assert owner_key(3) == "builtins.int"


def test_none_owner_is_unresolved():
    assert owner_key(None) is None
    assert owner_key(None, KeyMode.INSTANCE) is None


def test_instance_mode_distinguishes_instances():
    a, b = Widget(), Widget()
    assert owner_key(a, KeyMode.INSTANCE) != owner_key(b, KeyMode.INSTANCE)
    assert owner_key(a, KeyMode.INSTANCE).startswith(f"{__name__}.Widget@")
