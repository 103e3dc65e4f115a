import pytest

from jztscript.context import ContextOptions
from jztscript.script_registry import ScriptRegistry

from conftest import FakeOwner


def test_register_and_share_script():
    registry = ScriptRegistry()
    script = registry.register("guard", "WAIT 2\nEND")

    first = registry.new_context("guard", FakeOwner())
    second = registry.new_context("guard", FakeOwner())

    assert registry.get("guard") is script
    assert first.script is second.script is script
    assert registry.has_script("guard")
    assert registry.names() == ["guard"]


def test_reject_duplicate_script_name():
    registry = ScriptRegistry()
    registry.register("guard", "END")
    with pytest.raises(ValueError, match="already declared"):
        registry.register("guard", "END")


def test_unknown_script_name():
    with pytest.raises(KeyError, match="Unknown script 'ghost'"):
        ScriptRegistry().get("ghost")


def test_registry_forwards_options_and_error_handler():
    reported = []
    options = ContextOptions(max_jumps_per_tick=1)
    registry = ScriptRegistry(options=options, on_error=reported.append)

    registry.register("bad", "SAY")
    registry.register("good", "SAY \"ok\"")

    assert [diagnostic.script_name for diagnostic in reported] == ["bad"]
    assert registry.diagnostics() == reported
    assert registry.new_context("good", FakeOwner()).options is options


def test_serialize_lists_raw_scripts():
    registry = ScriptRegistry()
    registry.register("a", "END")
    registry.register("b", ":x\nEND")
    assert registry.serialize() == [
        {"name": "a", "rawScript": "END"},
        {"name": "b", "rawScript": ":x\nEND"},
    ]
