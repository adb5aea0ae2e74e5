import sys
import textwrap

import pytest

from framekit import bootstrap
from framekit.core import Advance, DuplicateTestName, Predicate, make_case
from framekit.registry import TestRegistry, load_builtins
from framekit.registry import registry as default_registry


def _case(name: str):
    return make_case(name, steps=[Advance(1)], expect=[Predicate("always", lambda o: True)])


def test_register_preserves_order(fresh_registry: TestRegistry) -> None:
    for name in ("b.second", "a.first", "c.third"):
        fresh_registry.register(_case(name))
    assert list(fresh_registry.names()) == ["b.second", "a.first", "c.third"]
    assert [case.name for case in fresh_registry] == ["b.second", "a.first", "c.third"]
    assert len(fresh_registry) == 3


def test_duplicate_name_rejected(fresh_registry: TestRegistry) -> None:
    fresh_registry.register(_case("ui.cursor"))
    with pytest.raises(DuplicateTestName, match="ui.cursor"):
        fresh_registry.register(_case("ui.cursor"))
    assert len(fresh_registry) == 1


def test_select_matches_globs_in_registration_order(fresh_registry: TestRegistry) -> None:
    for name in ("ui.stack.a", "render.clear", "ui.stack.b", "timing.clock"):
        fresh_registry.register(_case(name))
    selected = fresh_registry.select(["timing.*", "ui.stack.*"])
    assert [case.name for case in selected] == ["ui.stack.a", "ui.stack.b", "timing.clock"]
    assert fresh_registry.select([]) == fresh_registry.all()
    assert fresh_registry.select(["nothing.*"]) == tuple()


def test_group_qualifies_names(fresh_registry: TestRegistry) -> None:
    ui = fresh_registry.group("ui")
    stack = ui.group("stack")
    stack.register(_case("cursor"))
    ui.register(_case("focus"))
    assert "ui.stack.cursor" in fresh_registry
    assert fresh_registry.get("ui.focus").group == "ui"
    assert ui.names() == ["ui.stack.cursor", "ui.focus"]
    assert stack.names() == ["ui.stack.cursor"]


def test_group_rejects_bad_prefix(fresh_registry: TestRegistry) -> None:
    with pytest.raises(ValueError):
        fresh_registry.group(".ui")


def test_scenario_decorator_uses_docstring(fresh_registry: TestRegistry) -> None:
    @fresh_registry.group("demo").scenario("noop", steps=[Advance(2)], timeout_s=2.0, tags=["smoke"])
    def setup(context) -> None:
        """Does nothing at all."""

    case = fresh_registry.get("demo.noop")
    assert case.setup is setup
    assert case.description == "Does nothing at all."
    assert case.timeout_s == 2.0
    assert case.tags == ("smoke",)
    assert case.steps == (Advance(2),)


def test_case_validation() -> None:
    with pytest.raises(ValueError):
        make_case(" ")
    with pytest.raises(ValueError):
        make_case("x", timeout_s=0)


def test_load_builtins_is_idempotent(fresh_registry: TestRegistry) -> None:
    load_builtins(fresh_registry)
    count = len(fresh_registry)
    load_builtins(fresh_registry)
    assert len(fresh_registry) == count
    assert "ui.stack.cursor_hits_topmost" in fresh_registry
    assert "utility.close" in fresh_registry


def test_load_builtins_fills_empty_target_only(fresh_registry: TestRegistry) -> None:
    before = len(default_registry)
    load_builtins(fresh_registry)
    assert len(fresh_registry) > 0
    assert len(default_registry) == before


def test_load_builtins_reports_name_clash(fresh_registry: TestRegistry) -> None:
    fresh_registry.register(_case("utility.close"))
    with pytest.raises(DuplicateTestName):
        load_builtins(fresh_registry)
    assert not fresh_registry.builtins_loaded


def test_bootstrap_loads_plugins(tmp_path, monkeypatch, fresh_registry: TestRegistry) -> None:
    plugin = tmp_path / "framekit_test_plugin.py"
    plugin.write_text(
        textwrap.dedent(
            """
            from framekit.core import Advance, make_case

            def register(registry):
                registry.register(make_case("plugin.extra", steps=[Advance(1)]))

            def register_more(registry):
                registry.register(make_case("plugin.more", steps=[Advance(1)]))
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "framekit_test_plugin", raising=False)
    bootstrap(fresh_registry, plugins="framekit_test_plugin, framekit_test_plugin:register_more")
    names = list(fresh_registry.names())
    assert names[-2:] == ["plugin.extra", "plugin.more"]
    bootstrap(fresh_registry, plugins="framekit_test_plugin")
    assert list(fresh_registry.names()) == names
