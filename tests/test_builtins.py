from framekit.core import DisplayContextProvider, Outcome, TestRunner
from framekit.registry import TestRegistry, load_builtins
from framekit.reporting import exit_code


def _builtins() -> TestRegistry:
    registry = TestRegistry()
    load_builtins(registry)
    return registry


def test_builtin_groups_present() -> None:
    groups = {case.group.split(".")[0] for case in _builtins()}
    assert groups == {"ui", "utility", "render", "timing"}


def test_builtins_pass_on_offscreen_surfaces(surface_provider) -> None:
    registry = _builtins()
    assert len(registry) > 0
    report = TestRunner().run(registry.all(), surface_provider)
    failures = [(r.name, r.outcome.value, r.reason) for r in report if not r.passed]
    assert failures == []
    assert exit_code(report) == 0


def test_builtins_pass_on_headless_display(display) -> None:
    registry = _builtins()
    assert len(registry) > 0
    report = TestRunner().run(registry.all(), DisplayContextProvider(display))
    assert report.outcomes == (Outcome.PASSED,) * len(registry)
    assert display.holder is None
    assert all(group.ok for group in report.groups())


def test_focus_log_is_recorded(surface_provider) -> None:
    registry = _builtins()
    report = TestRunner().run(registry.select(["ui.stack.focus_moves"]), surface_provider)
    assert report.all_passed
    assert report.results[0].diagnostic["frames"] == 3
