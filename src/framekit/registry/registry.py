"""Test case registry implementation."""
from __future__ import annotations

import fnmatch
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from framekit.core import DuplicateTestName, TestCase, make_case
from framekit.core.models import SetupFn
from framekit.core.steps import Step
from framekit.core.validator import Expectation


class TestRegistry:
    """Stores test cases in registration order; that order is the run order."""

    __test__ = False

    def __init__(self) -> None:
        self._cases: Dict[str, TestCase] = {}
        self.builtins_loaded = False
        self.plugins_loaded = False

    def register(self, case: TestCase) -> TestCase:
        if case.name in self._cases:
            raise DuplicateTestName(case.name)
        self._cases[case.name] = case
        return case

    def all(self) -> Tuple[TestCase, ...]:
        return tuple(self._cases.values())

    def get(self, name: str) -> TestCase:
        try:
            return self._cases[name]
        except KeyError as exc:  # pragma: no cover - simple error path
            raise KeyError(f"Test case '{name}' is not registered") from exc

    def select(self, patterns: Sequence[str] = ()) -> Tuple[TestCase, ...]:
        """Cases whose name matches any glob, in registration order."""

        if not patterns:
            return self.all()
        return tuple(
            case
            for case in self._cases.values()
            if any(fnmatch.fnmatchcase(case.name, pattern) for pattern in patterns)
        )

    def group(self, name: str) -> "TestGroup":
        return TestGroup(self, name)

    def scenario(
        self,
        name: str,
        *,
        steps: Sequence[Step] = (),
        expect: Sequence[Expectation] = (),
        timeout_s: Optional[float] = None,
        tags: Sequence[str] = (),
    ) -> Callable[[SetupFn], SetupFn]:
        """Decorator registering the decorated function as the case's setup."""

        def decorator(setup: SetupFn) -> SetupFn:
            self.register(
                make_case(
                    name,
                    steps=steps,
                    expect=expect,
                    setup=setup,
                    timeout_s=timeout_s,
                    description=(setup.__doc__ or "").strip(),
                    tags=tags,
                )
            )
            return setup

        return decorator

    def __contains__(self, name: str) -> bool:
        return name in self._cases

    def __iter__(self) -> Iterator[TestCase]:
        return iter(self._cases.values())

    def __len__(self) -> int:
        return len(self._cases)

    def names(self) -> Iterable[str]:
        return tuple(self._cases.keys())

    def clear(self) -> None:
        self._cases.clear()
        self.builtins_loaded = False
        self.plugins_loaded = False


class TestGroup:
    """Registers cases under a dotted name prefix."""

    __test__ = False

    def __init__(self, registry: TestRegistry, prefix: str) -> None:
        if not prefix or prefix.startswith(".") or prefix.endswith("."):
            raise ValueError(f"Invalid group name '{prefix}'")
        self._registry = registry
        self.prefix = prefix

    def qualify(self, name: str) -> str:
        return f"{self.prefix}.{name}"

    def register(self, case: TestCase) -> TestCase:
        return self._registry.register(case.renamed(self.qualify(case.name)))

    def group(self, name: str) -> "TestGroup":
        return TestGroup(self._registry, self.qualify(name))

    def scenario(self, name: str, **kwargs) -> Callable[[SetupFn], SetupFn]:
        return self._registry.scenario(self.qualify(name), **kwargs)

    def names(self) -> List[str]:
        prefix = f"{self.prefix}."
        return [name for name in self._registry.names() if name.startswith(prefix)]


registry = TestRegistry()


def register_case(case: TestCase) -> TestCase:
    return registry.register(case)


def clear_registry() -> None:
    registry.clear()


def load_builtins(target: Optional[TestRegistry] = None) -> None:
    """Register the application's own scenarios once per registry; clashes raise DuplicateTestName."""

    from . import builtins  # noqa: WPS433

    target = registry if target is None else target
    if target.builtins_loaded:
        return
    for case in builtins.builtin_cases():
        target.register(case)
    target.builtins_loaded = True
