import numpy as np
import pygame

from framekit.core import (
    Approx,
    Equals,
    FrameHash,
    LogEquals,
    Observation,
    Predicate,
    Tolerance,
    frame_digest,
    solid_frame_digest,
    state_key,
    validate,
)
from framekit.pipeline import BACKGROUND, build_application


def _observation(**state) -> Observation:
    return Observation(state=state, logs={"ui.stack": "cursor - 2\n"})


def test_equals_and_state_key() -> None:
    observed = _observation(focused="probe-1", nested={"x": 3})
    assert Equals("focused", state_key("focused"), "probe-1").check(observed).passed
    check = Equals("nested x", state_key("nested", "x"), 4).check(observed)
    assert not check.passed
    assert check.detail == "nested x: expected 4, got 3"


def test_approx_within_tolerance_records_metrics() -> None:
    observed = _observation(value=1.00001)
    check = Approx("value", state_key("value"), 1.0, Tolerance(absolute=1e-4, relative=0.0)).check(observed)
    assert check.passed
    assert check.metrics["value.max_abs"] < 1e-4


def test_approx_detects_mismatch_in_arrays() -> None:
    observed = _observation(values=[1.0, 2.0, 3.5])
    check = Approx("values", state_key("values"), [1.0, 2.0, 3.0]).check(observed)
    assert not check.passed
    assert "mismatched 1/3" in check.detail
    assert np.isclose(check.metrics["values.max_abs"], 0.5)


def test_approx_shape_mismatch() -> None:
    observed = _observation(values=[1.0, 2.0])
    check = Approx("values", state_key("values"), [1.0, 2.0, 3.0]).check(observed)
    assert not check.passed
    assert "shape mismatch" in check.detail


def test_log_equals_missing_log_is_empty() -> None:
    observed = _observation()
    assert LogEquals("ui.stack", "cursor - 2\n").check(observed).passed
    check = LogEquals("other", "x\n").check(observed)
    assert not check.passed
    assert check.label == "log[other]"


def test_validate_reports_first_failure() -> None:
    observed = _observation(running=False)
    verdict = validate(
        observed,
        [
            Predicate("always", lambda o: True),
            Equals("running", state_key("running"), True),
            Predicate("never", lambda o: False),
        ],
    )
    assert not verdict.passed
    assert verdict.reason == "running: expected True, got False"
    assert len(verdict.checks) == 3


def test_equals_handles_numpy_values() -> None:
    app = build_application(pygame.Surface((4, 4), depth=32))
    app.render()
    observed = Observation(state={"row": np.zeros(3)}, frame_size=app.size, frame_rgb=app.frame_bytes())
    pixel = Equals("pixel", lambda o: o.frame_array()[0, 0], BACKGROUND).check(observed)
    assert pixel.passed
    wrong = Equals("pixel", lambda o: o.frame_array()[0, 0], (0, 0, 0)).check(observed)
    assert not wrong.passed
    assert Equals("row", state_key("row"), [0.0, 0.0, 0.0]).check(observed).passed
    assert not Equals("row", state_key("row"), [0.0, 0.0]).check(observed).passed


def test_validate_empty_expectations_pass() -> None:
    assert validate(_observation(), []).passed


def test_solid_frame_digest_matches_rendered_frame() -> None:
    app = build_application(pygame.Surface((8, 6), depth=32))
    app.render()
    observed = Observation(state={}, frame_size=app.size, frame_rgb=app.frame_bytes())
    assert observed.frame_checksum == solid_frame_digest(BACKGROUND)((8, 6))
    assert FrameHash(solid_frame_digest(BACKGROUND)).check(observed).passed
    failing = FrameHash(frame_digest((8, 6), b"\x00" * 8 * 6 * 3)).check(observed)
    assert not failing.passed
    assert failing.metrics["frame.sha256"] == observed.frame_checksum
    assert observed.frame_array().shape == (6, 8, 3)
