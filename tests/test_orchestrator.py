"""
Tests for the Orchestrator batch flow.

Tests cover:
- One launch per successfully loaded image
- Partial load failures and the aggregate exit code
- Spawn failures isolated per worker
- Layout from the first good image
- Stdin mode
"""
import io

import pytest
from PySide6.QtCore import QRectF

from core.errors import ProcessStartFailedError
from core.process.orchestrator import Orchestrator
from core.process.types import RunResult, WindowPosition
from utils.image_loader import ImageLoader


class RecordingLauncher:
    """Stands in for ProcessLauncher; optionally fails selected labels."""

    def __init__(self, fail_labels=()):
        self.specs = []
        self._fail_labels = set(fail_labels)

    def launch(self, spec):
        if spec.label in self._fail_labels:
            raise ProcessStartFailedError(f"refused {spec.label}")
        self.specs.append(spec)

        class _Proc:
            pid = 4242 + len(self.specs)

        return _Proc()


SCREEN = QRectF(0, 0, 1000, 1000)


@pytest.fixture
def launcher():
    return RecordingLauncher()


def _orchestrator(launcher, screen=SCREEN, diagnostic=False):
    return Orchestrator(
        loader=ImageLoader(),
        launcher=launcher,
        screen_provider=lambda: screen,
        diagnostic=diagnostic,
    )


class TestPaths:

    def test_all_good(self, launcher, make_image_file):
        paths = [make_image_file(f"{i}.png", 100, 100) for i in range(3)]
        result = _orchestrator(launcher).run(paths)
        assert result.exit_code == 0
        assert result.loaded == 3
        assert result.spawned == 3
        assert [s.position for s in launcher.specs] == [
            WindowPosition(410.0, 490.0),
            WindowPosition(430.0, 470.0),
            WindowPosition(450.0, 450.0),
        ]
        assert [s.label for s in launcher.specs] == paths
        assert result.pids == [4243, 4244, 4245]

    def test_partial_failure_spawns_survivors(self, launcher, make_image_file, tmp_path):
        good_a = make_image_file("a.png", 100, 100)
        good_b = make_image_file("b.png", 50, 50)
        missing = str(tmp_path / "missing.png")
        garbage = tmp_path / "garbage.png"
        garbage.write_bytes(b"not an image at all")

        result = _orchestrator(launcher).run([missing, good_a, str(garbage), good_b])

        assert result.exit_code == 1
        assert result.loaded == 2
        assert result.spawned == 2
        assert result.load_failures == [missing, str(garbage)]
        assert [s.label for s in launcher.specs] == [good_a, good_b]

    def test_layout_uses_first_loaded_image(self, launcher, make_image_file, tmp_path):
        first = make_image_file("first.png", 200, 100)
        second = make_image_file("second.png", 10, 10)
        _orchestrator(launcher).run([str(tmp_path / "missing.png"), first, second])
        # count=2, size=200x100 -> start (500-100-20, 500-50+20)
        assert [s.position for s in launcher.specs] == [
            WindowPosition(380.0, 470.0),
            WindowPosition(400.0, 450.0),
        ]

    def test_all_fail_spawns_nothing(self, launcher, tmp_path):
        result = _orchestrator(launcher).run([str(tmp_path / "x.png"), str(tmp_path / "y.png")])
        assert result.exit_code == 1
        assert result.loaded == 0
        assert launcher.specs == []

    def test_no_screen_puts_windows_at_origin(self, launcher, make_image_file):
        paths = [make_image_file(f"{i}.png", 20, 20) for i in range(2)]
        result = _orchestrator(launcher, screen=None).run(paths)
        assert result.exit_code == 0
        assert [s.position for s in launcher.specs] == [WindowPosition(0.0, 0.0)] * 2

    def test_payloads_are_encoded_images(self, launcher, make_image_file):
        _orchestrator(launcher).run([make_image_file("p.png", 30, 40)])
        (spec,) = launcher.specs
        assert ImageLoader().load_bytes(spec.payload).size == (30, 40)

    def test_diagnostic_flag_reaches_specs(self, launcher, make_image_file):
        _orchestrator(launcher, diagnostic=True).run([make_image_file("d.png", 8, 8)])
        assert launcher.specs[0].diagnostic is True


class TestSpawnFailures:

    def test_spawn_failure_does_not_stop_batch(self, make_image_file):
        paths = [make_image_file(f"{i}.png", 10, 10) for i in range(3)]
        launcher = RecordingLauncher(fail_labels={paths[1]})
        result = _orchestrator(launcher).run(paths)
        assert result.exit_code == 1
        assert result.spawned == 2
        assert result.spawn_failures == [paths[1]]
        assert [s.label for s in launcher.specs] == [paths[0], paths[2]]


class TestStdin:

    def test_stdin_image(self, launcher, png_bytes):
        result = _orchestrator(launcher).run([], io.BytesIO(png_bytes))
        assert result.exit_code == 0
        (spec,) = launcher.specs
        assert spec.payload == png_bytes
        assert spec.position == WindowPosition(500.0 - 32.0, 500.0 - 24.0)

    def test_stdin_garbage(self, launcher):
        result = _orchestrator(launcher).run([], io.BytesIO(b"nope"))
        assert result.exit_code == 1
        assert result.load_failures == ["<stdin>"]
        assert launcher.specs == []

    def test_no_stream(self, launcher):
        result = _orchestrator(launcher).run([], None)
        assert result.exit_code == 1
        assert launcher.specs == []


def test_run_result_exit_codes():
    assert RunResult().exit_code == 1
    assert RunResult(loaded=1, spawned=1).exit_code == 0
    assert RunResult(loaded=1, spawned=1, load_failures=["x"]).exit_code == 1
    assert RunResult(loaded=1, spawned=0, spawn_failures=["x"]).exit_code == 1
