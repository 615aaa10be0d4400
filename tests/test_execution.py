"""Test single renders and sweeps run in-process."""

import PIL.Image

from mandelbands import execution
from mandelbands.config import RenderConfig
from mandelbands.execution import run_single_render, run_sweep


def _config(output, workers=2):
    return RenderConfig(str(output), 12, 9, complex(-2.0, 1.0), complex(1.0, -1.0), workers)


def test_run_single_render_writes_image(tmp_path, capsys):
    output = tmp_path / "single.png"
    report = run_single_render(_config(output))

    captured = capsys.readouterr()
    assert "[Run] Starting render" in captured.out
    assert "[Timing] Total" in captured.out
    with PIL.Image.open(output) as image:
        assert image.size == (12, 9)
    assert report.pixels.size == 12 * 9


def test_sweep_reports_failures_and_continues(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    configs = [_config(blocker / "bad.png"), _config(tmp_path / "good.png", workers=1)]

    rc = run_sweep(None, "TESTS", configs, "inline", verbose=False)

    captured = capsys.readouterr()
    assert rc == 1
    assert "Failed:     1" in captured.out
    assert "FAILED" in captured.err
    assert (tmp_path / "good.png").exists()


def test_empty_sweep_fails(capsys):
    assert run_sweep(None, configs=[], descriptor="empty") == 1
    assert "No configurations" in capsys.readouterr().err


def test_sweep_counts_any_band_failure(tmp_path, monkeypatch, capsys):
    real_render = execution.render

    def render_or_fail(config, *, verbose=True):
        if config.workers == 3:
            raise AssertionError("bands do not tile the buffer")
        return real_render(config, verbose=verbose)

    monkeypatch.setattr(execution, "render", render_or_fail)
    configs = [_config(tmp_path / "broken.png", workers=3), _config(tmp_path / "fine.png")]

    rc = run_sweep(None, "TESTS", configs, "inline", verbose=False)

    captured = capsys.readouterr()
    assert rc == 1
    assert "Failed:     1" in captured.out
    assert "bands do not tile the buffer" in captured.err
    assert not (tmp_path / "broken.png").exists()
    assert (tmp_path / "fine.png").exists()
