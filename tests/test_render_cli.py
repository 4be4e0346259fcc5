from pathlib import Path

import PIL.Image
import pytest

import render


def test_renders_png(tmp_path, capsys):
    output = tmp_path / "out.png"
    code = render.main([
        "--width", "8", "--height", "6", "--workers", "2",
        "--max-iterations", "40", "--output", str(output),
    ])
    assert code == 0
    with PIL.Image.open(output) as image:
        assert image.size == (8, 6)
    assert "Elapsed:" in capsys.readouterr().out


def test_python_kernel_and_gradient(tmp_path):
    output = tmp_path / "out.png"
    code = render.main([
        "--width", "5", "--height", "5", "--workers", "1", "--kernel", "python",
        "--coloring", "gradient", "--top-left", "-1.5", "1.0", "--bottom-right", "0.5", "-1.0",
        "--output", str(output),
    ])
    assert code == 0
    assert output.exists()


@pytest.mark.parametrize(
    "args",
    [
        ["--workers", "0"],
        ["--workers", "9"],
        ["--width", "0"],
        ["--max-iterations", "0"],
        ["--top-left", "1.0", "1.0", "--bottom-right", "1.0", "-1.0"],
    ],
)
def test_configuration_errors_exit_with_usage(tmp_path, args):
    output = tmp_path / "out.png"
    with pytest.raises(SystemExit) as info:
        render.main(["--width", "8", "--height", "8", *args, "--output", str(output)])
    assert info.value.code == 2
    assert not output.exists()


@pytest.mark.parametrize(
    "output, fmt, expected",
    [("a.png", None, "png"), ("a.JPG", None, "jpg"), ("a", None, "png"), ("a.png", ".TIFF", "tiff")],
)
def test_resolve_format(output, fmt, expected):
    assert render.resolve_format(Path(output), fmt) == expected
