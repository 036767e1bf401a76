"""Tests for the dithertone command line."""

import pytest
from PIL import Image

from main import EXIT_IO_ERROR, EXIT_OK, EXIT_USAGE, build_params, parse_assignments, run
from engine.params import DitherAlgorithm, Effect


@pytest.fixture
def source_png(tmp_path):
    path = tmp_path / "in.png"
    img = Image.linear_gradient("L").resize((32, 16)).convert("RGBA")
    img.save(path)
    return str(path)


def test_preset_run_writes_output(tmp_path, source_png):
    out = tmp_path / "out.png"
    assert run([source_png, str(out), "--preset", "Retro Game Boy"]) == EXIT_OK
    with Image.open(out) as img:
        assert img.size == (32, 16)
        colors = {c for _, c in img.convert("RGB").getcolors()}
    # Bitonal dither through the gameboy palette: only its two colors remain
    assert colors <= {(15, 56, 15), (155, 188, 15)}


def test_set_overrides(tmp_path, source_png):
    out = tmp_path / "out.png"
    code = run(
        [
            source_png,
            str(out),
            "--set",
            "effect=threshold",
            "--set",
            "threshold=200",
        ]
    )
    assert code == EXIT_OK
    assert out.exists()


def test_parse_assignments_types():
    updates = parse_assignments(
        ["effectScale=1.5", "invert=true", "ditheringAlgorithm=atkinson", "depth=40"]
    )
    assert updates == {
        "effect_scale": 1.5,
        "invert": True,
        "dithering_algorithm": "atkinson",
        "depth": 40,
    }


@pytest.mark.parametrize("item", ["nonsense", "=3", "volume=11"])
def test_parse_assignments_rejects(item):
    with pytest.raises(ValueError):
        parse_assignments([item])


def test_build_params_layers_preset_set_and_seed():
    params = build_params("Static TV", ["blur=0"], 7)
    assert params.effect is Effect.DITHERING
    assert params.dithering_algorithm is DitherAlgorithm.WHITE_NOISE
    assert params.blur == 0
    assert params.seed == 7


@pytest.mark.parametrize(
    "extra",
    [
        ["--preset", "Vaporwave"],
        ["--set", "ditheringAlgorithm=hilbert"],
        ["--set", "brightness=loud"],
        ["--set", "volume=3"],
    ],
)
def test_bad_parameters_exit_2(tmp_path, source_png, extra):
    assert run([source_png, str(tmp_path / "out.png"), *extra]) == EXIT_USAGE


def test_missing_output_argument_exits_2(source_png):
    assert run([source_png]) == EXIT_USAGE


def test_bad_seed_is_an_argparse_error(source_png, tmp_path):
    with pytest.raises(SystemExit) as exc:
        run([source_png, str(tmp_path / "o.png"), "--seed", "abc"])
    assert exc.value.code == 2


def test_missing_input_exits_1(tmp_path):
    assert run([str(tmp_path / "none.png"), str(tmp_path / "out.png")]) == EXIT_IO_ERROR


def test_bad_output_extension_exits_1(tmp_path, source_png):
    assert run([source_png, str(tmp_path / "out.txt")]) == EXIT_IO_ERROR


def test_list_algorithms(capsys):
    assert run(["--list-algorithms"]) == EXIT_OK
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 28
    assert lines[0].split("\t")[0] == "floyd-steinberg"


def test_list_presets_and_palettes(capsys):
    assert run(["--list-presets", "--list-palettes"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "Classic Newspaper" in out
    assert "lavender-sage" in out
