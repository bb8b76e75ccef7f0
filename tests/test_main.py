"""Tests for the command line entry point."""

import json
import pytest
from PIL import Image

import main
from chunktrace.scene_parser import DEFAULT_SCENE


class TestArguments:
    """Test argument parsing."""

    def test_defaults(self):
        args = main.build_parser().parse_args([])
        assert args.scene is None
        assert args.output == 'render.png'
        assert args.dimensions == (256, 256)
        assert args.samples == 0
        assert not args.quiet

    def test_dimensions(self):
        assert main.parse_dimensions("640x480") == (640, 480)
        assert main.parse_dimensions("32X16") == (32, 16)

    @pytest.mark.parametrize("value", ["0x5", "5x0", "640", "axb", "1x2x3"])
    def test_bad_dimensions(self, value):
        with pytest.raises(SystemExit) as exc_info:
            main.build_parser().parse_args(["-d", value])
        assert exc_info.value.code == 2

    @pytest.mark.parametrize("argv", [["-t", "0"], ["-t", "many"], ["--samples", "-1"]])
    def test_bad_numbers(self, argv):
        with pytest.raises(SystemExit):
            main.build_parser().parse_args(argv)


class TestMain:
    """Test complete runs."""

    def test_renders_default_scene(self, tmp_path, capsys):
        output = tmp_path / "out" / "render.png"
        code = main.main(["-o", str(output), "-d", "16x12", "-t", "2"])

        assert code == 0
        with Image.open(output) as image:
            assert image.size == (16, 12)
            # Top left corner is sky
            assert image.getpixel((0, 0)) == (0, 0, 255)
        out = capsys.readouterr().out
        assert "loading scene..." in out
        assert "done rendering in" in out

    def test_quiet_only_prints_time(self, tmp_path, capsys):
        output = tmp_path / "render.png"
        code = main.main(["-o", str(output), "-d", "8x8", "-q"])

        assert code == 0
        out = capsys.readouterr().out
        assert out.startswith("done rendering in")
        assert out.count("\n") == 1

    def test_scene_file(self, tmp_path):
        scene_path = tmp_path / "scene.json"
        scene_path.write_text(json.dumps(DEFAULT_SCENE))
        output = tmp_path / "render.png"

        code = main.main(["-s", str(scene_path), "-o", str(output), "-d", "8x8", "--samples", "4", "-q"])
        assert code == 0
        assert output.exists()

    def test_missing_scene(self, tmp_path, capsys):
        code = main.main(["-s", str(tmp_path / "absent.json"), "-o", str(tmp_path / "r.png"), "-q"])
        assert code == 2
        assert "error:" in capsys.readouterr().err

    def test_bad_scene(self, tmp_path, capsys):
        scene_path = tmp_path / "scene.json"
        scene_path.write_text(json.dumps({"objects": []}))
        code = main.main(["-s", str(scene_path), "-o", str(tmp_path / "r.png"), "-q"])
        assert code == 2
        assert "missing required field" in capsys.readouterr().err

    def test_undecodable_scene(self, tmp_path, capsys):
        scene_path = tmp_path / "scene.json"
        scene_path.write_bytes(b"\xff\xfe\x00\x01")
        code = main.main(["-s", str(scene_path), "-o", str(tmp_path / "r.png"), "-q"])
        assert code == 2
        assert "error:" in capsys.readouterr().err

    def test_scene_is_directory(self, tmp_path, capsys):
        folder = tmp_path / "scenes"
        folder.mkdir()
        code = main.main(["-s", str(folder), "-o", str(tmp_path / "r.png"), "-q"])
        assert code == 2
        assert "error:" in capsys.readouterr().err
