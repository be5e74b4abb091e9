"""Tests for the simple-webpack command line."""

from unittest.mock import patch

import pytest

from simplewebpack.build.engine import CompileStats
from simplewebpack.cli import BuildArgs, main, resolve_run_options, resolve_settings
from simplewebpack.config import BuildMode, ProjectConfigError, RunSettings
from simplewebpack.build.source_resolver import ReadMode
from simplewebpack.build.extension import Overrides


class FakeWebpackEngine:
    """Stands in for WebpackEngine; emits one asset per entry."""

    configs = []
    errors = []
    warnings = []

    def __init__(self, command=None, work_dir=None):
        self.command = command
        self.work_dir = work_dir

    async def compile(self, config):
        FakeWebpackEngine.configs.append(config)
        suffix = ".min.js" if config["mode"] == "production" else ".js"
        return CompileStats({
            "hash": "cafe",
            "time": 12,
            "assets": [
                {"name": name + suffix, "size": 2048, "chunkNames": [name]}
                for name in config["entry"]
            ],
            "entrypoints": {name: {} for name in config["entry"]},
            "errors": list(FakeWebpackEngine.errors),
            "warnings": list(FakeWebpackEngine.warnings),
        })


class TestMain:
    """Tests for main() runs against a fake engine."""

    @pytest.fixture(autouse=True)
    def environment(self, tmp_path, monkeypatch):
        """Run in an empty project directory with the fake engine."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("NODE_ENV", raising=False)
        FakeWebpackEngine.configs = []
        FakeWebpackEngine.errors = []
        FakeWebpackEngine.warnings = []
        with (
            patch("simplewebpack.cli.WebpackEngine", FakeWebpackEngine),
            patch("simplewebpack.cli.setup_logging"),
        ):
            yield

    @pytest.fixture
    def src(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.js").write_text("export default 1;")
        (src / "b.js").write_text("export default 2;")
        return src

    def run_main(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        return exc_info.value.code

    def test_build_success(self, src, tmp_path, capsys):
        code = self.run_main(["src", "dist"])

        out = capsys.readouterr().out
        assert code == 0
        assert "simple-webpack wrote [ 2 ] files with [0] warnings in" in out
        assert (tmp_path / "dist").is_dir()
        assert FakeWebpackEngine.configs[0]["entry"] == {"a": "./a.js", "b": "./b.js"}

    def test_production_flag(self, src):
        assert self.run_main(["src", "dist", "-p"]) == 0

        config = FakeWebpackEngine.configs[0]
        assert config["mode"] == "production"
        assert config["output"]["filename"] == "[name].min.js"

    def test_node_env_production(self, src, monkeypatch):
        monkeypatch.setenv("NODE_ENV", "production")

        assert self.run_main(["src", "dist"]) == 0

        assert FakeWebpackEngine.configs[0]["mode"] == "production"

    def test_development_flag_beats_node_env(self, src, monkeypatch):
        monkeypatch.setenv("NODE_ENV", "production")

        assert self.run_main(["src", "dist", "-d"]) == 0

        assert FakeWebpackEngine.configs[0]["mode"] == "development"

    def test_conflicting_modes(self, src, capsys):
        assert self.run_main(["src", "dist", "-d", "-p"]) == 1
        assert "Cannot force production and development" in capsys.readouterr().out

    def test_bundle(self, src, capsys):
        assert self.run_main(["src", "dist", "-b", "-n", "app", "-m", "core-js"]) == 0

        assert FakeWebpackEngine.configs[0]["entry"] == {"app": ["core-js", "./a.js", "./b.js"]}
        assert "wrote [ 1 ] file with" in capsys.readouterr().out

    def test_single_argument_is_target(self, src, tmp_path, monkeypatch):
        monkeypatch.chdir(src)

        assert self.run_main(["../out"]) == 0

        assert (tmp_path / "out").is_dir()
        assert FakeWebpackEngine.configs[0]["context"] == str(src.resolve())

    def test_missing_source(self, capsys):
        assert self.run_main(["missing", "dist"]) == 1
        assert "Source not found" in capsys.readouterr().out

    def test_recursive_requires_filter(self, src, capsys):
        assert self.run_main(["src", "dist", "--recursive"]) == 1
        assert "requires a read filter" in capsys.readouterr().out

    def test_recursive_with_include(self, src):
        (src / "lib").mkdir()
        (src / "lib" / "c.js").write_text("")

        assert self.run_main(["src", "dist", "--recursive", "--include", r"\.js$"]) == 0

        assert set(FakeWebpackEngine.configs[0]["entry"]) == {"a", "b", "c"}

    def test_invalid_include_pattern(self, src, capsys):
        assert self.run_main(["src", "dist", "--recursive", "--include", "("]) == 1
        assert "Invalid read filter pattern" in capsys.readouterr().out

    def test_strict_compile_error(self, src, capsys):
        FakeWebpackEngine.errors = ["Module not found"]

        assert self.run_main(["src", "dist"]) == 1
        assert "Compile error" in capsys.readouterr().out

    def test_loose_compile_error(self, src, capsys):
        FakeWebpackEngine.errors = ["Module not found"]

        assert self.run_main(["src", "dist", "-u"]) == 1
        assert "simple-webpack build failed!" in capsys.readouterr().out

    def test_strict_warnings_are_printed(self, src, capsys):
        FakeWebpackEngine.warnings = ["asset size limit"]

        assert self.run_main(["src", "dist"]) == 0

        out = capsys.readouterr().out
        assert "Webpack warnings:" in out
        assert "asset size limit" in out
        assert "with [1] warning in" in out

    def test_loose_warnings_in_stats(self, src, capsys):
        FakeWebpackEngine.warnings = ["asset size limit"]

        assert self.run_main(["src", "dist", "-u", "-s"]) == 0

        out = capsys.readouterr().out
        assert "Webpack warnings:" not in out
        assert "Overview:" in out
        assert "Warnings:" in out

    def test_stats(self, src, capsys):
        assert self.run_main(["src", "dist", "-s"]) == 0

        out = capsys.readouterr().out
        assert "Overview:" in out
        assert "Build:    cafe" in out
        assert "./a.js" in out

    def test_verbose(self, src, tmp_path, capsys):
        assert self.run_main(["src", "dist", "-i"]) == 0

        out = capsys.readouterr().out
        assert "Running in strict mode!" in out
        assert "Wrote to: " + str((tmp_path / "dist").resolve()) in out
        assert "warning" not in out.split("simple-webpack wrote")[1]

    def test_invalid_colors_fall_back(self, src, capsys):
        assert self.run_main(["src", "dist", "-s", "--colors", "500,100"]) == 0
        assert "Using default size limits" in capsys.readouterr().out

    def test_non_numeric_colors(self, src, capsys):
        assert self.run_main(["src", "dist", "--colors", "big"]) == 1
        assert "Invalid option" in capsys.readouterr().out

    def test_show_config(self, src, capsys):
        assert self.run_main(["src", "dist", "-y"]) == 0

        out = capsys.readouterr().out
        assert "module.exports = " in out
        assert FakeWebpackEngine.configs == []

    def test_extend_file(self, src, tmp_path):
        (tmp_path / "extend.webpack.config.py").write_text("extend = {'target': 'web'}\n")

        assert self.run_main(["src", "dist", "-e"]) == 0

        assert FakeWebpackEngine.configs[0]["target"] == "web"

    def test_missing_extend_file(self, src, capsys):
        assert self.run_main(["src", "dist", "-e"]) == 1
        assert "Failed to load config extension" in capsys.readouterr().out

    def test_project_config(self, src, tmp_path):
        (tmp_path / "simplewebpack.ini").write_text(
            "[simplewebpack]\nbundle = yes\nname = site\n\n"
            "[simplewebpack:production]\npublic = /static/\n"
        )

        assert self.run_main(["src", "dist", "-p"]) == 0

        config = FakeWebpackEngine.configs[0]
        assert list(config["entry"]) == ["site"]
        assert config["output"]["publicPath"] == "/static/"

    def test_project_config_mode(self, src, tmp_path):
        (tmp_path / "simplewebpack.ini").write_text(
            "[simplewebpack]\nmode = production\n\n"
            "[simplewebpack:production]\npublic = /prod/\n"
        )

        assert self.run_main(["src", "dist"]) == 0

        config = FakeWebpackEngine.configs[0]
        assert config["mode"] == "production"
        assert config["output"]["publicPath"] == "/prod/"

    def test_project_config_loose(self, src, tmp_path, capsys):
        (tmp_path / "simplewebpack.ini").write_text("[simplewebpack]\nloose = yes\n")
        FakeWebpackEngine.errors = ["Module not found"]

        assert self.run_main(["src", "dist"]) == 1
        assert "simple-webpack build failed!" in capsys.readouterr().out

    def test_project_config_invalid_boolean(self, src, tmp_path, capsys):
        (tmp_path / "simplewebpack.ini").write_text("[simplewebpack]\nverbose = sometimes\n")

        assert self.run_main(["src", "dist"]) == 1
        assert "Invalid boolean" in capsys.readouterr().out

    def test_target_parent_is_file(self, src, tmp_path, capsys):
        (tmp_path / "afile").write_text("")

        assert self.run_main(["src", "afile/dist"]) == 1
        assert "Cannot create target directory" in capsys.readouterr().out

    def test_show_config_unrenderable_override(self, src, tmp_path, capsys):
        (tmp_path / "ext.py").write_text("extend = {'externals': lambda: 1}\n")

        assert self.run_main(["src", "dist", "-y", "-e", "ext.py"]) == 1
        assert "ConfigRenderError" in capsys.readouterr().out

    def test_project_config_multiline_modules(self, src, tmp_path):
        (tmp_path / "simplewebpack.ini").write_text(
            "[simplewebpack]\nbundle = yes\nmodules =\n    core-js\n    regenerator-runtime\n"
        )

        assert self.run_main(["src", "dist"]) == 0

        assert FakeWebpackEngine.configs[0]["entry"] == {
            "bundle": ["core-js", "regenerator-runtime", "./a.js", "./b.js"]
        }

    def test_project_config_invalid_colors(self, src, tmp_path, capsys):
        (tmp_path / "simplewebpack.ini").write_text("[simplewebpack]\ncolors = small, large\n")

        assert self.run_main(["src", "dist"]) == 1
        assert "Invalid colors" in capsys.readouterr().out

    def test_project_config_colors(self, src, tmp_path, capsys):
        (tmp_path / "simplewebpack.ini").write_text("[simplewebpack]\ncolors = 1, 2, 3\n")

        assert self.run_main(["src", "dist", "-s"]) == 0

        out = capsys.readouterr().out
        assert "Using default size limits" not in out
        # 2 KiB assets fall between the first and third limits
        assert "\033[33m" in out

    def test_version(self, capsys):
        assert self.run_main(["--version"]) == 0
        assert "simple-webpack@0.1.0" in capsys.readouterr().out

    def test_defaults(self, tmp_path, capsys):
        assert self.run_main(["--defaults", "project"]) == 0

        assert (tmp_path / "project" / ".eslintrc").is_file()
        assert (tmp_path / "project" / ".babelrc").is_file()
        assert "Created defaults config" in capsys.readouterr().out


class TestResolveSettings:
    """Tests for mode and policy resolution."""

    def test_defaults(self):
        settings = resolve_settings(BuildArgs(source="src", target="dist"), environ={})

        assert settings.mode is BuildMode.DEVELOPMENT
        assert settings.strict is True

    def test_loose(self):
        assert resolve_settings(BuildArgs(source="", target="dist", loose=True), environ={}).strict is False

    def test_ini_mode(self):
        args = BuildArgs(source="", target="dist", config_values={"mode": "production"})

        assert resolve_settings(args, environ={}).mode is BuildMode.PRODUCTION

    def test_flag_beats_ini_mode(self):
        args = BuildArgs(source="", target="dist", development=True, config_values={"mode": "production"})

        assert resolve_settings(args, environ={"NODE_ENV": "production"}).mode is BuildMode.DEVELOPMENT

    def test_invalid_ini_mode(self):
        args = BuildArgs(source="", target="dist", config_values={"mode": "staging"})

        with pytest.raises(ProjectConfigError, match="Invalid mode"):
            resolve_settings(args, environ={})


class TestResolveRunOptions:
    """Tests for translating arguments into run options."""

    def test_defaults(self):
        options = resolve_run_options(BuildArgs(source="src", target="dist"), RunSettings())

        assert options.read_mode is ReadMode.NONE
        assert options.read_filter is None
        assert options.name is None
        assert options.prepend == ()
        assert options.extension is None

    def test_bundle_default_name(self):
        options = resolve_run_options(BuildArgs(source="src", target="dist", bundle=True), RunSettings())

        assert options.name == "bundle"

    def test_map_defaults_by_mode(self):
        args = BuildArgs(source="src", target="dist", devtool=True)

        assert resolve_run_options(args, RunSettings()).devtool == "eval-source-map"
        assert resolve_run_options(args, RunSettings(mode=BuildMode.PRODUCTION)).devtool == "source-map"

    def test_config_values(self):
        args = BuildArgs(
            source="src",
            target="dist",
            config_values={"read": "index", "map": "cheap-source-map"},
            config_modules=["a", "b"],
        )

        options = resolve_run_options(args, RunSettings())

        assert options.read_mode is ReadMode.INDEX
        assert options.prepend == ("a", "b")
        assert options.devtool == "cheap-source-map"

    def test_extension_file(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text('{"target": "node"}')

        options = resolve_run_options(BuildArgs(source="src", target="dist", extend=str(path)), RunSettings())

        assert options.extension == Overrides({"target": "node"})

    def test_analyzer(self):
        args = BuildArgs(source="src", target="dist", analyze="json", stats=True)

        analyzer = resolve_run_options(args, RunSettings()).analyzer

        assert analyzer.mode == "json"
        assert analyzer.generate_stats_file is True
