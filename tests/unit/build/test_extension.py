"""Tests for config extension loading."""

import pytest

from simplewebpack.build.extension import Mutator, Overrides, as_extension, load_extension
from simplewebpack.errors import ExtensionLoadError


class TestAsExtension:
    """Test wrapping loaded values."""

    def test_callable_becomes_mutator(self):
        def extend(config, source, target, context):
            pass

        assert as_extension(extend) == Mutator(extend)

    def test_mapping_becomes_overrides(self):
        extension = as_extension({"devtool": "eval"})

        assert isinstance(extension, Overrides)
        assert extension.values == {"devtool": "eval"}

    def test_variant_passes_through(self):
        overrides = Overrides({})
        assert as_extension(overrides) is overrides

    def test_invalid_value(self):
        with pytest.raises(ExtensionLoadError, match="mapping or function"):
            as_extension(["not", "valid"])


class TestLoadExtension:
    """Test loading extension files."""

    def test_python_function(self, tmp_path):
        path = tmp_path / "extend.webpack.config.py"
        path.write_text(
            "def extend(config, source, target, context):\n"
            "    config['devtool'] = 'eval'\n"
        )

        extension = load_extension(path)

        assert isinstance(extension, Mutator)
        config = {}
        extension.func(config, None, None, None)
        assert config == {"devtool": "eval"}

    def test_python_mapping(self, tmp_path):
        path = tmp_path / "extend.webpack.config.py"
        path.write_text("extend = {'target': 'web'}\n")

        extension = load_extension(str(path))

        assert extension == Overrides({"target": "web"})

    def test_json_overrides(self, tmp_path):
        path = tmp_path / "extend.json"
        path.write_text('{"performance": {"hints": false}}')

        extension = load_extension(path)

        assert extension == Overrides({"performance": {"hints": False}})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExtensionLoadError, match="Failed to load"):
            load_extension(tmp_path / "missing.py")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "extend.json"
        path.write_text("{not json")

        with pytest.raises(ExtensionLoadError, match="Failed to load") as exc_info:
            load_extension(path)

        assert exc_info.value.cause is not None

    def test_json_with_wrong_shape(self, tmp_path):
        path = tmp_path / "extend.json"
        path.write_text("[1, 2]")

        with pytest.raises(ExtensionLoadError, match="mapping or function"):
            load_extension(path)

    def test_module_raises_on_import(self, tmp_path):
        path = tmp_path / "extend.webpack.config.py"
        path.write_text("raise RuntimeError('boom')\n")

        with pytest.raises(ExtensionLoadError) as exc_info:
            load_extension(path)

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_module_without_extend(self, tmp_path):
        path = tmp_path / "extend.webpack.config.py"
        path.write_text("value = 1\n")

        with pytest.raises(ExtensionLoadError, match="must define 'extend'"):
            load_extension(path)
