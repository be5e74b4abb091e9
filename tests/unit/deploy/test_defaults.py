"""Tests for default config deployment."""

import json

from simplewebpack.deploy import DEFAULT_CONFIGS, deploy_default_config, deploy_default_configs
from simplewebpack.deploy.defaults import load_template


class TestDeployDefaults:
    """Test writing the eslint and babel templates."""

    def test_templates_are_valid_json(self):
        for _name, template in DEFAULT_CONFIGS:
            assert isinstance(load_template(template), dict)

    def test_deploy_all(self, tmp_path):
        results = deploy_default_configs(tmp_path)

        assert [result.path.name for result in results] == [".eslintrc", ".babelrc"]
        assert all(result.written for result in results)
        babelrc = json.loads((tmp_path / ".babelrc").read_text())
        assert babelrc == load_template("babelrc.json")

    def test_existing_file_is_kept(self, tmp_path):
        existing = tmp_path / ".eslintrc"
        existing.write_text("{}")

        result = deploy_default_config(".eslintrc", "eslintrc.json", tmp_path)

        assert result.written is False
        assert "already exists" in result.message
        assert existing.read_text() == "{}"

    def test_creates_target_directory(self, tmp_path):
        result = deploy_default_config(".babelrc", "babelrc.json", tmp_path / "new" / "project")

        assert result.written is True
        assert result.path.is_file()
        assert result.message.startswith("Created defaults config")
