"""
Integration tests running real webpack builds.

These tests need Node.js with npx on PATH; webpack and webpack-cli are
fetched by npx. The eslint plugin and babel rule are overridden so no
project-local node modules are required.
"""

import asyncio
import shutil

import pytest

from simplewebpack.build import BuildPipeline, Overrides, RunOptions, StatsAggregator, WebpackEngine
from simplewebpack.config import BuildMode, RunSettings
from simplewebpack.errors import CompileError

NPX_WEBPACK = ["npx", "--yes", "-p", "webpack", "-p", "webpack-cli", "webpack"]

PLAIN_CONFIG = Overrides({"plugins": [], "module": {"rules": []}})


@pytest.mark.integration
@pytest.mark.skipif(shutil.which("npx") is None, reason="npx not installed")
class TestWebpackBuild:
    """Integration tests for complete webpack builds."""

    @pytest.fixture
    def project(self, tmp_path):
        """Create a project with two independent sources."""
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.js").write_text("console.log('a');\n")
        (src / "b.js").write_text("export const b = () => 'b';\n")
        return tmp_path

    def build(self, project, settings, options):
        engine = WebpackEngine(NPX_WEBPACK, work_dir=project)
        pipeline = BuildPipeline(settings, engine=engine)
        return asyncio.run(pipeline.run(project / "src", project / "dist", options))

    def test_development_build(self, project):
        result = self.build(
            project,
            RunSettings(project_root=project),
            RunOptions(extension=PLAIN_CONFIG),
        )

        assert result.success
        assert (project / "dist" / "a.js").is_file()
        assert (project / "dist" / "b.js").is_file()

        report = StatsAggregator(RunSettings()).aggregate(result.payload, result.elapsed)
        assert report.source_count == 2
        assert len(report.assets) == 2
        assert report.warnings is None

    def test_production_bundle(self, project):
        result = self.build(
            project,
            RunSettings(mode=BuildMode.PRODUCTION, project_root=project),
            RunOptions(name="app", extension=PLAIN_CONFIG),
        )

        assert result.success
        assert (project / "dist" / "app.min.js").is_file()

    def test_compile_error_strict(self, project):
        (project / "src" / "broken.js").write_text("import './missing.js';\n")

        with pytest.raises(CompileError) as exc_info:
            self.build(project, RunSettings(project_root=project), RunOptions(extension=PLAIN_CONFIG))

        assert "missing" in exc_info.value.details

    def test_compile_error_loose(self, project):
        (project / "src" / "broken.js").write_text("import './missing.js';\n")

        result = self.build(
            project,
            RunSettings(strict=False, project_root=project),
            RunOptions(extension=PLAIN_CONFIG),
        )

        assert result.payload is None
        assert result.elapsed > 0
