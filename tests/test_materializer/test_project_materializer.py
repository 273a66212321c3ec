"""Unit tests for ProjectMaterializer and ProjectConfig (robot_cli.materializer).

Tests cover:
- ProjectConfig validation
- materialize: copy, rewrites, dotfile renames, file count
- TargetExists when the target is already present
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from robot_cli.catalog import TemplateDescriptor
from robot_cli.errors import TargetExists
from robot_cli.materializer import PackageManager, ProjectConfig, ProjectMaterializer


@pytest.fixture
def source_tree(tmp_path):
    root = tmp_path / "template"
    (root / "src").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / "package.json").write_text(json.dumps({"name": "robot-admin"}))
    (root / "README.md").write_text("# Robot Admin\n\nProject description\n")
    (root / "src" / "main.ts").write_text("export {}\n")
    (root / "_gitignore").write_text("node_modules\n")
    return root


class TestProjectConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = ProjectConfig(name="my-app")
        assert config.initialize_vcs is True
        assert config.install_dependencies is True
        assert config.package_manager is None

    @pytest.mark.unit
    def test_name_is_stripped(self):
        assert ProjectConfig(name="  my-app ").name == "my-app"

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "my app", ".hidden", "node_modules", "a" * 215])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            ProjectConfig(name=name)

    @pytest.mark.unit
    def test_package_manager_from_string(self):
        assert ProjectConfig(name="x", package_manager="pnpm").package_manager is PackageManager.PNPM


class TestMaterialize:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_materialize(self, tmp_path, source_tree):
        target = tmp_path / "my-app"
        descriptor = TemplateDescriptor(
            key="robot-admin", display_name="Robot Admin", source_location="https://github.com/o/Robot_Admin"
        )
        config = ProjectConfig(name="my-app", author="Sam")

        count = await ProjectMaterializer().materialize(source_tree, target, config, descriptor)

        assert count == 4
        assert not (target / ".git").exists()
        assert (target / ".gitignore").is_file()
        assert not (target / "_gitignore").exists()
        manifest = json.loads((target / "package.json").read_text())
        assert manifest["name"] == "my-app"
        assert manifest["description"] == "Project created from Robot Admin"
        assert manifest["author"] == "Sam"
        assert (target / "README.md").read_text().startswith("# my-app")
        assert (source_tree / "_gitignore").exists()
        assert json.loads((source_tree / "package.json").read_text())["name"] == "robot-admin"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_target_exists(self, tmp_path, source_tree):
        target = tmp_path / "my-app"
        target.mkdir()
        with pytest.raises(TargetExists):
            await ProjectMaterializer().materialize(source_tree, target, ProjectConfig(name="my-app"))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_custom_exclusions(self, tmp_path, source_tree):
        target = tmp_path / "my-app"
        await ProjectMaterializer(excluded=(".git", "src")).materialize(
            source_tree, target, ProjectConfig(name="my-app")
        )
        assert not (target / "src").exists()
        # without a descriptor the source directory name is used
        manifest = json.loads((target / "package.json").read_text())
        assert manifest["description"] == "Project created from template"
