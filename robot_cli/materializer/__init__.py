"""Robot CLI materializer -- turns a template tree into a new project.

Key classes:
    ProjectMaterializer - copy with exclusions, then metadata rewrites
    ProjectConfig       - the user's answers (name, author, ...)
    StepResult          - outcome of the optional git/install steps
"""

from .copier import EXCLUDED_PATTERNS, copy_template, should_skip
from .materializer import ProjectMaterializer
from .models import PACKAGE_MANAGER_LABELS, PackageManager, ProjectConfig
from .post_steps import StepResult, detect_package_manager, init_vcs, install_dependencies
from .rewriter import (
    DOTFILE_RENAMES,
    default_description,
    rename_dotfiles,
    rewrite_manifest,
    rewrite_readme,
)

__all__ = [
    "ProjectMaterializer",
    "ProjectConfig",
    "PackageManager",
    "PACKAGE_MANAGER_LABELS",
    "EXCLUDED_PATTERNS",
    "copy_template",
    "should_skip",
    "DOTFILE_RENAMES",
    "default_description",
    "rename_dotfiles",
    "rewrite_manifest",
    "rewrite_readme",
    "StepResult",
    "detect_package_manager",
    "init_vcs",
    "install_dependencies",
]
