"""Copy an acquired template into a new project and customise it."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from robot_cli.catalog import TemplateDescriptor
from robot_cli.errors import TargetExists

from .copier import EXCLUDED_PATTERNS, copy_template
from .models import ProjectConfig
from .rewriter import rename_dotfiles, rewrite_manifest, rewrite_readme

logger = logging.getLogger(__name__)


class ProjectMaterializer:
    """Writes a project directory from a template tree.

    Side effects are confined to the target directory; the source tree is
    only read.  There is no rollback: a failure leaves the target partially
    written.
    """

    def __init__(self, excluded: tuple[str, ...] = EXCLUDED_PATTERNS) -> None:
        self.excluded = excluded

    async def materialize(
        self,
        source_tree: Path,
        target_path: Path,
        project_config: ProjectConfig,
        descriptor: TemplateDescriptor | None = None,
    ) -> int:
        """Copy ``source_tree`` to ``target_path`` and rewrite its metadata.

        Args:
            source_tree: Validated template root.
            target_path: Directory to create. Must not exist.
            project_config: Name, description and author to write.
            descriptor: Template used, for the default description.

        Returns:
            Number of files copied.

        Raises:
            TargetExists: ``target_path`` already exists.
            CopyFailure: Copying failed.
            ConfigRewriteFailure: A metadata rewrite failed.
        """
        source_tree = Path(source_tree)
        target_path = Path(target_path)
        if await asyncio.to_thread(target_path.exists):
            raise TargetExists(f"Target directory already exists: {target_path}", path=str(target_path))

        copied = await asyncio.to_thread(copy_template, source_tree, target_path, self.excluded)
        logger.debug("Copied %d files into %s", copied, target_path)

        template_name = descriptor.display_name if descriptor else source_tree.name
        await asyncio.to_thread(rewrite_manifest, target_path, project_config, template_name)
        await asyncio.to_thread(rewrite_readme, target_path, project_config, template_name)
        renamed = await asyncio.to_thread(rename_dotfiles, target_path)
        if renamed:
            logger.debug("Renamed staged dotfiles: %s", ", ".join(renamed))
        return copied
