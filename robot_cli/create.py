"""Project creation orchestrator.

Wires the wizard, the acquisition pipeline and the materializer together:

1. select a template (wizard, or the ``--template`` shortcut)
2. resolve and validate the project name
3. collect the project configuration
4. confirm the summary
5. clear an existing target directory (after confirmation)
6. acquire the template tree
7. materialize the project
8. run the optional git and install steps
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from rich.panel import Panel

from robot_cli.acquisition import AcquisitionPipeline, remove_path
from robot_cli.catalog import Catalog, TemplateDescriptor
from robot_cli.config import Config
from robot_cli.errors import InputValidationError, UserCancelled
from robot_cli.materializer import (
    PACKAGE_MANAGER_LABELS,
    PackageManager,
    ProjectConfig,
    ProjectMaterializer,
    StepResult,
    init_vcs,
    install_dependencies,
)
from robot_cli.navigation import Choice, NavigationEngine, Prompter
from robot_cli.utils import (
    console,
    create_progress,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    validate_project_name,
)

_VARIANT_SUFFIX = ("-full", "-lite", "-base")


@dataclass
class CreateOptions:
    """Command-line options of ``robot create``."""

    template: str | None = None
    use_cache: bool = True
    skip_install: bool = False
    directory: Path = field(default_factory=Path.cwd)


@dataclass
class CreateResult:
    project_path: Path
    template: TemplateDescriptor
    config: ProjectConfig
    files_copied: int = 0
    steps: list[StepResult] = field(default_factory=list)


def generate_default_project_name(template: TemplateDescriptor | None) -> str:
    """``my-<template key without variant suffix>-<last 4 digits of the clock>``."""
    if template is None:
        return "my-project"
    base = template.key or "project"
    for suffix in _VARIANT_SUFFIX:
        if base.endswith(suffix):
            base = base[: -len(suffix)]
            break
    stamp = str(int(time.time() * 1000))[-4:]
    return f"my-{base}-{stamp}"


def check_project_name(name: str) -> str:
    """Return the trimmed ``name``.

    Raises:
        InputValidationError: The name breaks a naming rule.
    """
    errors = validate_project_name(name)
    if errors:
        raise InputValidationError(f"Invalid project name: {name!r}", errors)
    return name.strip()


def _name_problem(value: str) -> str | None:
    errors = validate_project_name(value)
    return errors[0] if errors else None


class ProjectCreator:
    """Runs one ``robot create`` invocation.

    Args:
        catalog: Catalog to select from.
        prompter: User interface for every question.
        pipeline: Template acquisition pipeline.
        materializer: Project writer.
        config: Global configuration (install timeout).
    """

    def __init__(
        self,
        catalog: Catalog,
        prompter: Prompter,
        pipeline: AcquisitionPipeline,
        materializer: ProjectMaterializer | None = None,
        config: Config | None = None,
    ) -> None:
        self.catalog = catalog
        self.prompter = prompter
        self.pipeline = pipeline
        self.materializer = materializer or ProjectMaterializer()
        self.config = config or pipeline.config

    # -- Questions ---------------------------------------------------------

    def select_template(self, template_key: str | None) -> TemplateDescriptor:
        return NavigationEngine(self.catalog, self.prompter).run(template_key)

    def resolve_project_name(self, project_name: str | None, template: TemplateDescriptor) -> str:
        """Validate a name given on the command line, or ask for one."""
        if project_name:
            try:
                return check_project_name(project_name)
            except InputValidationError as exc:
                print_error("Invalid project name:")
                for error in exc.errors:
                    console.print(f"[red]   {error}[/red]")
                console.print()
            return self.prompter.text("Enter a new project name:", validate=_name_problem)

        return self.prompter.text(
            "Project name:",
            default=generate_default_project_name(template),
            validate=_name_problem,
        )

    def configure_project(self, name: str, options: CreateOptions) -> ProjectConfig:
        """Ask for git, install, package manager, description and author."""
        while True:
            console.print()
            console.print("[blue]Project configuration[/blue]")
            initialize_vcs = self.prompter.confirm("Initialise a git repository?", default=True)
            install = self.prompter.confirm(
                "Install dependencies now?", default=not options.skip_install
            )
            manager: PackageManager | None = None
            if install:
                manager = self.prompter.select(
                    "Package manager:",
                    [Choice(label=label, value=pm) for pm, label in PACKAGE_MANAGER_LABELS.items()],
                )
            description = self.prompter.text("Project description (optional):")
            author = self.prompter.text("Author (optional):")

            if self.prompter.confirm("Confirm this configuration?", default=True):
                return ProjectConfig(
                    name=name,
                    initialize_vcs=initialize_vcs,
                    install_dependencies=install,
                    package_manager=manager,
                    description=description,
                    author=author,
                )

            action = self.prompter.select(
                "What would you like to do?",
                [
                    Choice(label="Reconfigure", value="reconfigure"),
                    Choice(label="Cancel", value="cancel"),
                ],
            )
            if action == "cancel":
                raise UserCancelled("Project creation cancelled.")

    def confirm_creation(self, template: TemplateDescriptor, project: ProjectConfig) -> None:
        summary = {
            "Project name": project.name,
            "Template": template.display_name,
            "Description": template.description,
            "Features": ", ".join(template.features),
        }
        if project.description:
            summary["Project description"] = project.description
        if project.author:
            summary["Author"] = project.author
        summary["Initialise git"] = "yes" if project.initialize_vcs else "no"
        if project.install_dependencies:
            manager = project.package_manager.value if project.package_manager else "auto"
            summary["Install dependencies"] = f"yes ({manager})"
        else:
            summary["Install dependencies"] = "no"
        summary["Source repository"] = template.source_location

        console.print()
        print_summary_table(summary, title="Project to create")
        if not self.prompter.confirm("Create the project?", default=True):
            raise UserCancelled("Project creation cancelled.")

    def prepare_target(self, target: Path) -> None:
        """Ask before deleting an existing target; declining cancels cleanly."""
        if not target.exists():
            return
        print_warning(f"Directory already exists: {target}")
        if not self.prompter.confirm("Overwrite the existing directory?", default=False):
            raise UserCancelled("Project creation cancelled, existing directory kept.")
        remove_path(target)

    # -- Execution ---------------------------------------------------------

    async def execute(
        self, template: TemplateDescriptor, project: ProjectConfig, options: CreateOptions
    ) -> CreateResult:
        """Acquire, materialize and run the post steps."""
        target = (Path(options.directory) / project.name).resolve()
        self.prepare_target(target)
        result = CreateResult(project_path=target, template=template, config=project)

        with create_progress() as progress:
            task = progress.add_task("Preparing template...", total=None)

            def on_progress(message: str) -> None:
                progress.update(task, description=message)

            acquired = await self.pipeline.acquire(
                template, use_cache=options.use_cache, on_progress=on_progress
            )
            if acquired.is_mirror:
                console.print(f"[dim]Downloaded through mirror: {acquired.source_url}[/dim]")

            try:
                on_progress("Copying project files...")
                result.files_copied = await self.materializer.materialize(
                    acquired.path, target, project, template
                )
            finally:
                await self.pipeline.release(acquired)

            if project.initialize_vcs:
                on_progress("Initialising git repository...")
                result.steps.append(await init_vcs(target))

            if project.install_dependencies:
                manager = project.package_manager.value if project.package_manager else "auto-detected manager"
                on_progress(f"Installing dependencies with {manager}...")
                result.steps.append(
                    await install_dependencies(
                        target, project.package_manager, timeout=self.config.install_timeout
                    )
                )

        for step in result.steps:
            if not step.ok:
                print_warning(step.message)
        return result

    async def run(self, project_name: str | None, options: CreateOptions) -> CreateResult:
        """Full ``robot create`` flow.

        Raises:
            UserCancelled: The user declined a confirmation.
            AcquisitionError, MaterializeError: Creation failed.
        """
        started = time.monotonic()
        console.print()
        console.print("[cyan]Robot CLI - creating a new project[/cyan]")
        console.print()

        template = self.select_template(options.template)
        name = self.resolve_project_name(project_name, template)
        project = self.configure_project(name, options)
        self.confirm_creation(template, project)

        result = await self.execute(template, project, options)
        print_completion(result, time.monotonic() - started)
        return result


def print_completion(result: CreateResult, elapsed: float) -> None:
    """Print the success panel and the quick-start commands."""
    project = result.config
    steps = {step.name: step for step in result.steps}
    git_state = "initialised" if steps.get("git") and steps["git"].ok else "not initialised"
    deps_state = "installed" if steps.get("install") and steps["install"].ok else "install manually"

    print_success("Project created successfully!")
    console.print(
        Panel(
            f"Location:     {result.project_path}\n"
            f"Template:     {result.template.display_name}\n"
            f"Files:        {result.files_copied}\n"
            f"Git:          {git_state}\n"
            f"Dependencies: {deps_state}\n"
            f"Took:         {format_duration(elapsed)}",
            title="Project Ready",
            border_style="green",
        )
    )

    console.print("[blue]Quick start:[/blue]")
    console.print(f"[cyan]   cd {project.name}[/cyan]")
    if not (steps.get("install") and steps["install"].ok):
        manager = project.package_manager.value if project.package_manager else "npm"
        console.print(f"[cyan]   {manager} install[/cyan]")
    console.print(f"[cyan]   {result.template.start_command}[/cyan]")
    console.print()


async def create_project(
    project_name: str | None,
    options: CreateOptions,
    *,
    catalog: Catalog,
    prompter: Prompter,
    pipeline: AcquisitionPipeline,
    materializer: ProjectMaterializer | None = None,
) -> CreateResult:
    """Create one project; see ``ProjectCreator.run``."""
    creator = ProjectCreator(catalog, prompter, pipeline, materializer)
    return await creator.run(project_name, options)
