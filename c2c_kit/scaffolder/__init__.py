"""C2C Kit scaffolder -- turns a template tree into a ready-to-run project.

Quick usage::

    from c2c_kit.scaffolder import ProjectGenerator, ScaffoldRequest, TemplateLibrary

    request = ScaffoldRequest(project_name="my-app", template_kind="basic-crud")
    generator = ProjectGenerator(request, TemplateLibrary())
    result = await generator.materialize(Path.cwd())
    await generator.substitute(result.project_path)
"""

from c2c_kit.scaffolder.generator import (
    DestinationExistsError,
    MaterializeResult,
    ProjectGenerator,
)
from c2c_kit.scaffolder.git import GitError, init_repository, run_git
from c2c_kit.scaffolder.installer import DependencyInstaller, InstallAttempt, InstallResult
from c2c_kit.scaffolder.models import (
    DatabaseChoice,
    ScaffoldError,
    ScaffoldRequest,
    TemplateKind,
)
from c2c_kit.scaffolder.prompts import (
    AnswerCollector,
    InvalidProjectNameError,
    ProjectNameRequiredError,
    parse_choice,
)
from c2c_kit.scaffolder.templates import TemplateLibrary, TemplateRenderer, copy_tree

__all__ = [
    "AnswerCollector",
    "DatabaseChoice",
    "DependencyInstaller",
    "DestinationExistsError",
    "GitError",
    "InstallAttempt",
    "InstallResult",
    "InvalidProjectNameError",
    "MaterializeResult",
    "ProjectGenerator",
    "ProjectNameRequiredError",
    "ScaffoldError",
    "ScaffoldRequest",
    "TemplateKind",
    "TemplateLibrary",
    "TemplateRenderer",
    "copy_tree",
    "init_repository",
    "parse_choice",
    "run_git",
]
