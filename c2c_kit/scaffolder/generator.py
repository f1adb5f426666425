"""Project materialisation and placeholder substitution.

Takes a ``ScaffoldRequest`` and turns the matching template tree into a new
project directory, then writes the run-specific values into the package
manifest and README.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich.console import Console

from c2c_kit.scaffolder.models import ScaffoldError, ScaffoldRequest
from c2c_kit.scaffolder.templates import TemplateLibrary, copy_tree
from c2c_kit.utils import print_info, print_success, print_warning, save_json

MANIFEST_FILE = "package.json"
README_FILE = "README.md"

NAME_TOKEN = "{{PROJECT_NAME}}"
DESCRIPTION_TOKEN = "{{PROJECT_DESCRIPTION}}"


class DestinationExistsError(ScaffoldError):
    """Raised when the project directory is already present on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Directory {path} already exists")


@dataclass
class MaterializeResult:
    """What ended up in the new project directory."""

    project_path: Path
    template_path: Optional[Path] = None
    copied_files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class ProjectGenerator:
    """Creates a project directory from a template tree.

    The destination must not exist beforehand; a missing template is only a
    warning and leaves an empty project directory behind.
    """

    def __init__(
        self,
        request: ScaffoldRequest,
        library: TemplateLibrary,
        console: Console | None = None,
    ) -> None:
        self.request = request
        self.library = library
        self.console = console

    def destination(self, working_dir: str | Path) -> Path:
        return Path(working_dir) / self.request.project_name

    # -- Materialise -------------------------------------------------------

    async def materialize(self, working_dir: str | Path) -> MaterializeResult:
        """Create the project directory and copy the template into it.

        Raises:
            DestinationExistsError: If the project directory already exists.
                Nothing is written in that case.
        """
        project_path = self.destination(working_dir)
        if project_path.exists():
            raise DestinationExistsError(project_path)

        await asyncio.to_thread(project_path.mkdir, parents=True)
        print_success(f"Created project directory: {project_path}", console=self.console)

        result = MaterializeResult(project_path=project_path)
        kind = self.request.template_kind
        template_path = self.library.resolve(kind)
        if template_path is None:
            message = f"Template {kind.value} not found, starting from an empty project"
            print_warning(message, console=self.console)
            available = self.library.available()
            if available:
                print_info(f"Available templates: {', '.join(available)}", console=self.console)
            result.warnings.append(message)
            return result

        result.template_path = template_path
        result.copied_files = await asyncio.to_thread(copy_tree, template_path, project_path)
        print_success(f"Copied template files for {kind.value}", console=self.console)
        return result

    # -- Substitute --------------------------------------------------------

    async def substitute(self, project_path: str | Path) -> list[Path]:
        """Write the project name and description into manifest and README.

        Files that are not present are skipped.  Running this twice with the
        same request leaves the files unchanged the second time.

        Returns:
            The files that were rewritten.
        """
        root = Path(project_path)
        rewritten: list[Path] = []

        manifest = root / MANIFEST_FILE
        if manifest.is_file():
            await asyncio.to_thread(self._update_manifest, manifest)
            rewritten.append(manifest)

        readme = root / README_FILE
        if readme.is_file():
            await asyncio.to_thread(self._update_readme, readme)
            rewritten.append(readme)

        print_success("Updated configuration files", console=self.console)
        return rewritten

    def _update_manifest(self, path: Path) -> None:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ScaffoldError(f"{path} does not contain a JSON object")
        data["name"] = self.request.project_name
        data["description"] = self.request.description
        save_json(data, path)

    def _update_readme(self, path: Path) -> None:
        text = path.read_text(encoding="utf-8")
        text = text.replace(NAME_TOKEN, self.request.project_name)
        text = text.replace(DESCRIPTION_TOKEN, self.request.description)
        path.write_text(text, encoding="utf-8")
