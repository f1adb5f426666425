"""Template trees and Jinja2 rendering.

``TemplateLibrary`` locates the pre-authored template directories and copies
them verbatim into a new project.  ``TemplateRenderer`` renders the small
Jinja2 snippets used for generated files (e.g. a default ``.env.local``).
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment

from c2c_kit.config import DEFAULT_TEMPLATES_DIR
from c2c_kit.scaffolder.models import TemplateKind


# ---------------------------------------------------------------------------
# TemplateLibrary
# ---------------------------------------------------------------------------


class TemplateLibrary:
    """Read-only view over a directory of named template trees."""

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root is not None else DEFAULT_TEMPLATES_DIR

    def resolve(self, kind: TemplateKind) -> Optional[Path]:
        """Return the template directory for *kind*, or ``None`` if absent."""
        for name in kind.directory_names:
            candidate = self.root / name
            if candidate.is_dir():
                return candidate
        return None

    def available(self) -> list[str]:
        """Names of the template directories present under the root."""
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())


def copy_tree(src: str | Path, dest: str | Path) -> list[Path]:
    """Recursively copy *src* into the existing directory *dest*.

    Directories are recreated and files are copied byte-for-byte.  Returns
    the copied file paths relative to *dest*, in no particular order.
    """
    src_path = Path(src)
    dest_path = Path(dest)
    copied: list[Path] = []

    for entry in src_path.iterdir():
        target = dest_path / entry.name
        if entry.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            copied.extend(
                Path(entry.name) / rel for rel in copy_tree(entry, target)
            )
        else:
            shutil.copyfile(entry, target)
            copied.append(Path(entry.name))

    return copied


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders inline Jinja2 templates with project-specific context."""

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        template = self.env.from_string(template_string)
        return template.render(**context)

    def render_to_file(
        self,
        template_string: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render *template_string* and write the result to *output_path*.

        Parent directories are created automatically.
        """
        content = self.render_string(template_string, context)
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(content, encoding="utf-8")
        return out
