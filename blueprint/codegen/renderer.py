"""Jinja2 rendering of function documents, modules and index files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Sequence

from jinja2 import Environment, FileSystemLoader

from .constants import (
    ABI_TYPES_FILE_NAME,
    DEFAULT_SDK_PATH,
    GENERATED_HEADER,
    MODULE_ADDRESS_FIELD_NAME,
    PAYLOAD_BUILDERS_FILE_NAME,
)
from .conversions import to_pascal_case

if TYPE_CHECKING:  # pragma: no cover
    from .emitter import FunctionDocument

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class CodeRenderer:
    """Renders structured documents through the bundled templates.

    A custom `templates_dir` is searched before the bundled one, so single
    templates can be overridden.
    """

    def __init__(self, templates_dir: Path | None = None, *, sdk_path: str | None = None) -> None:
        self.templates_dir = templates_dir
        self.sdk_path = sdk_path or DEFAULT_SDK_PATH
        self._env = self._create_env(templates_dir)

    def render_function(self, document: "FunctionDocument") -> str:
        template = self._env.get_template("function.ts.j2")
        return template.render(doc=document).strip() + "\n"

    def render_module(
        self,
        entry_code: Sequence[str],
        view_code: Sequence[str],
        *,
        entry_namespace: str | None = None,
        view_namespace: str | None = None,
    ) -> str:
        """Concatenate function code into entry and view regions.

        A region is dropped when it has no functions; a namespace wraps it
        when a name is given.
        """
        template = self._env.get_template("module.ts.j2")
        regions = []
        if entry_code:
            regions.append({"namespace": entry_namespace, "code": list(entry_code)})
        if view_code:
            regions.append({"namespace": view_namespace, "code": list(view_code)})
        if not regions:
            return ""
        return template.render(regions=regions).strip() + "\n"

    def render_module_file(self, code: str) -> str:
        template = self._env.get_template("module_file.ts.j2")
        return template.render(
            header=GENERATED_HEADER,
            sdk_path=self.sdk_path,
            types_file=ABI_TYPES_FILE_NAME,
            payload_builders_file=PAYLOAD_BUILDERS_FILE_NAME,
            module_address_field=MODULE_ADDRESS_FIELD_NAME,
            code=code,
        ).rstrip() + "\n"

    def render_address_index(self, address: str, module_names: Iterable[str]) -> str:
        template = self._env.get_template("address_index.ts.j2")
        modules = [{"alias": to_pascal_case(name), "name": name} for name in module_names]
        return template.render(
            header=GENERATED_HEADER,
            sdk_path=self.sdk_path,
            address=address,
            modules=modules,
            module_address_field=MODULE_ADDRESS_FIELD_NAME,
        ).rstrip() + "\n"

    def render_index_header(self) -> str:
        return GENERATED_HEADER + "\n"

    def render_index_export(self, alias: str, directory: str) -> str:
        return f'export * as {alias} from "./{directory}/index.js";\n'

    def render_support_file(self, name: str) -> str:
        """Render one of the shared support files every module imports."""
        template = self._env.get_template(f"{name}.ts.j2")
        return template.render(header=GENERATED_HEADER, sdk_path=self.sdk_path).rstrip() + "\n"

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(DEFAULT_TEMPLATES_DIR))
        # ensure uniqueness preserving order
        seen: set[str] = set()
        unique = []
        for directory in directories:
            if directory not in seen:
                seen.add(directory)
                unique.append(directory)
        loader = FileSystemLoader(unique)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


SUPPORT_FILES = (PAYLOAD_BUILDERS_FILE_NAME, ABI_TYPES_FILE_NAME)

__all__ = ["CodeRenderer", "DEFAULT_TEMPLATES_DIR", "SUPPORT_FILES"]
