"""
Generic element steps.

`preprocess_element` pipes element text through a shell command. The book
uses it twice: to type-check OCaml samples (output ignored, failure is a
build error) and to run the syntax highlighter (output replaces the code).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..context import BuildContext
from ..errors import ExternalToolError
from ..external import run_command
from ..models import StrTuple
from ..page import INSERT_ACTIONS, Page, delete, is_empty


class DeleteElementOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    selector: str
    only_if_empty: bool = False


class PreprocessElementOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    selector: StrTuple = Field(min_length=1)
    command: str
    action: str = "replace_content"

    @field_validator("action")
    @classmethod
    def known_action(cls, value: str) -> str:
        if value != "ignore_output" and value not in INSERT_ACTIONS:
            raise ValueError(f"unsupported action {value!r}")
        return value


def delete_element(page: Page, opts: DeleteElementOptions, ctx: BuildContext) -> None:
    for node in page.select(opts.selector):
        if opts.only_if_empty and not is_empty(node):
            continue
        delete(node)


def preprocess_element(page: Page, opts: PreprocessElementOptions, ctx: BuildContext) -> None:
    for selector in opts.selector:
        for n, node in enumerate(page.select(selector), start=1):
            env = {
                "PAGE_FILE": str(page.source),
                "TARGET_FILE": str(page.target),
                "ATTR_ID": node.get("id", ""),
                "ATTR_CLASS": " ".join(node.get("class", [])),
            }
            try:
                output = run_command(
                    opts.command,
                    stdin=node.get_text(),
                    what=f"{page.page_file}: {selector} #{n}",
                    cwd=ctx.root,
                    env=env,
                )
            except ExternalToolError as e:
                if ctx.settings.strict:
                    raise
                ctx.reporter.warning(str(e))
                continue

            if opts.action != "ignore_output":
                INSERT_ACTIONS[opts.action](node, output)
