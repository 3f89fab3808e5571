"""
HTML Shell Builder
Synthesizes a self-contained document for a page that has no pre-built artifact.
"""

import json
import time
from pathlib import Path
from typing import Any, Tuple

from jinja2 import Environment, FileSystemLoader

from landing_deploy.models.page import Page
from landing_deploy.services.form_submission import (
    MOBILE_MAX_WIDTH,
    TABLET_MAX_WIDTH,
    form_endpoint,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _script_json(value: Any) -> str:
    """JSON safe to inline inside a <script> element"""
    return (
        json.dumps(value, ensure_ascii=False)
        .replace("</", "<\\/")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


class HTMLBuilder:
    """Render the page shell template."""

    def __init__(self, api_origin: str = "", lang: str = "vi"):
        self.api_origin = api_origin
        self.lang = lang
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=True,
        )

    def build(self, page: Page) -> Tuple[str, int, int]:
        """
        Render the shell for ``page``.

        Returns:
            (html, build_time_ms, build_size_bytes)
        """
        start = time.monotonic()
        template = self.jinja_env.get_template("page_shell.html.j2")

        html = template.render(
            lang=self.lang,
            title=page.name or page.slug or page.id,
            description=page.description or "",
            page_id_json=_script_json(page.id),
            page_data_json=_script_json(page.structured_content or []),
            form_endpoint_json=_script_json(form_endpoint(self.api_origin)),
            mobile_max_width=MOBILE_MAX_WIDTH,
            tablet_max_width=TABLET_MAX_WIDTH,
            success_message_json=_script_json("Gửi thành công!"),
            error_message_json=_script_json("Có lỗi xảy ra. Vui lòng thử lại."),
        )

        build_time = int((time.monotonic() - start) * 1000)
        return html, build_time, len(html.encode("utf-8"))
