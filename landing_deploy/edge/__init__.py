"""
CloudFront Function source for subdomain routing on a shared distribution
"""

import json
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from landing_deploy.utils.validators import validate_domain

EDGE_DIR = Path(__file__).parent
FUNCTION_TEMPLATE = "viewer_request.js"


def render_viewer_request_function(base_domain: str) -> str:
    """
    Render the viewer-request function for ``base_domain``.

    Raises:
        ValidationError: If base_domain is not a valid domain
    """
    base_domain = validate_domain(base_domain)
    env = Environment(
        loader=FileSystemLoader(str(EDGE_DIR)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    return env.get_template(FUNCTION_TEMPLATE).render(base_domain_json=json.dumps(base_domain))


__all__ = ["render_viewer_request_function"]
