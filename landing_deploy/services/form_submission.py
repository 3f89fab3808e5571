"""
Form Submission Contract
Shared by the handler embedded in published pages and the test-form sender.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional

import requests

from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger

logger = get_logger(__name__)

FORM_SUBMIT_PATH = "/api/forms/submit"

# Viewport breakpoints for device_type
MOBILE_MAX_WIDTH = 768
TABLET_MAX_WIDTH = 1024

UTM_PARAMS = ("utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content")


def form_endpoint(api_origin: str) -> str:
    """Absolute (or origin-relative when no origin is configured) submit URL"""
    return f"{api_origin.rstrip('/')}{FORM_SUBMIT_PATH}"


def device_type_for_width(width: int) -> str:
    """Classify a viewport width the same way the browser handler does"""
    if width < MOBILE_MAX_WIDTH:
        return "mobile"
    if width < TABLET_MAX_WIDTH:
        return "tablet"
    return "desktop"


def build_form_payload(
    page_id: str,
    form_id: str,
    form_data: Dict[str, Any],
    viewport_width: int = 1280,
    user_agent: str = "",
    screen_resolution: Optional[str] = None,
    referrer: Optional[str] = None,
    utm: Optional[Dict[str, str]] = None,
    page_url: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the JSON body a published page POSTs on form submit.

    Returns:
        {page_id, form_id, form_data, metadata: {device_type, user_agent,
        screen_resolution, referrer, utm_*, page_url, submitted_at}}
    """
    utm = utm or {}
    submitted_at = submitted_at or datetime.now(timezone.utc)

    metadata: Dict[str, Any] = {
        "device_type": device_type_for_width(viewport_width),
        "user_agent": user_agent,
        "screen_resolution": screen_resolution,
        "referrer": referrer,
    }
    for key in UTM_PARAMS:
        metadata[key] = utm.get(key)
    metadata["page_url"] = page_url
    metadata["submitted_at"] = submitted_at.isoformat().replace("+00:00", "Z")

    return {
        "page_id": page_id,
        "form_id": form_id,
        "form_data": form_data,
        "metadata": metadata,
    }


class FormSubmissionService:
    """
    Sends a synthetic form submission to the form-ingestion endpoint,
    exercising the same contract a published page uses.
    """

    def __init__(self, config: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.config = config or get_settings()
        self.session = session or requests.Session()

    def submit_test(
        self,
        page_id: str,
        page_url: Optional[str],
        form_id: str = "test-form",
        form_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        POST a test submission.

        Returns:
            Dict with keys: success (bool), status_code (int), payload (dict)

        Raises:
            requests.RequestException: On network failure
        """
        if not self.config.api_origin:
            raise ValueError("API_ORIGIN must be set to send test form submissions")

        payload = build_form_payload(
            page_id=page_id,
            form_id=form_id,
            form_data=form_data or {"name": "Test User", "email": "test@example.com"},
            user_agent="landing-deploy-test",
            screen_resolution="1920x1080",
            page_url=page_url,
        )
        url = form_endpoint(self.config.api_origin)
        logger.info(f"Sending test form submission for page {page_id} to {url}")

        response = self.session.post(url, json=payload, timeout=30)
        logger.info(f"Form endpoint answered HTTP {response.status_code}")

        return {
            "success": response.ok,
            "status_code": response.status_code,
            "payload": payload,
        }
