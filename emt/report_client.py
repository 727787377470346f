import logging

import requests
from django.conf import settings

from core.exceptions import ReportUnavailable

logger = logging.getLogger(__name__)


def generate_report_text(context):
    """
    Ask the external report service for narrative text about an approved event.

    Args:
        context: The dict built by :func:`emt.queries.report_context`.

    Returns:
        The generated report text as a string.

    Raises:
        ReportUnavailable: when the service is not configured, unreachable or
        answers with something other than report text.
    """
    url = settings.REPORT_GENERATOR_URL
    if not url:
        raise ReportUnavailable("Report generation is not configured.")

    try:
        response = requests.post(
            url,
            json={"event": context},
            headers={"Content-Type": "application/json"},
            timeout=settings.REPORT_GENERATOR_TIMEOUT,
        )
        response.raise_for_status()
        result = response.json()
    except requests.exceptions.RequestException as exc:
        logger.warning("Report service request failed for event %s: %s", context.get("id"), exc)
        raise ReportUnavailable(f"Could not connect to the report service. Details: {exc}") from exc
    except ValueError as exc:
        raise ReportUnavailable("Report service returned malformed JSON.") from exc

    text = result.get("report") if isinstance(result, dict) else None
    if not text:
        error_detail = result.get("error", "No content found.") if isinstance(result, dict) else "No content found."
        raise ReportUnavailable(f"Report service response was malformed. Details: {error_detail}")
    return text.strip()
