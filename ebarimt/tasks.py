"""
Celery tasks for eBarimt.
issue_ebarimt_task lets settlement callers dispatch issuance off the request.
It runs issue exactly once; retries are an explicit caller action.
"""

import logging
from typing import Any

from celery import shared_task

from ebarimt.services.receipt_service import PreconditionError, issue_ebarimt_for_invoice

logger = logging.getLogger("ebarimt")


@shared_task(name="ebarimt.issue_ebarimt_task")
def issue_ebarimt_task(invoice_id: int, user_id: int | None = None) -> dict[str, Any]:
    """
    Issue eBarimt for invoice. Returns IssueResult.to_dict();
    a precondition failure is returned as {"success": False, "errorMessage": str}.
    """
    try:
        result = issue_ebarimt_for_invoice(invoice_id, user_id=user_id)
    except PreconditionError as e:
        logger.warning("eBarimt not issued for invoice #%s: %s", invoice_id, e, extra={"invoice_id": invoice_id})
        return {"success": False, "ddtd": None, "errorMessage": str(e), "receiptForDisplay": None}
    return result.to_dict()
