"""Buyer update validation for invoices. eBarimt needs a valid TIN for B2B receipts."""

from ebarimt.validators import is_valid_tin


class ValidationError(Exception):
    def __init__(self, message, field=None):
        self.message = message
        self.field = field
        super().__init__(message)


def validate_buyer_update(data):
    """
    Validate PATCH body for buyer classification.
    Required: buyerType (B2C or B2B). B2B also requires an 11 or 14 digit buyerTin.
    B2C ignores buyerTin.
    """
    if not isinstance(data, dict):
        raise ValidationError("Body must be an object")
    buyer_type = data.get("buyerType", data.get("buyer_type"))
    if buyer_type not in ("B2C", "B2B"):
        raise ValidationError("buyerType must be 'B2C' or 'B2B'.", "buyerType")
    if buyer_type == "B2C":
        return {"buyer_type": "B2C", "buyer_tin": None}
    raw_tin = data.get("buyerTin", data.get("buyer_tin"))
    tin = raw_tin.strip() if isinstance(raw_tin, str) else ""
    if not tin:
        raise ValidationError("buyerTin is required for B2B buyer type.", "buyerTin")
    if not is_valid_tin(tin):
        raise ValidationError("buyerTin must be exactly 11 or 14 digits.", "buyerTin")
    return {"buyer_type": "B2B", "buyer_tin": tin}
