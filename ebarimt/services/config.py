"""
POSAPI configuration struct.
Built once from Django settings and passed into PosApiClient and EBarimtService.
"""

from dataclasses import dataclass

DEFAULT_DISTRICT_CODE = "34"
DEFAULT_OPERATOR_BASE_URL = "https://api.ebarimt.mn/api/tpi/receipt/saveOprMerchants"

# Merchant identity a receipt cannot be issued without, keyed by setting name.
REQUIRED_MERCHANT_FIELDS = (
    ("merchant_tin", "POSAPI_MERCHANT_TIN"),
    ("pos_no", "POSAPI_POS_NO"),
    ("branch_no", "POSAPI_BRANCH_NO"),
    ("district_code", "POSAPI_DISTRICT_CODE"),
)


@dataclass(frozen=True)
class PosApiConfig:
    base_url: str = ""
    timeout_ms: int = 15000
    get_retries: int = 2
    merchant_tin: str = ""
    pos_no: str = ""
    branch_no: str = ""
    district_code: str = DEFAULT_DISTRICT_CODE
    consumer_no: str = ""
    operator_token: str = ""
    operator_api_key: str = ""
    operator_base_url: str = DEFAULT_OPERATOR_BASE_URL
    skip: bool = False

    @classmethod
    def from_settings(cls, settings_obj=None) -> "PosApiConfig":
        if settings_obj is None:
            from django.conf import settings as settings_obj
        return cls(
            base_url=(getattr(settings_obj, "POSAPI_BASE_URL", "") or "").rstrip("/"),
            timeout_ms=int(getattr(settings_obj, "POSAPI_TIMEOUT", 15000) or 15000),
            get_retries=int(getattr(settings_obj, "POSAPI_GET_RETRIES", 2) or 0),
            merchant_tin=getattr(settings_obj, "POSAPI_MERCHANT_TIN", "") or "",
            pos_no=getattr(settings_obj, "POSAPI_POS_NO", "") or "",
            branch_no=getattr(settings_obj, "POSAPI_BRANCH_NO", "") or "",
            district_code=getattr(settings_obj, "POSAPI_DISTRICT_CODE", "") or DEFAULT_DISTRICT_CODE,
            consumer_no=getattr(settings_obj, "POSAPI_CONSUMER_NO", "") or "",
            operator_token=getattr(settings_obj, "POSAPI_OPERATOR_TOKEN", "") or "",
            operator_api_key=getattr(settings_obj, "POSAPI_OPERATOR_API_KEY", "") or "",
            operator_base_url=getattr(settings_obj, "POSAPI_OPERATOR_BASE_URL", "") or DEFAULT_OPERATOR_BASE_URL,
            skip=bool(getattr(settings_obj, "EBARIMT_SKIP", False)),
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    def missing_merchant_settings(self) -> list[str]:
        """Setting names of required merchant identity values that are blank."""
        return [name for attr, name in REQUIRED_MERCHANT_FIELDS if not str(getattr(self, attr) or "").strip()]

    def __repr__(self):
        # operator credentials stay out of logs and tracebacks
        return (
            f"PosApiConfig(base_url={self.base_url!r}, merchant_tin={self.merchant_tin!r}, "
            f"pos_no={self.pos_no!r}, branch_no={self.branch_no!r}, "
            f"district_code={self.district_code!r}, skip={self.skip!r})"
        )
