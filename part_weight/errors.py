"""Error taxonomy for part weight resolution."""

from __future__ import annotations

from typing import Any, Dict, Optional


class PartWeightError(Exception):
    code = "server_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "errorCode": self.code}


class ConfigurationError(PartWeightError):
    code = "configuration_error"
    status_code = 500


class InvalidInput(PartWeightError):
    code = "invalid_input"
    status_code = 400


class VendorUnavailable(PartWeightError):
    """Vendor search failed: non-success status, transport error or a payload we cannot read."""

    code = "vendor_unavailable"
    status_code = 502

    def __init__(
        self,
        message: str,
        vendor_status: Optional[int] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.vendor_status = vendor_status
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["vendorStatus"] = self.vendor_status
        body["details"] = self.details
        return body
