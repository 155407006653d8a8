"""
Payment screenshot verification via the external AI service
"""
import base64
import logging
from typing import Optional

import httpx

from founders_cup.models import ScreenshotUpload, VerificationResult, VerifierSettings


logger = logging.getLogger(__name__)

UNAVAILABLE_REASON = "AI verification service is currently unavailable. Please try again later."


class VerifierUnavailable(RuntimeError):
    pass


class PaymentVerifier:
    """
    Client for the screenshot verification endpoint

    Request:  {"screenshotDataUri": "data:image/png;base64,...", "utr": "..."}
    Response: {"isUtrMatch": bool, "reason": str?, "transactionDate": ISO str?}
    """

    def __init__(self, url: Optional[str], api_key: Optional[str] = None, timeout: float = 60.0):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: VerifierSettings) -> "PaymentVerifier":
        return cls(settings.url, settings.api_key, settings.timeout)

    async def verify(self, screenshot_data_uri: str, utr: str) -> VerificationResult:
        if not self.url:
            raise VerifierUnavailable("Verification service URL is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.url,
                json={"screenshotDataUri": screenshot_data_uri, "utr": utr},
                headers=headers,
            )
            response.raise_for_status()
            return VerificationResult.model_validate(response.json())


def to_data_uri(screenshot: ScreenshotUpload) -> str:
    encoded = base64.b64encode(screenshot.content).decode("ascii")
    return f"data:{screenshot.content_type};base64,{encoded}"


async def run_ai_verification(verifier: PaymentVerifier, screenshot: ScreenshotUpload, utr: str) -> VerificationResult:
    """
    Verify a payment screenshot against the claimed UTR

    Fails closed: if the service cannot be reached the payment is treated as
    not matching.
    """
    try:
        return await verifier.verify(to_data_uri(screenshot), utr)
    except Exception as e:
        logger.error(f"❌ AI verification failed: {type(e).__name__}: {e}", exc_info=True)
        return VerificationResult(is_utr_match=False, reason=UNAVAILABLE_REASON)
