import logging
from dataclasses import dataclass, field
from uuid import UUID

from ..errors import CodeRejectedError, IdentityProviderError, OTPProviderError
from ..ports.audit_logger import AuditLogger
from ..ports.identity_provider import IdentityDto, IdentityProvider
from ..ports.otp_provider import OTPProvider

logger = logging.getLogger(__name__)


class _NullAuditLogger:
    def log(self, action, phone, user_id=None, session_id=None, success=True, details=None) -> None:
        pass


@dataclass
class VerificationService:
    """Two-step phone verification: send a code, then trade a valid code for a custom token.

    No state is kept between the two calls; the OTP provider owns the session.
    """
    otp_provider: OTPProvider
    identity_provider: IdentityProvider
    audit_logger: AuditLogger = field(default_factory=_NullAuditLogger)

    async def initiate(self, phone_number: str) -> str:
        try:
            session_id = await self.otp_provider.send(phone_number)
        except OTPProviderError as e:
            self.audit_logger.log("otp_send", phone_number, success=False, details={"error": e.kind.value})
            raise
        self.audit_logger.log("otp_send", phone_number, session_id=session_id)
        return session_id

    async def complete(self, phone_number: str, code: str, session_id: UUID) -> str:
        try:
            verified = await self.otp_provider.check(session_id, phone_number, code)
        except OTPProviderError as e:
            self.audit_logger.log("otp_check", phone_number, session_id=str(session_id), success=False, details={"error": e.kind.value})
            raise
        self.audit_logger.log("otp_check", phone_number, session_id=str(session_id), success=verified)
        if not verified:
            raise CodeRejectedError()

        user = await self._get_or_create_user(phone_number)

        try:
            token = await self.identity_provider.mint_custom_token(user.uid)
        except IdentityProviderError:
            self.audit_logger.log("token_mint", phone_number, user_id=user.uid, success=False)
            raise
        self.audit_logger.log("token_mint", phone_number, user_id=user.uid)
        return token

    async def _get_or_create_user(self, phone_number: str) -> IdentityDto:
        # Not atomic: two concurrent first-time verifications may both reach create_user.
        # Firebase rejects the duplicate phone number and the loser fails with IdentityProviderError.
        try:
            user = await self.identity_provider.get_user_by_phone(phone_number)
        except IdentityProviderError as e:
            logger.warning(f"User lookup failed, falling back to create: {e}")
            user = None
        if user is not None:
            return user

        try:
            user = await self.identity_provider.create_user(phone_number)
        except IdentityProviderError:
            self.audit_logger.log("user_create", phone_number, success=False)
            raise
        self.audit_logger.log("user_create", phone_number, user_id=user.uid)
        return user
