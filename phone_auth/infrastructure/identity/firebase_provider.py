import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth as fb_auth, credentials
from starlette.concurrency import run_in_threadpool

from ...core.config import Settings
from ...application.errors import IdentityProviderError
from ...application.ports.identity_provider import IdentityDto, IdentityProvider

logger = logging.getLogger(__name__)


def init_firebase_app(settings: Settings) -> "firebase_admin.App":
    """Return the default Firebase app, initializing it on first use.

    Credentials come from SA_FILE_PATH, then from the FIREBASE_* fields, and
    finally from Google application default credentials.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if settings.SA_FILE_PATH:
        cred = credentials.Certificate(settings.SA_FILE_PATH)
    elif settings.FIREBASE_CLIENT_EMAIL and settings.FIREBASE_PRIVATE_KEY and settings.FIREBASE_PROJECT_ID:
        cred = credentials.Certificate({
            "type": "service_account",
            "project_id": settings.FIREBASE_PROJECT_ID,
            "private_key": settings.firebase_private_key,
            "client_email": settings.FIREBASE_CLIENT_EMAIL,
            "token_uri": "https://oauth2.googleapis.com/token",
        })
    else:
        logger.warning("Firebase service account not configured; using application default credentials")
        cred = credentials.ApplicationDefault()

    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase app initialized")
    return app


class FirebaseIdentityProvider(IdentityProvider):
    """Firebase Auth adapter. The Admin SDK blocks, so calls run in the threadpool."""

    def __init__(self, app: Optional["firebase_admin.App"] = None):
        self.app = app

    async def get_user_by_phone(self, phone_number: str) -> Optional[IdentityDto]:
        try:
            user = await run_in_threadpool(fb_auth.get_user_by_phone_number, phone_number, app=self.app)
        except fb_auth.UserNotFoundError:
            return None
        except Exception as e:
            raise IdentityProviderError(f"get user: {e}") from e
        return IdentityDto(uid=user.uid, phone_number=user.phone_number)

    async def create_user(self, phone_number: str) -> IdentityDto:
        try:
            user = await run_in_threadpool(fb_auth.create_user, phone_number=phone_number, app=self.app)
        except Exception as e:
            raise IdentityProviderError(f"create user: {e}") from e
        return IdentityDto(uid=user.uid, phone_number=user.phone_number)

    async def mint_custom_token(self, uid: str) -> str:
        try:
            token = await run_in_threadpool(fb_auth.create_custom_token, uid, app=self.app)
        except Exception as e:
            raise IdentityProviderError(f"create custom token: {e}") from e
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return token
