from typing import Protocol, Optional


class IdentityDto:
    def __init__(self, uid: str, phone_number: Optional[str]):
        self.uid = uid
        self.phone_number = phone_number


class IdentityProvider(Protocol):
    async def get_user_by_phone(self, phone_number: str) -> Optional[IdentityDto]:
        """Return the user or None when no user has this phone number.

        Raises IdentityProviderError for any other lookup failure.
        """
        ...

    async def create_user(self, phone_number: str) -> IdentityDto:
        ...

    async def mint_custom_token(self, uid: str) -> str:
        ...
