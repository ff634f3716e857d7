from typing import Protocol
from uuid import UUID


class OTPProvider(Protocol):
    async def send(self, phone_number: str) -> str:
        ...

    async def check(self, session_id: UUID, phone_number: str, code: str) -> bool:
        ...
