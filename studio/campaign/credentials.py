"""
Credential Gate — a cached "is a usable key available" flag.

The flag is eventually consistent by choice. After the selection flow runs it
is set to True without re-probing, since the host cannot confirm the
selection synchronously. Only an authoritative backend rejection
(401/403/404-class) sets it back to False.
"""

import asyncio
import logging

from dotenv import load_dotenv

from .. import config

logger = logging.getLogger(__name__)


class EnvCredentialProvider:
    """
    Host credential capability backed by the process environment.

    ``select`` re-reads ``.env`` so an operator can drop a key in without a
    restart.
    """

    def __init__(self, dotenv_path=None):
        self.dotenv_path = dotenv_path

    async def probe(self) -> bool:
        return bool(config.gemini_api_key())

    async def select(self) -> None:
        loaded = await asyncio.to_thread(load_dotenv, self.dotenv_path, override=True)
        logger.info(f"Credential selection: .env reloaded (found={loaded})")


class CredentialGate:
    def __init__(self, provider=None, initial: bool = False):
        self.provider = provider or EnvCredentialProvider()
        self._available = initial

    def has_credential(self) -> bool:
        return self._available

    async def probe(self) -> bool:
        """One-time startup check. Never called again after connect."""
        self._available = bool(await self.provider.probe())
        logger.info(f"Credential probe: available={self._available}")
        return self._available

    async def ensure_credential(self) -> None:
        """Run the selection flow if no key is known, then assume success."""
        if self._available:
            return
        try:
            await self.provider.select()
        except Exception as e:
            # The caller's own backend call is the real check
            logger.warning(f"Credential selection raised, continuing optimistically: {e}")
        self._available = True
        logger.info("Credential marked available (optimistic)")

    def invalidate(self) -> None:
        if self._available:
            logger.warning("Credential rejected by backend, reconnect required")
        self._available = False
