"""App lock: 4-digit PIN and optional biometric unlock."""

import base64
from abc import ABC, abstractmethod
from enum import Enum

from errors import CapabilityUnsupported, ValidationError
from models.document import Document
from logger import get_logger

logger = get_logger()


def hash_pin(pin: str) -> str:
    """Encode a PIN for storage.

    Base64 of the reversed digits. This is an obfuscation, not a
    cryptographic hash: the lock is a local convenience gate only.
    """
    return base64.b64encode(pin[::-1].encode("utf-8")).decode("ascii")


class CredentialOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NOT_SUPPORTED = "not_supported"
    NO_CREDENTIAL = "no_credential"


class CredentialAuthenticator(ABC):
    """Platform biometric check, treated as an opaque pass/fail call."""

    @abstractmethod
    async def verify(self) -> CredentialOutcome:
        """Run the platform credential prompt and report its outcome."""
        pass


class UnsupportedAuthenticator(CredentialAuthenticator):
    """Authenticator for hosts without a biometric capability."""

    async def verify(self) -> CredentialOutcome:
        return CredentialOutcome.NOT_SUPPORTED


class LockService:
    """Service for the PIN/biometric app lock."""

    def __init__(self, document: Document, store):
        """Initialize the lock service.

        Args:
            document: The shared in-memory document.
            store: StateStore used to persist settings changes.
        """
        self.document = document
        self.store = store

    def has_pin(self) -> bool:
        return self.document.settings.pin_hash is not None

    def set_pin(self, pin: str) -> None:
        """Store a new PIN.

        Raises:
            ValidationError: If the PIN is not exactly four digits.
        """
        pin = (pin or "").strip()
        if len(pin) != 4 or not pin.isdigit():
            raise ValidationError("Enter 4 digits.")

        self.document.settings.pin_hash = hash_pin(pin)
        self.store.save(self.document)
        logger.info("PIN set")

    def verify_pin(self, pin: str) -> bool:
        """Check a PIN against the stored one. False when no PIN is set."""
        if not self.has_pin():
            return False
        return hash_pin((pin or "").strip()) == self.document.settings.pin_hash

    def reset_pin(self) -> None:
        """Forget the PIN; the next start asks for a new one."""
        self.document.settings.pin_hash = None
        self.store.save(self.document)
        logger.info("PIN cleared")

    def toggle_biometric(self) -> bool:
        """Flip the biometric unlock flag.

        Returns:
            The new value of the flag.
        """
        settings = self.document.settings
        settings.biometric_enabled = not settings.biometric_enabled
        self.store.save(self.document)
        logger.info(f"Biometric unlock {'enabled' if settings.biometric_enabled else 'disabled'}")
        return settings.biometric_enabled

    async def unlock_with_biometric(self, authenticator: CredentialAuthenticator) -> bool:
        """Try to unlock with the platform credential.

        Returns:
            True if the credential check passed, False if it failed or no
            credential is registered (biometric unlock is then turned off and
            the PIN must be used).

        Raises:
            CapabilityUnsupported: If biometrics are disabled in settings or
                the host has no biometric capability.
        """
        if not self.document.settings.biometric_enabled:
            raise CapabilityUnsupported("Biometric unlock is not enabled")

        outcome = await authenticator.verify()

        if outcome == CredentialOutcome.SUCCESS:
            return True
        if outcome == CredentialOutcome.NOT_SUPPORTED:
            raise CapabilityUnsupported("Biometric authentication is not supported here")
        if outcome == CredentialOutcome.NO_CREDENTIAL:
            logger.warning("No biometric credential registered; falling back to PIN")
            self.document.settings.biometric_enabled = False
            self.store.save(self.document)
            return False

        logger.info("Biometric check failed")
        return False
