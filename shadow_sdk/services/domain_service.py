"""Domain registration stage"""

import logging
from typing import Any, Dict, Optional

from ..api.backend import BackendClient
from ..api.exceptions import (
    BackendError,
    DomainConflictError,
    InvalidDomainError,
    RegistrationError,
)
from ..constants import MSG_DOMAIN_CONFLICT_GUIDANCE
from ..core.auth import create_auth_header
from ..core.validation import validate_domain
from ..models.identity import KeyPair

logger = logging.getLogger(__name__)

# Outcomes of register_alias
REGISTERED = "registered"
UPDATED = "updated"
ALREADY_REGISTERED = "already_registered"


def _owner_of(record: Dict[str, Any]) -> Optional[str]:
    return record.get('owner_pubkey') or record.get('owner')


def _program_of(record: Dict[str, Any]) -> Optional[str]:
    return record.get('program_address') or record.get('programAddress')


class DomainService:
    """Binds a human-readable alias to a program address"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def register_alias(self,
                             domain: str,
                             program_address: str,
                             identity: KeyPair) -> str:
        """Register ``domain`` for ``program_address``

        Registration by the same wallet is idempotent; a wallet that already
        owns the domain for another program has it re-pointed.

        Returns:
            REGISTERED, UPDATED or ALREADY_REGISTERED

        Raises:
            InvalidDomainError: If the domain is syntactically invalid. No
                backend call is made in that case.
            DomainConflictError: If another wallet owns the domain
            RegistrationError: If the backend rejects the registration
        """
        domain = (domain or "").strip().lower()
        if not validate_domain(domain):
            raise InvalidDomainError(
                f"Invalid domain format: {domain!r}",
                context={'domain': domain}
            )

        wallet = identity.public_key_b58
        context = {'domain': domain, 'program': program_address}

        try:
            existing = await self.backend.get_domain(domain)
            outcome = self._check_existing(existing, domain, program_address, wallet)
            if outcome is not None:
                if outcome == UPDATED:
                    await self.backend.update_domain(
                        domain, program_address, create_auth_header(identity)
                    )
                    logger.info("Domain %s re-pointed to %s", domain, program_address)
                return outcome

            try:
                await self.backend.register_domain(
                    domain, program_address, wallet, create_auth_header(identity)
                )
            except BackendError as e:
                if e.status_code != 409:
                    raise
                # Lost a race with another registration: look again
                existing = await self.backend.get_domain(domain)
                outcome = self._check_existing(existing, domain, program_address, wallet)
                if outcome == ALREADY_REGISTERED:
                    return outcome
                if outcome is None:
                    raise
                raise RegistrationError(
                    f"Domain {domain} changed during registration",
                    context=context,
                    cause=e
                )

        except BackendError as e:
            raise RegistrationError(
                f"Domain registration failed for {domain}",
                context=context,
                cause=e
            )

        logger.info("Domain registered: %s -> %s", domain, program_address)
        return REGISTERED

    @staticmethod
    def _check_existing(record: Optional[Dict[str, Any]],
                        domain: str,
                        program_address: str,
                        wallet: str) -> Optional[str]:
        if not record:
            return None

        owner = _owner_of(record)
        if owner and owner != wallet:
            raise DomainConflictError(
                domain,
                owner=owner,
                guidance=MSG_DOMAIN_CONFLICT_GUIDANCE.format(domain=domain),
                context={'domain': domain, 'owner': owner}
            )

        if _program_of(record) == program_address:
            logger.info("Domain %s already registered to this wallet", domain)
            return ALREADY_REGISTERED
        return UPDATED
