"""Session token adapters."""

from .jose_signer import JoseTokenSigner

__all__ = ["JoseTokenSigner"]
