"""Fingerprint service providers.

EmySoundFingerprintProvider wraps the EmySound REST API; it is the only
concrete implementation of IFingerprintProvider.
"""

from radiorecall.providers.fingerprint.emysound_provider import EmySoundFingerprintProvider

__all__ = ["EmySoundFingerprintProvider"]
