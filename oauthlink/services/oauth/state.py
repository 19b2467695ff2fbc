"""CSRF state tokens for the authorization leg."""
import secrets

STATE_BYTES = 32


def generate_state() -> str:
    """
    Generate cryptographically secure state token for CSRF protection.

    The caller must persist the value (session, signed cookie) and compare it
    with the ``state`` returned on callback; nothing here stores it.

    Returns:
        URL-safe random string carrying 256 bits of entropy
    """
    return secrets.token_urlsafe(STATE_BYTES)
