"""
Exceptions for the Passbox crypto core
Everything derives from PassboxError so callers have a single catch-all
"""


class PassboxError(Exception):
    # general container for errors
    pass


class AuthenticationError(PassboxError):
    # raised when AEAD verification fails (wrong key or tampered blob).
    # the message is fixed and must not say which of the two it was
    def __init__(self, message: str = "decryption failed"):
        super().__init__(message)


class InvalidInputError(PassboxError, ValueError):
    # raised on malformed input: key length, empty password, bad encoding,
    # unsupported algorithm, bad KDF params
    pass
