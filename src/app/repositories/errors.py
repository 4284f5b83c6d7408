"""
Credential store failures

Repositories return None for "not found" / "not usable" and raise these for
everything the caller has to treat differently.
"""


class CredentialStoreError(Exception):
    """Base class for store failures"""


class DuplicateEmailError(CredentialStoreError):
    """The unique email index rejected an insert"""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Identity with this email already exists")


class TransientStorageError(CredentialStoreError):
    """Storage did not complete the call; nothing was applied"""
