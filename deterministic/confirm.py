from typing import List


class SigningAborted(Exception):
    """Raised when the operator declines to sign"""


def _abort() -> None:
    print("Aborting signing!")
    raise SigningAborted("Signing aborted by operator.")


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_signing(description: List[str], signer_address: str) -> None:
    """Asks the user to confirm a typed data request before it is signed."""
    print(f"\nSigning as {signer_address}:")
    for line in description:
        print(f"\t{line}")
    answer = input("Sign Y/N? ")
    if answer.lower().strip() != "y":
        _abort()
