from .secret import Secret, is_organisation_provided

__all__ = [
    "Secret",
    "is_organisation_provided",
]
