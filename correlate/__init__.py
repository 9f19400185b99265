"""
Correlate package: map free-text mentions of a person onto their Jira and GitHub identities.
"""

from .identity import IdentityResolver, build_identities, load_identities

__all__ = ["IdentityResolver", "build_identities", "load_identities"]
