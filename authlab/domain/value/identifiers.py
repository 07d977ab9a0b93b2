"""Strongly typed identifiers for AuthLab.

Identity IDs are opaque strings issued by the identity provider
(Firebase ``localId``), so they wrap ``str`` rather than ``UUID``.
"""

from typing import NewType

IdentityId = NewType("IdentityId", str)
