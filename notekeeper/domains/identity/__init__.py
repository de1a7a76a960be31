from notekeeper.domains.identity.entities import ActorContext, Role, User
from notekeeper.domains.identity.schemas import UserSummary

__all__ = [
    "ActorContext",
    "Role",
    "User",
    "UserSummary",
]
