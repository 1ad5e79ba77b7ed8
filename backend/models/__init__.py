from models.auth import User
from models.base import Profile, Contract, ChatMessage, CONTRACT_STATUSES

__all__ = ["User", "Profile", "Contract", "ChatMessage", "CONTRACT_STATUSES"]
