"""ORM models; importing this package registers every table on Base.metadata."""

from app.models.attachment import Attachment
from app.models.user import UserAccount

__all__ = ["Attachment", "UserAccount"]
