from .models import Base, Message

__all__ = ["Base", "Message"]
