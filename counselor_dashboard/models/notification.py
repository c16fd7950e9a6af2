from dataclasses import dataclass
from typing import Any


@dataclass
class Notification:
    id: str
    title: str
    message: str
    type: str = "info"       # info/success/warning/error
    read: bool = False
    created_at: int = 0      # epoch ms
    data: Any = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "read": self.read,
            "createdAt": self.created_at,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Notification":
        return cls(
            id=str(d["id"]),
            title=d.get("title", ""),
            message=d.get("message", ""),
            type=d.get("type", "info"),
            read=bool(d.get("read", False)),
            created_at=int(d.get("createdAt", 0)),
            data=d.get("data"),
        )
