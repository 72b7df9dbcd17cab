from datetime import datetime, timezone
from typing import Any
from mongoengine import Document, DateTimeField


class BaseDocument(Document):
    created_at = DateTimeField(default=lambda: datetime.now(timezone.utc), null=False)
    updated_at = DateTimeField(default=lambda: datetime.now(timezone.utc), null=False)

    meta = {
        "abstract": True,
    }

    def save(self, *args, **kwargs):
        self.updated_at = datetime.now(timezone.utc)
        return super().save(*args, **kwargs)

    @classmethod
    def update_fields(cls, document_id: Any, **fields: Any):
        """Apply a partial update and return the updated document.

        Returns ``None`` when no document with ``document_id`` exists.
        """
        updates = {f"set__{name}": value for name, value in fields.items()}
        updates["set__updated_at"] = datetime.now(timezone.utc)
        return cls.objects(id=document_id).modify(new=True, **updates)
