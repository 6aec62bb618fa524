"""
Object-store capability the adapter depends on.

Implementations (boto3 S3, in-memory) live in sibling modules. The adapter
never sees provider exception types: implementations raise ObjectMissingError
for the provider's not-found signal and BackendError for everything else.
"""

from typing import BinaryIO, Protocol, runtime_checkable

from .models import ObjectHead


@runtime_checkable
class ObjectBackend(Protocol):
    """Put, head, get and delete single objects in one bucket namespace."""

    def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        *,
        content_length: int,
        content_type: str,
        cache_control: str | None = None,
        acl: str | None = None,
    ) -> None:
        """Create or overwrite bucket/key with content_length bytes read from body."""
        ...

    def head_object(self, bucket: str, key: str) -> ObjectHead:
        """Return object metadata; raise ObjectMissingError if the key does not exist."""
        ...

    def get_object(self, bucket: str, key: str) -> BinaryIO:
        """Return a readable stream of the object body. Caller closes it."""
        ...

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete bucket/key. Missing keys are not an error."""
        ...
