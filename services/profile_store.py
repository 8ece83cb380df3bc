"""Profile persistence: get-or-create with defaults, live snapshots, overwrite."""

from contextlib import aclosing
from typing import AsyncIterator, Optional

from models.database import PROFILE_COLLECTION
from schemas.profile import UserProfile
from utils.logger import setup_logger

logger = setup_logger(__name__)


class ProfileStoreAdapter:
    """Reconciles each user's single profile document with the defaults."""

    def __init__(self, store):
        self.store = store

    async def ensure_profile(self, user_id: str) -> bool:
        """Create the default profile unless one exists.

        Concurrent callers may race; the store performs a single upsert keyed
        by user id and every contender writes identical content, so losing is
        harmless. Returns True if this call created the document.
        """
        created = await self.store.create_if_absent(
            PROFILE_COLLECTION, user_id, UserProfile.default().to_document()
        )
        if created:
            logger.info(f"Created default profile for user {user_id}")
        return created

    async def get_profile(self, user_id: str) -> UserProfile:
        """Current profile, creating the default on first access."""
        document = await self.store.get_document(PROFILE_COLLECTION, user_id)
        if document is None:
            await self.ensure_profile(user_id)
            document = await self.store.get_document(PROFILE_COLLECTION, user_id)
        if document is None:
            return UserProfile.default()
        return UserProfile.from_document(document)

    async def observe_profile(self, user_id: str) -> AsyncIterator[UserProfile]:
        """Yield the profile now and again whenever the stored document changes.

        An absent document (first access, or deleted elsewhere) is replaced by
        the default, which is emitted as soon as it is stored. Identical
        consecutive snapshots are emitted once.
        """
        last: Optional[UserProfile] = None
        async with aclosing(self.store.watch_document(PROFILE_COLLECTION, user_id)) as documents:
            async for document in documents:
                if document is None:
                    await self.ensure_profile(user_id)
                    document = await self.store.get_document(PROFILE_COLLECTION, user_id)
                    if document is None:
                        continue
                profile = UserProfile.from_document(document)
                if profile == last:
                    continue
                last = profile
                yield profile

    async def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Replace the whole profile document; raises WriteError on failure."""
        await self.store.replace_document(PROFILE_COLLECTION, user_id, profile.to_document())
        logger.info(f"Saved profile for user {user_id}")
