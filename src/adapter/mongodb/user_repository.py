"""MongoDB implementation of UserRepository.

Documents keep the field names of the existing GiftLink `users` collection
(firstName, lastName, password, createdAt, updatedAt) and MongoDB-assigned
ObjectId primary keys.
"""

from datetime import datetime, timezone
from logging import getLogger
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collation import Collation, CollationStrength
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb.connection import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, NotFoundError, StoreUnavailableError
from domain.model.user import User, UserProfileUpdate

logger = getLogger(__name__)

# Case-insensitive email matching, so legacy mixed-case records are found
# and cannot be registered twice under a different case.
EMAIL_COLLATION = Collation(locale='en', strength=CollationStrength.SECONDARY)
EMAIL_INDEX_NAME = 'idx_users_email'

# Collections whose unique email index has been confirmed, by namespace
_verified_collections: set[str] = set()

# domain field -> document field
_FIELD_NAMES = {
    'first_name': 'firstName',
    'last_name': 'lastName',
}


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection.

        The unique email index is what makes concurrent registrations safe.
        """
        from adapter.mongodb.indexes import create_index_safe

        try:
            email_ok = create_index_safe(
                self.collection, [('email', 1)], EMAIL_INDEX_NAME,
                unique=True, collation=EMAIL_COLLATION,
            )
            created_ok = create_index_safe(self.collection, [('createdAt', -1)], 'idx_users_created_at')
            return email_ok and created_ok
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _has_unique_email_index(self) -> bool:
        try:
            indexes = self.collection.index_information()
        except PyMongoError as e:
            logger.error("Failed to read users indexes", extra={"error": str(e)})
            raise StoreUnavailableError("Failed to read users indexes") from e

        for info in indexes.values():
            collation = info.get('collation') or {}
            if (
                list(info.get('key', [])) == [('email', 1)]
                and info.get('unique')
                and collation.get('strength') == CollationStrength.SECONDARY
            ):
                return True
        return False

    def _require_unique_email_index(self):
        """Refuse to insert unless the case-insensitive unique email index exists.

        Startup may have skipped or failed index creation. Without the index two
        racing registrations would both succeed, so one more attempt is made here
        and inserts fail closed if it is still missing.
        """
        namespace = self.collection.full_name
        if namespace in _verified_collections:
            return

        if not self._has_unique_email_index():
            self.ensure_indexes()
            if not self._has_unique_email_index():
                logger.error("Unique email index missing, refusing to create users",
                             extra={"collection": namespace})
                raise StoreUnavailableError("Unique email index is missing")

        _verified_collections.add(namespace)

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=str(doc['_id']),
            email=doc['email'],
            first_name=doc.get('firstName', ''),
            last_name=doc.get('lastName', ''),
            created_at=doc['createdAt'],
            updated_at=doc.get('updatedAt'),
            password_hash=doc.get('password'),
        )

    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> User:
        """Insert a new user document. The unique index rejects duplicate emails."""
        self._require_unique_email_index()
        now = datetime.now(timezone.utc)
        user_doc = {
            'firstName': first_name,
            'lastName': last_name,
            'email': email,
            'password': password_hash,
            'createdAt': now,
            'updatedAt': now,
        }
        try:
            result = self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("Email already exists") from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreUnavailableError("Failed to create user") from e

        user_doc['_id'] = result.inserted_id
        user = self._to_domain(user_doc)
        logger.info("User created", extra={"userId": user.id, "email": email})
        return user

    def find_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email}, collation=EMAIL_COLLATION)
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StoreUnavailableError("Failed to get user by email") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found or not an ObjectId."""
        if not ObjectId.is_valid(user_id):
            return None
        try:
            doc = self.collection.find_one({'_id': ObjectId(user_id)})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to get user by ID") from e
        return self._to_domain(doc) if doc else None

    def update_by_email(self, email: str, update: UserProfileUpdate) -> User:
        """Apply a field-level $set of the fields present in update."""
        changes = {_FIELD_NAMES[name]: value for name, value in update.to_fields().items()}
        changes['updatedAt'] = datetime.now(timezone.utc)
        try:
            doc = self.collection.find_one_and_update(
                {'email': email},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
                collation=EMAIL_COLLATION,
            )
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"email": email, "error": str(e)})
            raise StoreUnavailableError("Failed to update user") from e

        if doc is None:
            raise NotFoundError("User not found")
        logger.debug("Updated user profile", extra={"email": email, "fields": sorted(changes)})
        return self._to_domain(doc)
