from storefront.domain.errors import NotFound, Unauthorized
from storefront.domain.validation import validate_registration
from storefront.repos.base import Collection, Record, Storage
from storefront.utils.ids import IdGenerator
from storefront.utils.logging import get_logger
from storefront.utils.settings import ENFORCE_NAME_LENGTH

logger = get_logger(__name__)


class UserService:
    """Registration and bearer-token authentication."""

    def __init__(
        self,
        storage: Storage,
        ids: IdGenerator | None = None,
        enforce_name_length: bool = ENFORCE_NAME_LENGTH,
    ):
        self.storage = storage
        self.ids = ids or storage.ids
        self.enforce_name_length = enforce_name_length

    def register(self, email: str, name: str, password: str) -> Record:
        validate_registration(email, name, password, self.enforce_name_length)

        # the password only gates registration; it is not persisted
        user = self.storage.insert(
            Collection.USERS,
            {"id": self.ids(), "email": email, "name": name},
        )
        logger.info(f"Registered user {user['id']}")
        return user

    def get_user(self, user_id: str) -> Record:
        return self.storage.find_by_id(Collection.USERS, user_id)

    def authenticate(self, token: str | None) -> Record:
        if not token:
            raise Unauthorized("x-user-id header is required")
        try:
            return self.storage.find_by_id(Collection.USERS, token)
        except NotFound:
            raise Unauthorized("Invalid x-user-id") from None
