"""
The three HashText operations.

HashTextService is built around an explicit HashTextDatabase and knows
nothing about HTTP beyond the HashTextError it raises. Every storage
fault is logged here with the operation and key, then surfaced as
InternalError.
"""

import structlog
from fastapi import Request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from .db import HashTextDatabase
from .errors import BadRequestError, InternalError, NotFoundError, PaymentRequiredError
from .hashing import sha256_hex
from .models import AuthenticatedUser, HashResponse, TextDocument, UserResponse

logger = structlog.get_logger()


class HashTextService:
    def __init__(self, database: HashTextDatabase):
        self.database = database

    def authorize(self, user_id: str | None) -> AuthenticatedUser | None:
        """
        Resolve a header token to an identity.

        Returns None for a missing, empty or unknown token. Performs
        exactly one user lookup when a token is present.
        """
        if not user_id:
            return None

        try:
            found = self.database.user_exists(user_id)
        except SQLAlchemyError as e:
            logger.error("Query to look up user failed", operation="authorize", user_id=user_id, error=str(e))
            raise InternalError() from e

        return AuthenticatedUser(user_id=user_id) if found else None

    def get_user(self, user: AuthenticatedUser) -> UserResponse:
        try:
            row = self.database.get_user(user.user_id)
        except SQLAlchemyError as e:
            logger.error("Query to look up user failed", operation="get_user", user_id=user.user_id, error=str(e))
            raise InternalError() from e

        if row is None:
            raise NotFoundError()

        return UserResponse(user_id=row.user_id, name=row.name, credit=row.credit)

    def submit_text(self, user: AuthenticatedUser, body: bytes) -> HashResponse:
        """
        Store text under its hash and charge the user one credit.

        Credit is checked before the body is even parsed. The insert and
        the debit are separate statements: once the insert succeeds the
        hash is returned even if the debit fails.
        """
        try:
            credit = self.database.get_credit(user.user_id)
        except SQLAlchemyError as e:
            logger.error("Query to look up credit failed", operation="submit_text", user_id=user.user_id, error=str(e))
            raise InternalError() from e

        # A user deleted since the gate ran has no credit either
        if credit is None or credit <= 0:
            raise PaymentRequiredError()

        try:
            document = TextDocument.model_validate_json(body)
        except ValidationError as e:
            raise BadRequestError("Could not decode the request body as JSON") from e

        text_hash = sha256_hex(document.text)

        try:
            inserted = self.database.insert_text(text_hash, document.text)
        except SQLAlchemyError as e:
            logger.error("Failed to insert text", operation="submit_text", hash=text_hash, error=str(e))
            raise InternalError() from e

        try:
            self.database.debit_credit(user.user_id)
        except SQLAlchemyError as e:
            logger.error("Failed to debit user", operation="submit_text", user_id=user.user_id, error=str(e))
        else:
            logger.info("Text stored", hash=text_hash, user_id=user.user_id, inserted=inserted)

        return HashResponse(hash=text_hash)

    def get_text(self, text_hash: str) -> TextDocument:
        try:
            text = self.database.get_text(text_hash)
        except SQLAlchemyError as e:
            logger.error("Query to look up text by hash failed", operation="get_text", hash=text_hash, error=str(e))
            raise InternalError() from e

        if text is None:
            raise NotFoundError()

        return TextDocument(text=text)


def get_service(request: Request) -> HashTextService:
    """FastAPI dependency returning the service attached to the running app."""
    return request.app.state.service
