"""
User API Routes

Handles:
- User registration
- User login (token issuance)
"""

from fastapi import APIRouter, Depends
from loguru import logger

from contactbook.api.dependencies import get_gateway, get_hasher, get_token_service
from contactbook.api.middleware.error_handler import BadRequestError, InternalServerError
from contactbook.api.schemas import (
    ErrorResponse,
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
)
from contactbook.security import PasswordHasher, TokenService
from contactbook.storage import PersistenceGateway


router = APIRouter(tags=["users"])


@router.post(
    "/user",
    response_model=UserResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields"},
        500: {"model": ErrorResponse, "description": "User could not be stored"},
    },
)
async def create_user(
    body: UserCreate,
    gateway: PersistenceGateway = Depends(get_gateway),
    hasher: PasswordHasher = Depends(get_hasher),
):
    """Register a new user. The password is stored as a salted hash."""
    if not body.name or not body.email or not body.password:
        raise BadRequestError("Nome, email e senha são obrigatórios")

    try:
        password_hash = await hasher.hash(body.password)
        user = await gateway.user.create(
            name=body.name,
            email=body.email,
            password_hash=password_hash,
        )
    except Exception as e:
        # Duplicate emails land here too; callers only see the generic message
        logger.exception(f"Failed to create user: {e}")
        raise InternalServerError("Erro ao criar usuário") from e

    logger.info(f"Registered user {user.id}")
    return UserResponse(**user.to_public_dict())


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields or bad credentials"},
    },
)
async def login_user(
    body: LoginRequest,
    gateway: PersistenceGateway = Depends(get_gateway),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Login endpoint.
    Returns a bearer token if the credentials are valid.
    """
    if not body.email or not body.password:
        raise BadRequestError("Email e senha são obrigatórios")

    user = await gateway.user.find_by_email(body.email)
    if user is None:
        raise BadRequestError("Usuário não encontrado")

    if not await hasher.compare(body.password, user.password):
        raise BadRequestError("Senha incorreta")

    access_token = tokens.issue(user.id, user.email)
    return TokenResponse(access_token=access_token)
