"""
Contact API Routes

CRUD operations for contacts. Every route except the single-contact lookup
requires a bearer token; creation and update accept a multipart ``image``.
"""

import re
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query
from loguru import logger

from contactbook.api.dependencies import get_current_user, get_gateway
from contactbook.api.middleware.error_handler import BadRequestError, InternalServerError
from contactbook.api.schemas import ContactResponse, ErrorResponse, MessageResponse
from contactbook.api.uploads import StoredFile, store_image
from contactbook.storage import PersistenceGateway


router = APIRouter(tags=["contacts"])

# Whole-string match: "12abc" and "1.5" are rejected rather than read as 12 and 1
_ID_PATTERN = re.compile(r"-?\d+", re.ASCII)

UNAUTHENTICATED = {401: {"model": ErrorResponse, "description": "Missing or invalid token"}}


def parse_id(value: Optional[str]) -> int:
    """Parse a numeric identifier from a path or query string."""
    if value is None or not _ID_PATTERN.fullmatch(value.strip()):
        raise BadRequestError("ID inválido")
    return int(value)


# =============================================================================
# Public
# =============================================================================

@router.get(
    "/contact",
    response_model=ContactResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid id or contact not found"}},
)
async def find_contact(
    id: Optional[str] = Query(None, description="Contact id"),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """Get a single contact by id."""
    contact_id = parse_id(id)

    contact = await gateway.contact.find_by_id(contact_id)
    if contact is None:
        raise BadRequestError("Contato não encontrado")

    return ContactResponse.model_validate(contact)


# =============================================================================
# Protected CRUD
# =============================================================================

@router.post(
    "/contacts",
    response_model=ContactResponse,
    dependencies=[Depends(get_current_user)],
    responses={
        **UNAUTHENTICATED,
        400: {"model": ErrorResponse, "description": "Missing field or image"},
        500: {"model": ErrorResponse, "description": "Contact could not be stored"},
    },
)
async def create_contact(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    telephone: Optional[str] = Form(None),
    image: Optional[StoredFile] = Depends(store_image),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """Create a contact. All four fields, including the image, are required."""
    if not name or not email or not telephone or image is None:
        raise BadRequestError("Nome, email, telefone e imagem são obrigatórios")

    try:
        contact = await gateway.contact.create(
            name=name,
            email=email,
            telephone=telephone,
            image=image.path,
        )
    except Exception as e:
        logger.exception(f"Failed to create contact: {e}")
        raise InternalServerError("Erro ao criar contato") from e

    return ContactResponse.model_validate(contact)


@router.get(
    "/contacts",
    response_model=list[ContactResponse],
    dependencies=[Depends(get_current_user)],
    responses=UNAUTHENTICATED,
)
async def get_contacts(
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """List every contact."""
    try:
        contacts = await gateway.contact.find_all()
    except Exception as e:
        logger.exception(f"Failed to list contacts: {e}")
        raise InternalServerError("Erro ao buscar contatos") from e

    return [ContactResponse.model_validate(c) for c in contacts]


@router.patch(
    "/contacts/{contact_id}",
    response_model=ContactResponse,
    dependencies=[Depends(get_current_user)],
    responses={
        **UNAUTHENTICATED,
        400: {"model": ErrorResponse, "description": "Nothing to update or invalid id"},
        500: {"model": ErrorResponse, "description": "Contact could not be updated"},
    },
)
async def update_contact(
    contact_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    telephone: Optional[str] = Form(None),
    image: Optional[StoredFile] = Depends(store_image),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """
    Partially update a contact.

    Only non-empty fields are applied; a new image replaces the stored path.
    """
    if image is None and not name and not email and not telephone:
        raise BadRequestError(
            "Pelo menos um campo (nome, email ou telefone) deve ser fornecido"
        )

    numeric_id = parse_id(contact_id)

    changes = {
        key: value
        for key, value in (("name", name), ("email", email), ("telephone", telephone))
        if value
    }
    if image is not None:
        changes["image"] = image.path

    try:
        contact = await gateway.contact.update(numeric_id, **changes)
    except Exception as e:
        # Missing rows are reported as a generic failure as well
        logger.exception(f"Failed to update contact {numeric_id}: {e}")
        raise InternalServerError("Erro ao atualizar contato") from e

    return ContactResponse.model_validate(contact)


@router.delete(
    "/contacts/{contact_id}",
    response_model=MessageResponse,
    dependencies=[Depends(get_current_user)],
    responses={
        **UNAUTHENTICATED,
        400: {"model": ErrorResponse, "description": "Invalid id"},
        500: {"model": ErrorResponse, "description": "Contact could not be deleted"},
    },
)
async def delete_contact(
    contact_id: str,
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """
    Delete a contact.

    Answers with the same success message whether or not a row matched.
    """
    numeric_id = parse_id(contact_id)

    try:
        deleted = await gateway.contact.delete(numeric_id)
    except Exception as e:
        logger.exception(f"Failed to delete contact {numeric_id}: {e}")
        raise InternalServerError("Erro ao excluir contato") from e

    if deleted is None:
        logger.warning(f"Delete matched no contact with id {numeric_id}")
    else:
        logger.info(f"Deleted contact {deleted.id} ({deleted.image})")

    return MessageResponse(message="Contato excluído com sucesso")
