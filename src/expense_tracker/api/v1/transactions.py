"""Transaction endpoints. Every route is scoped to the authenticated user."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from expense_tracker.api.deps import CurrentIdentity, get_transaction_service
from expense_tracker.core.exceptions import NotFoundError
from expense_tracker.models.transaction import Transaction
from expense_tracker.schemas.transaction import (
    BalanceResult,
    SummaryResult,
    TransactionCreate,
    TransactionFilter,
    TransactionResponse,
    TransactionUpdate,
)
from expense_tracker.services.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])

Service = Annotated[TransactionService, Depends(get_transaction_service)]


@router.get(
    "",
    response_model=list[TransactionResponse],
    summary="List transactions",
    description="All of the current user's transactions, newest first.",
)
async def list_transactions(identity: CurrentIdentity, service: Service):
    return await service.list_all(identity.user_id)


@router.get(
    "/filter",
    response_model=list[TransactionResponse],
    summary="Filter transactions",
    description="""
    Filter the current user's transactions by creation time.

    ## Filters
    - **start_date**, **end_date**: Inclusive bounds
    - **month**: Calendar month (1-12)
    - **year**: Calendar year

    Filters combine with AND; omitted filters are ignored.
    """,
)
async def filter_transactions(
    identity: CurrentIdentity,
    service: Service,
    filters: Annotated[TransactionFilter, Query()],
):
    """
    Raises:
        400: start_date after end_date, or malformed filter values
    """
    return await service.list_filtered(identity.user_id, **filters.model_dump())


@router.get("/balance", response_model=BalanceResult, summary="Current balance")
async def get_balance(identity: CurrentIdentity, service: Service) -> BalanceResult:
    return BalanceResult(balance=await service.get_balance(identity.user_id))


@router.get("/summary", response_model=SummaryResult, summary="Income/expense summary")
async def get_summary(identity: CurrentIdentity, service: Service) -> SummaryResult:
    return await service.get_summary(identity.user_id)


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction",
)
async def get_transaction(transaction_id: UUID, identity: CurrentIdentity, service: Service):
    """
    Raises:
        404: Not found or owned by another user
    """
    return await service.get_owned(transaction_id, identity.user_id)


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a transaction",
)
async def create_transaction(
    data: TransactionCreate, identity: CurrentIdentity, service: Service
):
    """
    The owner is always the authenticated user; any user_id in the body is ignored.

    Raises:
        400: Validation error
    """
    transaction = Transaction(
        user_id=identity.user_id,
        amount=data.amount,
        description=data.description,
        type=data.type,
    )
    return await service.create(transaction)


@router.put(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update a transaction",
)
async def update_transaction(
    transaction_id: UUID,
    data: TransactionUpdate,
    identity: CurrentIdentity,
    service: Service,
) -> Response:
    """
    Replace amount, description and type. created_at is preserved.

    Raises:
        400: Validation error
        404: Not found, owned by another user, or body id differs from path
    """
    if data.id is not None and data.id != transaction_id:
        raise NotFoundError(
            details={"transaction_id": str(transaction_id), "body_id": str(data.id)}
        )

    await service.update(
        transaction_id,
        identity.user_id,
        amount=data.amount,
        description=data.description,
        type=data.type,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: UUID, identity: CurrentIdentity, service: Service
) -> Response:
    """
    Raises:
        404: Not found or owned by another user
    """
    await service.delete(transaction_id, identity.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
