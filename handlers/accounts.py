# ============================================================================
# ACCOUNT HANDLERS
# ============================================================================
# STATUS: Core - Account commands and queries
# PURPOSE: Create, read, list, update and delete customer accounts
# CREATED: 19 OCT 2026
# ============================================================================
"""
Account Handlers

Commands:
    CreateAccount    -> CreatedDto
    GetAccount       -> AccountDto | None
    GetAccounts      -> PagedResult[AccountDto]
    UpdateAccount    -> bool (False when the account does not exist)
    DeleteAccount    -> bool
"""

from dataclasses import dataclass
from typing import Optional

from core.contracts import PagedResult
from core.models import Account, Address
from handlers.dtos import AccountDto, CreatedDto
from handlers.registry import HandlerContext, register_handler


@dataclass(frozen=True)
class CreateAccount:
    first_name: str
    last_name: str
    email: Optional[str]
    phone: Optional[str]
    address: Address


@dataclass(frozen=True)
class GetAccount:
    account_id: str


@dataclass(frozen=True)
class GetAccounts:
    page_size: int
    continuation_token: Optional[str] = None


@dataclass(frozen=True)
class UpdateAccount:
    account_id: str
    first_name: str
    last_name: str
    email: Optional[str]
    phone: Optional[str]
    address: Address
    is_active: Optional[bool] = None


@dataclass(frozen=True)
class DeleteAccount:
    account_id: str


@register_handler(CreateAccount, description="Create a customer account")
async def create_account(command: CreateAccount, ctx: HandlerContext) -> CreatedDto:
    account = Account(
        first_name=command.first_name,
        last_name=command.last_name,
        email=command.email,
        phone=command.phone,
        address=command.address,
    )
    entity = await ctx.accounts.add(account)
    return CreatedDto(id=account.id, created_at=entity.created_utc)


@register_handler(GetAccount, description="Get one account by id")
async def get_account(command: GetAccount, ctx: HandlerContext) -> Optional[AccountDto]:
    entity = await ctx.accounts.get_by_id(command.account_id)
    return AccountDto.from_entity(entity) if entity else None


@register_handler(GetAccounts, description="List accounts by name")
async def get_accounts(command: GetAccounts, ctx: HandlerContext) -> PagedResult[AccountDto]:
    page = await ctx.accounts.query(command.page_size, command.continuation_token)
    return PagedResult(
        items=[AccountDto.from_entity(entity) for entity in page.items],
        continuation_token=page.continuation_token,
    )


@register_handler(UpdateAccount, description="Replace an account's details")
async def update_account(command: UpdateAccount, ctx: HandlerContext) -> bool:
    return await ctx.accounts.update(
        command.account_id,
        first_name=command.first_name,
        last_name=command.last_name,
        email=command.email,
        phone=command.phone,
        address=command.address,
        is_active=command.is_active,
    )


@register_handler(DeleteAccount, description="Delete an account")
async def delete_account(command: DeleteAccount, ctx: HandlerContext) -> bool:
    return await ctx.accounts.delete(command.account_id)


__all__ = [
    "CreateAccount",
    "GetAccount",
    "GetAccounts",
    "UpdateAccount",
    "DeleteAccount",
]
