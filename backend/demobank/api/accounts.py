from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from demobank.database import get_db
from demobank.middlewares.auth import get_current_user
from demobank.models import User
from demobank.schemas.support import ERROR_RESPONSES
from demobank.schemas.account import AccountRead, TransactionRead
from demobank.services import ledger_service

router = APIRouter(tags=["accounts"], responses=ERROR_RESPONSES)


@router.get("/accounts", response_model=List[AccountRead])
async def list_accounts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ledger_service.list_accounts_for_user(db, user.id)


@router.get("/transactions", response_model=List[TransactionRead])
async def list_transactions(
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ledger_service.list_transactions(db, user.id, account_id)
