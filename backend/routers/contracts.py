import base64
import binascii
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from models import User, CONTRACT_STATUSES
from schemas.contracts import ContractCreateInput, ContractOut, ContractStats, DeleteResponse, ScanResponse
from services import db_ops
from services.auth import require_user
from services.container import Services, get_db, get_services

router = APIRouter(prefix="/api/contracts", tags=["contracts"])


def decode_file(file_data: str) -> bytes:
    """Decode the base64 payload, accepting data: URLs from the browser"""
    if file_data.startswith("data:") and "," in file_data:
        file_data = file_data.split(",", 1)[1]
    try:
        data = base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="fileData is not valid base64")
    if not data:
        raise HTTPException(status_code=400, detail="fileData is empty")
    return data


@router.get("", response_model=list[ContractOut])
async def list_contracts(
    type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """List the user's contracts, newest first"""
    if status and status not in CONTRACT_STATUSES:
        raise HTTPException(status_code=400, detail=f"Unknown status: {status}")
    contracts = db_ops.get_user_contracts(db, user.id, contract_type=type, status=status)
    return [ContractOut.from_row(c) for c in contracts]


@router.get("/stats", response_model=ContractStats)
async def contract_stats(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return ContractStats(**db_ops.get_user_stats(db, user.id))


@router.get("/{contract_id}", response_model=ContractOut)
async def get_contract(
    contract_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    return ContractOut.from_row(services.workflow.get_scan(db, user.id, contract_id))


@router.delete("/{contract_id}", response_model=DeleteResponse)
async def delete_contract(
    contract_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    return DeleteResponse(**services.workflow.delete_scan(db, user.id, contract_id))


@router.post("", response_model=ScanResponse)
async def create_contract(
    input: ContractCreateInput,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Scan an uploaded contract and store its analysis"""
    file_bytes = decode_file(input.file_data)
    result = await services.workflow.submit_scan(db, user, input.file_name, file_bytes)
    return ScanResponse(contract=ContractOut.from_row(result["contract"]), analysis=result["analysis"])
