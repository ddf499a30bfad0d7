# src/auth/routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from auth.services import AuthService
from config import settings
from database import get_db
from exceptions import NotFoundError
from members.models import Member
from members.schemas import MemberResponse
from members.services import MemberService

router = APIRouter(prefix="/auth", tags=["auth"])
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_member(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme), db: Session = Depends(get_db)) -> Member:
    """Retrieve the member behind the bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    uid = AuthService.decode_member_uid(credentials.credentials)
    if uid is None:
        raise credentials_exception
    try:
        return MemberService.find_member_by_uid(uid, db).data
    except NotFoundError:
        raise credentials_exception


def get_owner_profile(current_member: Member = Depends(get_current_member), db: Session = Depends(get_db)) -> Member:
    """The account owner's profile, which carries the subscription."""
    if current_member.uid == current_member.owner_id:
        return current_member
    try:
        return MemberService.find_member_by_uid(current_member.owner_id, db).data
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Account owner profile not found")


def check_admin_role(current_member: Member = Depends(get_current_member)) -> Member:
    """Ensure the member is an administrator."""
    if current_member.role != "admin" and current_member.email not in settings.ADMIN_EMAILS:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_member


@router.get("/me", response_model=MemberResponse)
def read_members_me(current_member: Member = Depends(get_current_member)):
    """Get current member details."""
    return MemberResponse.model_validate(current_member)
