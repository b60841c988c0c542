from fastapi import APIRouter, Depends

from app.core.security import SessionIdentity
from app.core.session import get_current_identity

router = APIRouter()


@router.get("/me")
async def read_current_parent(identity: SessionIdentity = Depends(get_current_identity)):
    """Return the identity carried by the session token."""
    return {
        "success": True,
        "identity": {
            "id": identity.id,
            "email": identity.email,
            "name": identity.name,
            "role": identity.role,
        },
    }
