"""Demo sign-in routes."""

from fastapi import APIRouter, Depends

from proposal_box.dependencies import get_current_identity
from proposal_box.schemas.common import ApiResponse
from proposal_box.schemas.identity import Identity, LoginRequest, LoginResult, RegisterRequest
from proposal_box.services.identity import DemoIdentityProvider

router = APIRouter(prefix="/identity")


@router.post("/login", response_model=ApiResponse[LoginResult])
def login(payload: LoginRequest) -> ApiResponse[LoginResult]:
    """Demo login; the client forwards the returned identity as headers afterwards."""

    return ApiResponse(data=DemoIdentityProvider().login(payload.email, payload.password))


@router.post("/register", response_model=ApiResponse[LoginResult])
def register(payload: RegisterRequest) -> ApiResponse[LoginResult]:
    """Demo registration as a member."""

    return ApiResponse(data=DemoIdentityProvider().register(payload.name, payload.email, payload.group_label))


@router.get("/me", response_model=ApiResponse[Identity | None])
def whoami(viewer: Identity | None = Depends(get_current_identity)) -> ApiResponse[Identity | None]:
    """Identity resolved from the request headers."""

    return ApiResponse(data=viewer)
