from fastapi import APIRouter

from api.auth.routes import router as auth_router
from api.customer.routes import router as customer_router
from api.provider_group.routes import router as provider_group_router
from api.provider.routes import router as provider_router
from api.user.routes import router as user_router
from api.submission.routes import router as submission_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(customer_router, prefix="/customers", tags=["customers"])
api_router.include_router(provider_group_router, prefix="/provider-groups", tags=["provider-groups"])
api_router.include_router(provider_router, prefix="/providers", tags=["providers"])
api_router.include_router(user_router, prefix="/users", tags=["users"])
api_router.include_router(submission_router, prefix="/submissions", tags=["submissions"])
