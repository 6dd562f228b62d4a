from fastapi import APIRouter
from app.api.v1.endpoints import auth, courses, enrollments, quizzes, role_requests

# ============================================================
# Main API v1 Router
# ============================================================

api_router = APIRouter()

# Include auth routes at /auth
api_router.include_router(
    auth.router,
    prefix="/auth"
)

api_router.include_router(
    courses.router,
    prefix=""  # Routes define their own prefixes (/courses, /topics, /content-items)
)

api_router.include_router(
    enrollments.router,
    prefix=""  # Routes define their own prefixes (/courses/{id}/enroll, /enrollments)
)

# Quiz routes live under /quiz (set on the router itself)
api_router.include_router(quizzes.router)

api_router.include_router(
    role_requests.router,
    prefix=""  # Routes define their own prefixes (/role-requests, /admin/role-requests)
)
