"""
routers/ — FastAPI route modules.

Each file contains a thin APIRouter. All business logic
lives in services/. Routers validate input, check the session,
call services, and return responses.
"""
