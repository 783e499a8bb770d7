# File: academy/api/v2/api.py
from fastapi import APIRouter
from .endpoints import (
    achievement_router,
    course_router,
    exercise_router,
    functions_router,
    learning_router,
    progress_router,
    user_router,
)

api_router = APIRouter()

api_router.include_router(user_router.router, prefix="/users", tags=["Users"])
api_router.include_router(course_router.router, prefix="/courses", tags=["Courses"])
api_router.include_router(learning_router.router, prefix="/learn", tags=["Learning"])
api_router.include_router(progress_router.router, prefix="/progress", tags=["Progress"])
api_router.include_router(achievement_router.router, prefix="/achievements", tags=["Achievements"])
api_router.include_router(exercise_router.router, prefix="/exercises", tags=["Exercises"])
api_router.include_router(functions_router.router, prefix="/functions", tags=["Functions"])
