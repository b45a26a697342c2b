from fastapi import FastAPI

from . import (
    applications,
    auth,
    companies,
    contracts,
    health,
    instructors,
    notifications,
    reviews,
    training_requests,
)


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(companies.router)
    app.include_router(instructors.router)
    app.include_router(training_requests.router)
    app.include_router(applications.router)
    app.include_router(contracts.router)
    app.include_router(reviews.router)
    app.include_router(notifications.router)
