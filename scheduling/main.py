"""
Scheduling Service FastAPI Application.

This module wires the GraphQL API for user authentication and appointment
scheduling into a FastAPI application backed by a SQLAlchemy database.

Endpoints:
    POST /graphql: GraphQL queries and mutations (GET serves the GraphiQL IDE)
    GET /healthz: Health check endpoint for orchestration systems

Attributes:
    app (FastAPI): The FastAPI application instance configured with the title "scheduling-service"
"""
import logging
from fastapi import FastAPI

from . import models
from .config import LOG_LEVEL
from .database import engine
from .graphql_schema import graphql_router

logging.basicConfig(level=LOG_LEVEL)

# Create database tables
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="scheduling-service")
app.include_router(graphql_router, prefix="/graphql")


@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the scheduling service.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): Always returns "healthy" when the service is operational.

    Example:
        GET /healthz
        Response: {"status": "healthy"}
    """
    return {"status": "healthy"}
