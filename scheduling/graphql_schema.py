"""
GraphQL API layer.

Defines the Strawberry schema (types, inputs, queries and mutations), the
request context getter that resolves the bearer token, and the router
mounted by the FastAPI application.
"""
import logging
from typing import List, Optional

import strawberry
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from graphql import GraphQLError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from strawberry.extensions import SchemaExtension
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info
from strawberry.utils.logging import StrawberryLogger

from . import appointments, auth, schemas
from .database import get_db
from .errors import SchedulingError

logger = logging.getLogger(__name__)

# Bearer token is optional: anonymous requests still reach the resolvers
security = HTTPBearer(auto_error=False)

AppointmentStatus = strawberry.enum(schemas.AppointmentStatus, name="AppointmentStatus")


@strawberry.type
class User:
    id: strawberry.ID
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dto(cls, dto: schemas.User) -> "User":
        return cls(**dto.model_dump())


@strawberry.type
class AuthPayload:
    token: str
    user: User

    @classmethod
    def from_dto(cls, dto: schemas.AuthPayload) -> "AuthPayload":
        return cls(token=dto.token, user=User.from_dto(dto.user))


@strawberry.type
class Appointment:
    id: strawberry.ID
    title: str
    description: Optional[str]
    start_time: str
    end_time: str
    status: AppointmentStatus
    client_name: str
    client_email: str
    location: Optional[str]
    notes: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]

    @classmethod
    def from_dto(cls, dto: schemas.Appointment) -> "Appointment":
        return cls(**dto.model_dump())


@strawberry.input
class CreateAppointmentInput:
    title: str
    start_time: str
    end_time: str
    client_name: str
    client_email: str
    description: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[AppointmentStatus] = None


@strawberry.input
class UpdateAppointmentInput:
    title: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    start_time: Optional[str] = strawberry.UNSET
    end_time: Optional[str] = strawberry.UNSET
    client_name: Optional[str] = strawberry.UNSET
    client_email: Optional[str] = strawberry.UNSET
    location: Optional[str] = strawberry.UNSET
    notes: Optional[str] = strawberry.UNSET
    status: Optional[AppointmentStatus] = strawberry.UNSET


def _supplied(input_obj) -> dict:
    return {key: value for key, value in vars(input_obj).items() if value is not strawberry.UNSET}


@strawberry.type
class Query:
    @strawberry.field
    def me(self, info: Info) -> Optional[User]:
        user = info.context["user"]
        if user is None:
            return None
        return User.from_dto(schemas.to_user_dto(user))

    @strawberry.field
    async def appointments(self, info: Info) -> List[Appointment]:
        dtos = await run_in_threadpool(appointments.list_appointments, info.context["db"])
        return [Appointment.from_dto(dto) for dto in dtos]

    @strawberry.field
    async def appointment(self, info: Info, id: strawberry.ID) -> Optional[Appointment]:
        dto = await run_in_threadpool(appointments.get_appointment, info.context["db"], id)
        return Appointment.from_dto(dto)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def register(self, info: Info, email: str, password: str, name: Optional[str] = None) -> AuthPayload:
        payload = await run_in_threadpool(auth.register, info.context["db"], email, password, name)
        return AuthPayload.from_dto(payload)

    @strawberry.mutation
    async def login(self, info: Info, email: str, password: str) -> AuthPayload:
        payload = await run_in_threadpool(auth.login, info.context["db"], email, password)
        return AuthPayload.from_dto(payload)

    @strawberry.mutation
    async def create_appointment(self, info: Info, input: CreateAppointmentInput) -> Appointment:
        dto = await run_in_threadpool(appointments.create_appointment, info.context["db"], vars(input))
        return Appointment.from_dto(dto)

    @strawberry.mutation
    async def update_appointment(self, info: Info, id: strawberry.ID, input: UpdateAppointmentInput) -> Appointment:
        dto = await run_in_threadpool(appointments.update_appointment, info.context["db"], id, _supplied(input))
        return Appointment.from_dto(dto)

    @strawberry.mutation
    async def delete_appointment(self, info: Info, id: strawberry.ID) -> bool:
        return await run_in_threadpool(appointments.delete_appointment, info.context["db"], id)


class ErrorCodes(SchemaExtension):
    """Adds ``extensions.code`` to errors raised by the service layer."""

    def on_operation(self):
        yield
        result = self.execution_context.result
        if result is None or not getattr(result, "errors", None):
            return
        result.errors = [self._with_code(error) for error in result.errors]

    @staticmethod
    def _with_code(error: GraphQLError) -> GraphQLError:
        original = error.original_error
        if not isinstance(original, SchedulingError):
            return error
        return GraphQLError(
            error.message,
            nodes=error.nodes,
            source=error.source,
            positions=error.positions,
            path=error.path,
            original_error=original,
            extensions={**(error.extensions or {}), "code": original.code},
        )


class SchedulingSchema(strawberry.Schema):
    def process_errors(self, errors, execution_context=None) -> None:
        for error in errors:
            if isinstance(error.original_error, SchedulingError):
                logger.info(f"{type(error.original_error).__name__}: {error.message}")
            else:
                StrawberryLogger.error(error, execution_context)


schema = SchedulingSchema(query=Query, mutation=Mutation, extensions=[ErrorCodes])


def get_context(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Build the per-request GraphQL context.

    Returns:
        dict with the request's database session under "db" and the
        authenticated User (or None) under "user"
    """
    token = credentials.credentials if credentials else None
    return {"db": db, "user": auth.get_user_from_token(db, token)}


graphql_router = GraphQLRouter(schema, context_getter=get_context)
