"""
SQL data access - executes generic statements and stored procedures, always returning an envelope.
Challenge: One failure contract for every call (configuration, validation, driver, timeout).
Design: Errors are raised as DataAccessError inside and converted to ResponseEnvelope.error /
error_code at this boundary; callers never see an exception for a failed query.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import text
from sqlalchemy.engine import CursorResult, make_url
from sqlalchemy.exc import (
    ArgumentError,
    DBAPIError,
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from dbinteraction.config import Settings
from dbinteraction.core.errors import ConfigurationError, DataAccessError, ErrorKind
from dbinteraction.core.metrics import DATA_ACCESS_LATENCY, DATA_ACCESS_OPERATIONS
from dbinteraction.db.enums import DatabaseTables, QueryType
from dbinteraction.db.session import ConnectionFactory
from dbinteraction.db.statements import Statement, build_procedure_call, build_statement
from dbinteraction.schemas.common import NO_ID, GenericResponse, ResponseEnvelope

logger = logging.getLogger(__name__)

RowType = TypeVar("RowType", bound=BaseModel)


def classify_error(exc: Exception, backend: str) -> DataAccessError:
    """Map a driver/ORM exception to a DataAccessError with a retry-relevant kind."""
    if isinstance(exc, ArgumentError):
        # Unknown driver or malformed URL
        return ConfigurationError(str(exc))
    if isinstance(exc, (DisconnectionError, PoolTimeoutError, InterfaceError, OSError)):
        return DataAccessError(str(exc), kind=ErrorKind.TRANSIENT)
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return DataAccessError(str(exc), kind=ErrorKind.TRANSIENT)
    # sqlite reports statement errors (missing table, syntax) as OperationalError
    if isinstance(exc, OperationalError) and backend != "sqlite":
        return DataAccessError(str(exc), kind=ErrorKind.TRANSIENT)
    return DataAccessError(str(exc), kind=ErrorKind.EXECUTION)


def as_parameters(parameters: BaseModel | Mapping[str, Any] | None) -> dict[str, Any]:
    """Procedure parameters from a model (by column alias, unset fields dropped) or a mapping."""
    if parameters is None:
        return {}
    if isinstance(parameters, BaseModel):
        return parameters.model_dump(by_alias=True, exclude_none=True)
    if isinstance(parameters, Mapping):
        return dict(parameters)
    raise DataAccessError(
        f"unsupported parameter object: {type(parameters).__name__}", kind=ErrorKind.INVALID_QUERY
    )


def _fetch_rows(result: CursorResult, row_type: type[RowType] | None) -> list | None:
    """Mapped rows in engine order, or None for statements that return no rows."""
    if not result.returns_rows:
        return None
    rows = result.mappings().all()
    if row_type is None:
        return [dict(row) for row in rows]
    return [row_type.model_validate(dict(row)) for row in rows]


class SqlDataAccess:
    """Generic statement and stored-procedure execution against named connections.

    Every operation takes keyword-only ``timeout`` (seconds; None uses the configured
    default, 0 disables) and ``cancel`` (an asyncio.Event the caller may set to abandon
    the call). Both surface as error kinds on the envelope.
    """

    def __init__(self, settings: Settings, connections: ConnectionFactory):
        self.settings = settings
        self.connections = connections

    def get_connection_string(self, name: str) -> str:
        """Connection string registered under name. Raises ConfigurationError if missing."""
        connection_string = self.settings.connection_strings.get(name)
        if not connection_string:
            raise ConfigurationError(f"connection string {name!r} is not configured")
        return connection_string

    async def generic_query(
        self,
        connection_name: str,
        query_type: QueryType,
        table: DatabaseTables | str | None = None,
        columns: str | Sequence[str] = "",
        condition: str = "",
        value: Any = None,
        values: Sequence[Any] | Mapping[str, Any] | None = None,
        uses_pseudonym: bool = False,
        *,
        row_type: type[RowType] | None = None,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> ResponseEnvelope:
        """Build a statement from query_type and its parts (see db.statements) and run it."""
        envelope_type = ResponseEnvelope[row_type] if row_type else ResponseEnvelope[dict]

        def build(backend: str) -> Statement:
            return build_statement(
                query_type, table, columns, condition, value, values, uses_pseudonym
            )

        def consume(result: CursorResult) -> ResponseEnvelope:
            rows = _fetch_rows(result, row_type)
            if rows is None:
                # INSERT/UPDATE/DELETE: affected rows
                return envelope_type(count=max(result.rowcount, 0))
            return envelope_type.from_rows(rows)

        return await self._call(
            f"generic_query:{getattr(query_type, 'value', query_type)}",
            envelope_type,
            lambda: self._run(connection_name, build, consume),
            timeout,
            cancel,
        )

    async def load_data(
        self,
        connection_name: str,
        procedure_name: str,
        parameters: BaseModel | Mapping[str, Any] | None = None,
        *,
        row_type: type[RowType] | None = None,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> ResponseEnvelope:
        """Run a stored procedure and map its result rows."""
        envelope_type = ResponseEnvelope[row_type] if row_type else ResponseEnvelope[dict]

        def build(backend: str) -> Statement:
            return build_procedure_call(backend, procedure_name, as_parameters(parameters))

        def consume(result: CursorResult) -> ResponseEnvelope:
            return envelope_type.from_rows(_fetch_rows(result, row_type) or [])

        return await self._call(
            f"load_data:{procedure_name}",
            envelope_type,
            lambda: self._run(connection_name, build, consume),
            timeout,
            cancel,
        )

    async def save_data(
        self,
        procedure_name: str,
        parameters: BaseModel | Mapping[str, Any] | None,
        connection_name: str,
        *,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> ResponseEnvelope[GenericResponse]:
        """Run a procedure that returns the new row's id as a scalar."""
        envelope_type = ResponseEnvelope[GenericResponse]

        def build(backend: str) -> Statement:
            return build_procedure_call(backend, procedure_name, as_parameters(parameters))

        def consume(result: CursorResult) -> ResponseEnvelope[GenericResponse]:
            scalar = result.scalar() if result.returns_rows else None
            try:
                new_id = int(scalar) if scalar is not None else NO_ID
            except (TypeError, ValueError) as exc:
                raise DataAccessError(
                    f"{procedure_name} returned a non-integer id: {scalar!r}", kind=ErrorKind.EXECUTION
                ) from exc
            return envelope_type(data=[GenericResponse(id=new_id, status_data="success")], count=1)

        return await self._call(
            f"save_data:{procedure_name}",
            envelope_type,
            lambda: self._run(connection_name, build, consume),
            timeout,
            cancel,
        )

    async def delete_data(
        self,
        procedure_name: str,
        connection_name: str,
        id: int = NO_ID,
        *,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> ResponseEnvelope[GenericResponse]:
        """Run a delete procedure. Id is bound only when id != -1 (no id filter otherwise)."""
        envelope_type = ResponseEnvelope[GenericResponse]
        parameters = {} if id == NO_ID else {"Id": id}

        def build(backend: str) -> Statement:
            return build_procedure_call(backend, procedure_name, parameters)

        def consume(result: CursorResult) -> ResponseEnvelope[GenericResponse]:
            return envelope_type(
                data=[GenericResponse(status_data="deleted")], count=max(result.rowcount, 0)
            )

        return await self._call(
            f"delete_data:{procedure_name}",
            envelope_type,
            lambda: self._run(connection_name, build, consume),
            timeout,
            cancel,
        )

    async def _run(
        self,
        connection_name: str,
        build: Callable[[str], Statement],
        consume: Callable[[CursorResult], ResponseEnvelope],
    ) -> ResponseEnvelope:
        """Resolve the connection, build the statement, execute it in one transaction."""
        connection_string = self.get_connection_string(connection_name)
        try:
            backend = make_url(connection_string).get_backend_name()
        except ArgumentError as exc:
            raise ConfigurationError(f"connection string {connection_name!r} is malformed: {exc}") from exc
        statement = build(backend)
        logger.debug("executing on %s: %s", connection_name, statement.preview())
        try:
            async with self.connections.connect(connection_string) as conn:
                result = await conn.execute(text(statement.text), statement.params)
                return consume(result)
        except (SQLAlchemyError, OSError) as exc:
            raise classify_error(exc, backend) from exc
        except ImportError as exc:
            # create_async_engine imports the DBAPI module named by the URL
            raise ConfigurationError(
                f"driver for connection string {connection_name!r} is not installed: {exc}"
            ) from exc
        except ValidationError as exc:
            raise DataAccessError(f"row does not match the result type: {exc}") from exc

    async def _call(
        self,
        operation: str,
        envelope_type: type[ResponseEnvelope],
        work: Callable[[], Awaitable[ResponseEnvelope]],
        timeout: float | None,
        cancel: asyncio.Event | None,
    ) -> ResponseEnvelope:
        """Run work under the deadline/cancel token; convert failures into the envelope."""
        if timeout is None:
            timeout = self.settings.query_timeout_seconds
        started = time.perf_counter()
        try:
            if cancel is not None and cancel.is_set():
                raise DataAccessError("cancelled by caller before execution", kind=ErrorKind.CANCELLED)
            envelope = await self._guard(work(), timeout, cancel)
        except DataAccessError as exc:
            logger.warning("%s failed (%s): %s", operation, exc.kind.value, exc)
            envelope = envelope_type.from_error(exc)
        except Exception as exc:
            logger.exception("%s failed unexpectedly", operation)
            envelope = envelope_type.from_error(
                DataAccessError(f"{type(exc).__name__}: {exc}", kind=ErrorKind.EXECUTION)
            )
        else:
            logger.debug("%s ok: count=%d", operation, envelope.count)
        finally:
            DATA_ACCESS_LATENCY.labels(operation=operation).observe(time.perf_counter() - started)
        outcome = envelope.error_code.value if envelope.error_code else "ok"
        DATA_ACCESS_OPERATIONS.labels(operation=operation, outcome=outcome).inc()
        return envelope

    @staticmethod
    async def _guard(
        work: Awaitable[ResponseEnvelope], timeout: float, cancel: asyncio.Event | None
    ) -> ResponseEnvelope:
        """Await work, giving up when the timeout passes or the cancel token is set."""
        task = asyncio.ensure_future(work)
        waiters = {task}
        stopper = None
        if cancel is not None:
            stopper = asyncio.ensure_future(cancel.wait())
            waiters.add(stopper)
        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout or None, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if stopper is not None:
                stopper.cancel()
        if task in done:
            return task.result()
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        if stopper is not None and stopper in done:
            raise DataAccessError("cancelled by caller", kind=ErrorKind.CANCELLED)
        raise DataAccessError(f"timed out after {timeout}s", kind=ErrorKind.TIMEOUT)
