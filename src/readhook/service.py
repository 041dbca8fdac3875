"""Read pipeline dispatch for one application service."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from readhook.envelope import unpack_rows
from readhook.errors import EntityNotFoundError, ReadRejectedError
from readhook.registry import HandlerRegistry
from readhook.types import HookEvent, ReadRequest, ResponseEnvelope

ErrorObserver = Callable[[str, Exception, ReadRequest], None]

REJECTED_CODE = 405
NOT_FOUND_CODE = 404


class ApplicationService:
    """Runs before, on and after READ handlers bound in a registry."""

    def __init__(
        self,
        name: str,
        registry: HandlerRegistry,
        *,
        on_error: ErrorObserver | None = None,
    ) -> None:
        self.name = name
        self.registry = registry
        self._on_error = on_error

    def reject(self, operation: str, entity: str) -> None:
        """Refuse every ``operation`` on ``entity`` for this service before on-handlers run."""

        self.registry.reject(operation, entity, service=self.name)

    def is_rejected(self, operation: str, entity: str) -> bool:
        return self.registry.is_rejected(operation, entity, service=self.name)

    def read(self, request: ReadRequest | str) -> ResponseEnvelope:
        """Run one READ through the pipeline and return the final envelope.

        A ``ReadRejectedError`` raised by a before, on or after handler becomes a
        failure envelope carrying its code. Other exceptions propagate to the
        caller after error observers were notified.
        """

        if isinstance(request, str):
            request = ReadRequest(entity=request, service=self.name)
        elif request.service is None:
            request = replace(request, service=self.name)

        stage = HookEvent.BEFORE_READ.value
        try:
            request = self._run_before(request)
            if self.is_rejected(HookEvent.ON_READ.operation, request.entity):
                logger.info("read.rejected service={} entity={}", self.name, request.entity)
                return ResponseEnvelope.failure(
                    request.entity,
                    f"Operation READ on '{request.entity}' is not allowed",
                    REJECTED_CODE,
                )

            stage = HookEvent.ON_READ.value
            response = self._run_on(request)
            if not response.ok:
                return response

            stage = HookEvent.AFTER_READ.value
            response = self._run_after(request, response)
        except ReadRejectedError as exc:
            logger.info(
                "read.refused service={} entity={} stage={} code={}", self.name, request.entity, stage, exc.code
            )
            return ResponseEnvelope.failure(request.entity, str(exc), exc.code)
        except Exception as exc:
            self._notify_error(stage, exc, request)
            raise

        logger.debug(
            "read.done service={} entity={} status={} records={}",
            self.name,
            request.entity,
            response.status.value,
            len(response.data),
        )
        return response

    def _run_before(self, request: ReadRequest) -> ReadRequest:
        for handler in self.registry.handlers_for(HookEvent.BEFORE_READ, request.entity, service=self.name):
            replaced = handler(request)
            if replaced is not None:
                request = replaced
        return request

    def _run_on(self, request: ReadRequest) -> ResponseEnvelope:
        for handler in self.registry.handlers_for(HookEvent.ON_READ, request.entity, service=self.name):
            try:
                result = handler(request)
            except EntityNotFoundError:
                continue
            if result is not None:
                return ResponseEnvelope.success(unpack_rows(request.entity, result))

        logger.info("read.not_found service={} entity={}", self.name, request.entity)
        return ResponseEnvelope.failure(request.entity, str(EntityNotFoundError(request.entity)), NOT_FOUND_CODE)

    def _run_after(self, request: ReadRequest, response: ResponseEnvelope) -> ResponseEnvelope:
        for handler in self.registry.handlers_for(HookEvent.AFTER_READ, request.entity, service=self.name):
            replaced = handler(request, response)
            if replaced is not None:
                response = replaced
        return response

    def _notify_error(self, stage: str, error: Exception, request: ReadRequest) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(stage, error, request)
        except Exception:
            logger.opt(exception=True).warning("read.on_error_failed stage={} entity={}", stage, request.entity)
