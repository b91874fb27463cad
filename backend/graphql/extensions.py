"""
GraphQL Extensions

Custom extensions for performance monitoring and error logging.
"""

import time
from typing import Any, Dict
from strawberry.extensions import SchemaExtension

from src.utils.logger import get_logger

from .errors import PUBLIC_ERRORS

logger = get_logger(__name__)

SLOW_OPERATION_SECONDS = 1.0


class PerformanceMonitoringExtension(SchemaExtension):
    """
    Extension to monitor GraphQL operation performance.

    Logs execution time and operation name.
    """

    def on_operation(self):
        self.start_time = time.time()

        operation = self.execution_context.operation_name
        if operation:
            logger.info(f"🔍 GraphQL operation started: {operation}")
        else:
            query = self.execution_context.query or ""
            query_preview = query[:100] + "..." if len(query) > 100 else query
            logger.debug(f"🔍 GraphQL operation: {query_preview}")

        yield

        self.execution_time = time.time() - self.start_time
        operation = operation or 'anonymous'

        if self.execution_time > SLOW_OPERATION_SECONDS:
            logger.warning(
                f"⚠️  Slow GraphQL operation: {operation} "
                f"took {self.execution_time:.2f}s"
            )
        else:
            logger.info(
                f"✅ GraphQL operation completed: {operation} "
                f"in {self.execution_time*1000:.0f}ms"
            )

    def get_results(self) -> Dict[str, Any]:
        return {
            "executionTime": getattr(self, "execution_time", None),
            "operationName": self.execution_context.operation_name,
        }


class ErrorLoggingExtension(SchemaExtension):
    """
    Extension to log GraphQL errors with context.

    Runs at the end of execution, before MaskErrors rewrites messages, so
    unexpected errors are logged with their original traceback.
    """

    def on_execute(self):
        yield

        result = self.execution_context.result
        errors = getattr(result, 'errors', None) if result else None
        if not errors:
            return

        operation = self.execution_context.operation_name or 'anonymous'
        for error in errors:
            path = ' → '.join(str(p) for p in error.path) if error.path else '-'
            original = error.original_error

            if original is None or isinstance(original, PUBLIC_ERRORS):
                logger.warning(f"⚠️  GraphQL error in {operation} at {path}: {error.message}")
            else:
                logger.error(
                    f"❌ GraphQL error in {operation} at {path}: {error.message}",
                    exc_info=original,
                )
