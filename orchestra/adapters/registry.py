"""
Adapter registry — central dispatch for all external tool calls.

The registry handles registration, lookup, mock mode and execution.
The engine never talks to adapters directly — always through the
registry, which turns every outcome (including adapter bugs) into a
Receipt.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from orchestra.adapters.base import Adapter, ExecutionContext
from orchestra.core.models.action import Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Central registry and dispatcher for adapters.

    Features:
        - Register/unregister adapters by name
        - Mock mode: answer every call with success, or route to a mock
        - Execute commands through the named adapter
        - Query adapter availability
    """

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter: Adapter | None = None

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_adapter: Adapter | None = None) -> None:
        """Enable or disable mock mode.

        Args:
            enabled: Whether to use mock mode.
            mock_adapter: Optional mock that receives every call.
        """
        self._mock_mode = enabled
        self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def unregister(self, name: str) -> None:
        self._adapters.pop(name, None)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return list(self._adapters.keys())

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Availability of every registered adapter."""
        status = {}
        for name, adapter in self._adapters.items():
            try:
                available = adapter.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": adapter.__class__.__name__,
            }
        return status

    def execute(self, adapter_name: str, context: ExecutionContext) -> Receipt:
        """Run a command through the named adapter.

        Resolves the adapter (or mock), validates, executes and stamps
        the duration. Never raises.
        """
        start_time = time.monotonic()

        adapter: Adapter | None
        if self._mock_mode and self._mock_adapter:
            adapter = self._mock_adapter
        elif self._mock_mode:
            return Receipt.success(
                adapter=adapter_name,
                action_id=context.action_id,
                output=f"[mock] {adapter_name}:{context.action_id} executed",
                metadata={"mock": True},
            )
        else:
            adapter = self._adapters.get(adapter_name)

        if adapter is None:
            return Receipt.failure(
                adapter=adapter_name,
                action_id=context.action_id,
                error=f"No adapter registered for '{adapter_name}'",
            )

        try:
            is_valid, error_msg = adapter.validate(context)
            if not is_valid:
                return Receipt.failure(
                    adapter=adapter_name,
                    action_id=context.action_id,
                    error=f"Validation failed: {error_msg}",
                )
        except Exception as e:
            return Receipt.failure(
                adapter=adapter_name,
                action_id=context.action_id,
                error=f"Validation error: {e}",
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised during execution: %s", adapter_name, e)
            receipt = Receipt.failure(
                adapter=adapter_name,
                action_id=context.action_id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt
