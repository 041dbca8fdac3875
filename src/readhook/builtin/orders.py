"""After-read interceptor for the Orders entity."""

from __future__ import annotations

from readhook.config import Settings
from readhook.hookspecs import hookimpl
from readhook.records import RecordSetBuilder
from readhook.registry import HandlerRegistry
from readhook.store import MemoryStore
from readhook.types import HookEvent, ReadRequest, ResponseEnvelope

ORDERS_ENTITY = "Orders"
QUANTITY_FIELD = "quantity"
QUANTITY_VALUE = 1000


def after_read_orders(request: ReadRequest, response: ResponseEnvelope) -> ResponseEnvelope:
    """Return a success envelope whose records all carry ``quantity = 1000``.

    The incoming envelope is left untouched; records are copied first.
    """

    _ = request
    augmented = (
        RecordSetBuilder.from_record_set(response.data)
        .add_element(QUANTITY_FIELD, QUANTITY_VALUE)
        .build(ORDERS_ENTITY)
    )
    return ResponseEnvelope.success(augmented)


class OrdersPlugin:
    @hookimpl
    def register_handlers(self, registry: HandlerRegistry, store: MemoryStore, settings: Settings) -> None:
        _ = store, settings
        registry.register(HookEvent.AFTER_READ, ORDERS_ENTITY, after_read_orders)


plugin = OrdersPlugin()
