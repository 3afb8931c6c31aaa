"""Bootstrap the message bus with handlers and unit of work."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ubiqa import config
from ubiqa.adapters.clock import SystemClock
from ubiqa.adapters.db.engine import make_engine
from ubiqa.adapters.id_generators import ULIDGenerator
from ubiqa.adapters.unit_of_work import SqlAlchemyUnitOfWork
from ubiqa.domain.pricing import PricingConfig
from ubiqa.interfaces.clock import Clock
from ubiqa.interfaces.id_generator import IdGenerator
from ubiqa.interfaces.unit_of_work import AbstractUnitOfWork
from ubiqa.service_layer.handlers import COMMAND_HANDLERS
from ubiqa.service_layer.messagebus import MessageBus

if TYPE_CHECKING:
    from ubiqa.service_layer.commands import Command


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    message_bus: MessageBus
    clock: Clock
    pricing: PricingConfig

    @property
    def uow(self) -> AbstractUnitOfWork:
        """Unit of work shared with the handlers, for read-side queries."""
        return self.message_bus.uow


def build_write_uow(url: str) -> AbstractUnitOfWork:
    """Build a new unit of work for write operations."""
    engine = make_engine(url)
    return SqlAlchemyUnitOfWork(engine)


def build_message_bus(
    uow: AbstractUnitOfWork,
    command_handlers: Mapping[type[Command], Callable[..., Any]],
    dependencies: Mapping[str, object] | None = None,
) -> MessageBus:
    """Build a message bus with injected dependencies.

    `uow` is always injected; `dependencies` adds the rest (clock, id
    generator, pricing) by parameter name.
    """
    deps: dict[str, object] = {"uow": uow, **(dependencies or {})}
    injected_command_handlers = {
        command_type: inject_dependencies(handler, deps)
        for command_type, handler in command_handlers.items()
    }

    return MessageBus(
        uow,
        command_handlers=injected_command_handlers,
    )


def bootstrap(
    uow: AbstractUnitOfWork | None = None,
    clock: Clock | None = None,
    id_generator: IdGenerator | None = None,
    pricing: PricingConfig | None = None,
) -> AppContainer:
    """Bootstrap the message bus with handlers and unit of work.

    Anything not passed in is built from the environment: a SQLAlchemy unit
    of work on `UBIQA_DB_URL`, the system clock, ULID identifiers and the
    pricing configuration from `config.load_pricing_config`.
    """
    uow = uow if uow is not None else build_write_uow(config.get_db_url())
    clock = clock or SystemClock()
    id_generator = id_generator or ULIDGenerator()
    pricing = pricing or config.load_pricing_config()

    message_bus = build_message_bus(
        uow,
        COMMAND_HANDLERS,
        {"clock": clock, "id_generator": id_generator, "pricing": pricing},
    )

    return AppContainer(message_bus=message_bus, clock=clock, pricing=pricing)


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Inject dependencies into a handler function based on its parameters."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return lambda message: handler(message, **deps)
