"""
Abstract base class for enum-driven polymorphic dispatch services.

Pattern:
1. Define an enum for strategies/kinds
2. Register a handler method per enum member
3. Determine which member applies to the input
4. Dispatch to the registered handler

Services using this pattern:
- FieldDispatcher (DrawType enum)

Example:
    class MyKind(Enum):
        A = "a"
        B = "b"

    class MyService(EnumDispatchService[MyKind]):
        def __init__(self):
            super().__init__()
            self._register_handlers({
                MyKind.A: self._handle_a,
                MyKind.B: self._handle_b,
            })

        def _determine_strategy(self, context, **kwargs) -> MyKind:
            return MyKind.A if context.is_a else MyKind.B
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

StrategyEnum = TypeVar('StrategyEnum', bound=Enum)


class EnumDispatchService(ABC, Generic[StrategyEnum]):
    """
    Base class for services dispatching on an enum.

    Subclasses register handlers in __init__() and implement
    _determine_strategy(). The first positional argument of dispatch() is
    the handler context; further positional arguments only feed
    _determine_strategy().
    """

    def __init__(self):
        self._handlers: Dict[StrategyEnum, Callable] = {}

    def _register_handlers(self, handlers: Dict[StrategyEnum, Callable],
                           exhaustive_over: Optional[Iterable[StrategyEnum]] = None) -> None:
        """
        Register strategy handlers.

        Args:
            handlers: Mapping of enum members to handler methods
            exhaustive_over: Members that must all have a handler

        Raises:
            ValueError: If handlers is empty or misses a required member
        """
        if not handlers:
            raise ValueError(f"{self.__class__.__name__}: Handler registry cannot be empty")
        if exhaustive_over is not None:
            missing = [member for member in exhaustive_over if member not in handlers]
            if missing:
                raise ValueError(f"{self.__class__.__name__}: No handler for {missing}")

        self._handlers = handlers
        logger.debug(f"{self.__class__.__name__}: Registered {len(handlers)} handlers")

    @abstractmethod
    def _determine_strategy(self, *args, **kwargs) -> StrategyEnum:
        pass

    def dispatch(self, *args, **kwargs) -> Any:
        """
        Determine the strategy and call its handler.

        Raises:
            KeyError: If the determined strategy has no handler
        """
        strategy = self._determine_strategy(*args, **kwargs)

        if strategy not in self._handlers:
            raise KeyError(
                f"{self.__class__.__name__}: No handler registered for strategy {strategy}. "
                f"Available strategies: {list(self._handlers.keys())}"
            )
        handler = self._handlers[strategy]
        logger.debug(f"{self.__class__.__name__}: Dispatching to {strategy.value} handler")

        handler_args = args[:1] if args else ()
        return handler(*handler_args, **kwargs)

    def get_registered_strategies(self) -> list:
        return list(self._handlers.keys())

    def has_strategy(self, strategy: StrategyEnum) -> bool:
        return strategy in self._handlers
