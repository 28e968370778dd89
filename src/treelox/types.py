from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, List, Mapping, Optional, Union

from lark import Token
from typing_extensions import Protocol, TypeAlias, TypeGuard, runtime_checkable

if TYPE_CHECKING:
    from . import tree
    from .diagnostics import Diagnostic
    from .evaluator import Interpreter

# ---------- Value Model ----------

@dataclass(frozen=True)
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass(frozen=True)
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        from .utils import format_number
        return format_number(self.value)

@dataclass(frozen=True)
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@runtime_checkable
class LoxCallable(Protocol):
    """Anything a call expression may invoke."""

    def arity(self) -> int: ...

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue': ...

NativeFn = Callable[['Interpreter', List['LoxValue']], 'LoxValue']

@dataclass(eq=False)
class NativeFunction:
    name: str
    fn: NativeFn
    param_count: int = 0

    def arity(self) -> int:
        return self.param_count

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        return self.fn(interpreter, arguments)

    def __str__(self) -> str:
        return "<native fn>"

@dataclass(eq=False)
class LoxFunction:
    declaration: 'tree.Function'
    closure: 'Environment'
    is_initializer: bool = False

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        """Return a copy of this method whose closure defines `this`."""
        env = Environment(self.closure)
        env.define("this", instance)

        return LoxFunction(self.declaration, env, self.is_initializer)

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        env = Environment(self.closure)

        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.value, arg)

        result = interpreter.execute_block(self.declaration.body, env)

        # init() always hands back the receiver, even on a bare `return;`.
        if self.is_initializer:
            return self.closure.get_at("this", 0)

        if isinstance(result, EarlyReturn):
            return result.value

        return LoxNil()

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.value}>"

@dataclass(eq=False)
class LoxClass:
    name: str
    methods: Mapping[str, LoxFunction]
    superclass: Optional['LoxClass'] = None

    def __post_init__(self) -> None:
        self.methods = MappingProxyType(dict(self.methods))

    def find_method(self, name: str) -> Optional[LoxFunction]:
        klass: Optional[LoxClass] = self

        while klass is not None:
            method = klass.methods.get(name)
            if method is not None:
                return method
            klass = klass.superclass

        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        instance = LoxInstance(self)
        initializer = self.find_method("init")

        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)

        return instance

    def __str__(self) -> str:
        return self.name

@dataclass(eq=False)
class LoxInstance:
    klass: LoxClass
    fields: Dict[str, 'LoxValue'] = field(default_factory=dict)

    def get(self, name: Token) -> 'LoxValue':
        if name.value in self.fields:
            return self.fields[name.value]

        method = self.klass.find_method(name.value)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.value}'.")

    def set(self, name: Token, value: 'LoxValue') -> None:
        self.fields[name.value] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

LoxValue: TypeAlias = Union[
    LoxNil,
    LoxBool,
    LoxNumber,
    LoxString,
    NativeFunction,
    LoxFunction,
    LoxClass,
    LoxInstance,
]

def is_callable(value: LoxValue) -> TypeGuard[LoxCallable]:
    return isinstance(value, LoxCallable)

# ---------- Statement results ----------

@dataclass(frozen=True)
class Completed:
    """A statement ran to its end."""

@dataclass(frozen=True)
class EarlyReturn:
    """A `return` is unwinding to the nearest function call."""
    value: LoxValue

ExecResult: TypeAlias = Union[Completed, EarlyReturn]

COMPLETED = Completed()

# ---------- Environment ----------

class Environment:
    def __init__(self, enclosing: Optional['Environment']=None):
        self.enclosing = enclosing
        self.values: Dict[str, LoxValue] = {}

    def define(self, name: str, value: LoxValue) -> None:
        self.values[name] = value

    def ancestor(self, distance: int) -> 'Environment':
        env: Environment = self

        for _ in range(distance):
            if env.enclosing is None:
                raise InternalError(f"Scope distance {distance} walks past the global scope")
            env = env.enclosing

        return env

    def get_at(self, name: str, distance: int) -> LoxValue:
        scope = self.ancestor(distance)

        if name not in scope.values:
            raise NameResolutionError(name)

        return scope.values[name]

    def assign_at(self, name: str, value: LoxValue, distance: int) -> None:
        scope = self.ancestor(distance)

        if name not in scope.values:
            raise NameResolutionError(name)

        scope.values[name] = value

    def __repr__(self) -> str:
        depth = 0
        env = self.enclosing

        while env is not None:
            depth += 1
            env = env.enclosing

        return f"<Environment depth={depth} names={sorted(self.values)}>"

# ---------- Exceptions ----------

class LoxError(Exception):
    token: Optional[Token]
    message: str

    def __init__(self, token: Optional[Token], message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> Optional[int]:
        return getattr(self.token, "line", None)

class LoxSyntaxError(LoxError):
    """A scan, parse or resolution error found before the program runs."""

    def __init__(self, token: Optional[Token], message: str, diagnostic: Optional['Diagnostic']=None):
        super().__init__(token, message)
        self.diagnostic = diagnostic

class LoxRuntimeError(LoxError):
    """A failure of the running program, reported with its source line."""

class NameResolutionError(LookupError):
    """A name was missing from the scope a resolved distance pointed at."""

    def __init__(self, name: str):
        super().__init__(f"Undefined variable '{name}'.")
        self.name = name

class InternalError(RuntimeError):
    """The resolver/evaluator contract was violated. Not a user mistake."""

class Builtins:
    natives: Dict[str, NativeFunction] = {}
