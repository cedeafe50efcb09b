"""
Condition Expression Compiler

Turns a declarative mapping of attribute name -> attribute expression into the
``KeyConditionExpression``/``FilterExpression`` string and the
``ExpressionAttributeValues`` mapping that DynamoDB expects.

    >>> compile_key_condition({'pk': 'post2', 'sk': BeginsWith('comment')})
    Condition(expression='pk = :pk and begins_with(sk, :sk)', values={':pk': 'post2', ':sk': 'comment'})

Parameter names are derived from the attribute name only (``:{name}``, or
``:{name}min``/``:{name}max`` for ``Between``), so compiling the same mapping
twice always gives the same result.

Attribute names are used verbatim. They must be valid identifiers in the
DynamoDB expression language and must not be reserved words; nothing here
escapes them. A bad name surfaces as a ValidationException from DynamoDB at
request time.
"""

from decimal import Decimal
from typing import Any, ClassVar, Dict, FrozenSet, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidExpressionError

# bool first so smart-mode union matching keeps True/False as bool
Scalar = Union[bool, int, float, Decimal, str]

COMPARISON_OPERATORS: FrozenSet[str] = frozenset({"<", "<=", ">", ">="})


def _init_expression(expression: BaseModel, **data: Any) -> None:
    try:
        BaseModel.__init__(expression, **data)
    except ValidationError as e:
        raise InvalidExpressionError(
            f"Invalid {type(expression).__name__} expression: {e.errors()[0]['msg']}"
        ) from e


class AttributeExpression(BaseModel):
    """Base class for the ways a single attribute can be matched.

    Subclasses expose ``operator`` and render their own clause and bindings.
    """

    model_config = ConfigDict(frozen=True)

    def clause(self, name: str) -> str:
        return f"{name} {self.operator} :{name}"

    def bindings(self, name: str) -> Dict[str, Any]:
        return {f":{name}": self.value}


class Equals(AttributeExpression):
    """``name = :name``; what a bare scalar compiles to."""

    operator: ClassVar[str] = "="
    value: Scalar

    def __init__(self, value: Any):
        _init_expression(self, value=value)


class Compare(AttributeExpression):
    """``name <op> :name`` for one of ``<``, ``<=``, ``>``, ``>=``."""

    operator: str
    value: Scalar

    def __init__(self, operator: str, value: Any):
        if operator not in COMPARISON_OPERATORS:
            raise InvalidExpressionError(
                f"Unsupported comparison operator {operator!r}; "
                f"expected one of {sorted(COMPARISON_OPERATORS)} "
                f"(use Equals, BeginsWith or Between for other matches)"
            )
        _init_expression(self, operator=operator, value=value)


class BeginsWith(AttributeExpression):
    """``begins_with(name, :name)``; only meaningful for strings and binary sort keys."""

    operator: ClassVar[str] = "begins_with"
    prefix: str

    def __init__(self, prefix: str):
        _init_expression(self, prefix=prefix)

    def clause(self, name: str) -> str:
        return f"begins_with({name}, :{name})"

    def bindings(self, name: str) -> Dict[str, Any]:
        return {f":{name}": self.prefix}


class Between(AttributeExpression):
    """``name between :namemin and :namemax``, bounds inclusive."""

    operator: ClassVar[str] = "between"
    low: Scalar
    high: Scalar

    def __init__(self, low: Any, high: Any):
        _init_expression(self, low=low, high=high)

    def clause(self, name: str) -> str:
        return f"{name} between :{name}min and :{name}max"

    def bindings(self, name: str) -> Dict[str, Any]:
        return {
            f":{name}min": self.low,
            f":{name}max": self.high,
        }


ExpressionInput = Union[AttributeExpression, Scalar]


class Condition(BaseModel):
    """A compiled condition: expression text plus its bound parameter values."""

    expression: str = ""
    values: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.expression

    def merge(self, other: 'Condition') -> Dict[str, Any]:
        """Combine the bound values of two conditions sent in one request.

        Raises:
            InvalidExpressionError: If both conditions bind the same parameter name
        """
        collisions = set(self.values) & set(other.values)
        if collisions:
            raise InvalidExpressionError(
                f"Parameter names bound by both conditions: {sorted(collisions)}; "
                f"an attribute cannot appear in the key condition and the filter at once"
            )
        return {**self.values, **other.values}


def to_attribute_expression(name: str, value: ExpressionInput) -> AttributeExpression:
    """Normalize a mapping value into an attribute expression.

    Raises:
        InvalidExpressionError: If the value is neither a scalar nor an expression
    """
    if isinstance(value, AttributeExpression):
        return value
    if isinstance(value, (bool, int, float, Decimal, str)):
        return Equals(value)
    raise InvalidExpressionError(
        f"Unsupported expression for attribute '{name}': {value!r}; "
        f"use a scalar or one of Equals, Compare, BeginsWith, Between",
        attribute=name,
    )


def compile_key_condition(attributes: Mapping[str, ExpressionInput]) -> Condition:
    """Compile attribute expressions into a condition joined with ``and``.

    Clauses follow the iteration order of ``attributes``. An empty mapping
    compiles to the empty condition, which callers treat as "no condition".

    Args:
        attributes: Attribute name -> scalar or attribute expression

    Returns:
        Condition with the expression string and bound values

    Raises:
        InvalidExpressionError: For values that are not valid expressions, or
            when two attributes bind the same parameter name (e.g. ``sk`` with
            ``Between`` next to an attribute called ``skmin``)
    """
    clauses = []
    values: Dict[str, Any] = {}

    for name, value in attributes.items():
        expression = to_attribute_expression(name, value)
        bindings = expression.bindings(name)
        collisions = set(values) & set(bindings)
        if collisions:
            raise InvalidExpressionError(
                f"Parameter names for attribute '{name}' are already bound: {sorted(collisions)}",
                attribute=name,
            )
        clauses.append(expression.clause(name))
        values.update(bindings)

    return Condition(expression=" and ".join(clauses), values=values)


def compile_filter_condition(attributes: Optional[Mapping[str, ExpressionInput]] = None) -> Condition:
    """Like compile_key_condition, but ``None`` yields the empty condition."""
    if attributes is None:
        return Condition()
    return compile_key_condition(attributes)


def expression_attribute_values(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Prefix plain parameter names with ``:``.

    Example:
        >>> expression_attribute_values({'status': 'open', 'limit': 3})
        {':status': 'open', ':limit': 3}
    """
    return {f":{key}": value for key, value in params.items()}
