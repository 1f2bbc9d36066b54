"""Pydantic integration: TriStateOutcome as a model field type.

Wire form is a dict discriminated on "state":

    {"state": "success", "value": <T>}
    {"state": "absent"}
    {"state": "failure", "error": <E>}

Parameterised fields (`TriStateOutcome[int, str]`) validate the payload
against T or E. Existing instances pass through without revalidation.

Example:
    >>> class Lookup(BaseModel):
    ...     hit: TriStateOutcome[int, str]
    >>> Lookup(hit={"state": "success", "value": "5"}).hit
    Success(5)
    >>> Lookup(hit=Absent()).model_dump()
    {'hit': {'state': 'absent'}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, get_args

from pydantic_core import core_schema

from .errors import State

if TYPE_CHECKING:
    from pydantic import GetCoreSchemaHandler

    from .outcome import TriStateOutcome

JsonDict = dict[str, Any]


def dump_outcome(outcome: TriStateOutcome[Any, Any]) -> JsonDict:
    """Outcome -> wire dict. Payloads are left as-is for the serializer."""
    match outcome.state:
        case State.SUCCESS: return {"state": State.SUCCESS.value, "value": outcome.payload}
        case State.FAILURE: return {"state": State.FAILURE.value, "error": outcome.payload}
        case _: return {"state": State.ABSENT.value}


def load_outcome(data: JsonDict) -> TriStateOutcome[Any, Any]:
    """Wire dict -> outcome. Expects an already-validated dict."""
    from .outcome import Absent, Failure, Success

    match State(data["state"]):
        case State.SUCCESS: return Success(data["value"])
        case State.FAILURE: return Failure(data["error"])
        case _: return Absent()


def _variant(state: State, **payload: core_schema.CoreSchema) -> core_schema.TypedDictSchema:
    fields = {"state": core_schema.typed_dict_field(core_schema.literal_schema([state.value]))}
    fields |= {name: core_schema.typed_dict_field(schema) for name, schema in payload.items()}
    return core_schema.typed_dict_schema(fields)


def outcome_schema(cls: type, source: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
    """Core schema for TriStateOutcome and its parameterisations."""
    args = get_args(source)
    value_schema = handler.generate_schema(args[0]) if args else core_schema.any_schema()
    error_schema = handler.generate_schema(args[1]) if len(args) > 1 else core_schema.any_schema()

    wire = core_schema.tagged_union_schema(
        choices={
            State.SUCCESS.value: _variant(State.SUCCESS, value=value_schema),
            State.ABSENT.value: _variant(State.ABSENT),
            State.FAILURE.value: _variant(State.FAILURE, error=error_schema),
        },
        discriminator="state",
    )
    from_wire = core_schema.no_info_after_validator_function(load_outcome, wire)
    return core_schema.json_or_python_schema(
        json_schema=from_wire,
        python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls), from_wire]),
        serialization=core_schema.plain_serializer_function_ser_schema(dump_outcome),
    )
