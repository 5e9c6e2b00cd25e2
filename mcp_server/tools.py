"""Built-in tools and the registry factory."""

import random
from datetime import datetime, timezone
from typing import Literal

from mcp_server.registry import ToolRegistry
from models.data_models import SessionState, ToolDescriptor
from models.tool_args import DiceArgs, EchoArgs, NoArguments, ReverseArgs

# RFC 3339, UTC, seconds precision
CLOCK_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_rng = random.SystemRandom()


async def echo(args: EchoArgs, state: SessionState) -> str:
    return args.message


async def increment(args: NoArguments, state: SessionState) -> str:
    return str(await state.increment())


async def reverse(args: ReverseArgs, state: SessionState) -> str:
    # Python strings are sequences of code points, so this never splits a character.
    return args.text[::-1]


async def dice(args: DiceArgs, state: SessionState) -> str:
    return str(_rng.randint(1, args.sides))


def format_timestamp(moment: datetime) -> str:
    """Format an aware datetime as an RFC 3339 UTC timestamp."""
    return moment.astimezone(timezone.utc).strftime(CLOCK_FORMAT)


async def clock(args: NoArguments, state: SessionState) -> str:
    return format_timestamp(datetime.now(timezone.utc))


ECHO = ToolDescriptor(
    name="echo",
    description="Echo back the provided message.",
    arguments_model=EchoArgs,
    handler=echo,
)
INCREMENT = ToolDescriptor(
    name="increment",
    description="Increment an in-memory counter and return the new value.",
    arguments_model=NoArguments,
    handler=increment,
)
REVERSE = ToolDescriptor(
    name="reverse",
    description="Reverse the provided text character by character.",
    arguments_model=ReverseArgs,
    handler=reverse,
)
DICE = ToolDescriptor(
    name="dice",
    description="Roll a die with the given number of sides (default 6) and return the result.",
    arguments_model=DiceArgs,
    handler=dice,
)
CLOCK = ToolDescriptor(
    name="clock",
    description="Return the current UTC time as an RFC 3339 timestamp (YYYY-MM-DDTHH:MM:SSZ).",
    arguments_model=NoArguments,
    handler=clock,
)

TOOL_SETS = {
    "full": (ECHO, INCREMENT, REVERSE, DICE, CLOCK),
    "minimal": (ECHO, INCREMENT),
}


def build_registry(tool_set: Literal["full", "minimal"] = "full") -> ToolRegistry:
    """Create a frozen registry holding the requested built-in tool set.

    Raises:
        ValueError: If the tool set is unknown
    """
    if tool_set not in TOOL_SETS:
        raise ValueError(f"Unknown tool set: {tool_set!r} (expected one of {sorted(TOOL_SETS)})")

    registry = ToolRegistry()
    for descriptor in TOOL_SETS[tool_set]:
        registry.register(descriptor)
    registry.freeze()
    return registry
