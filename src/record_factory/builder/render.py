"""Render builder contracts as typed stub source.

Builders are synthesized at runtime, so static type checkers cannot see their
setters. ``render_stub()`` writes the contract out as ``.pyi`` declarations
that can be checked in next to the record module.

Usage:
    from record_factory.builder.render import render_stub
    from record_factory.builder.synthesizer import synthesize

    print(render_stub([synthesize(Anvil.__record_analysis__)]))
"""

import typing
from collections.abc import Iterable
from typing import Any

from record_factory.builder.synthesizer import BuilderContract

STUB_HEADER = [
    "from collections.abc import Callable",
    "from typing import Any",
    "",
    "from record_factory.builder.runtime import RecordBuilder",
]


def type_name(type_hint: Any) -> str:
    """Source spelling of a type annotation.

    Examples:
        >>> type_name(int)
        'int'
        >>> type_name(int | None)
        'int | None'
        >>> type_name(None)
        'Any'
    """
    if type_hint is None:
        return "Any"
    if type_hint is type(None):
        return "None"
    if isinstance(type_hint, str):
        return type_hint
    if isinstance(type_hint, type) and typing.get_origin(type_hint) is None:
        return type_hint.__qualname__
    return repr(type_hint).replace("typing.", "")


def render_builder(contract: BuilderContract) -> list[str]:
    """Lines of the stub class declaring one builder contract."""
    builder = contract.builder_name
    lines = [
        f"class {builder}(RecordBuilder):",
        f'    """Builder for {contract.record_name} records (table: {contract.table_name})."""',
        "",
        "    @classmethod",
        f"    def new(cls) -> {builder}: ...",
    ]

    for setter in contract.setters:
        lines.append(
            f"    def {setter.method_name}(self, value: {type_name(setter.type_hint)}) -> {builder}: ..."
        )

    for hook in contract.hooks:
        related = f"{hook.related_type.name}Builder"
        lines.extend([
            f"    def {hook.method_name}(",
            f"        self, callback: Callable[[{related}], {related}]",
            f"    ) -> {builder}: ...",
        ])

    lines.append(f"    async def create(self, connection: Any) -> {contract.record_name}: ...")
    return lines


def render_stub(contracts: Iterable[BuilderContract]) -> str:
    """Render a complete stub module declaring every builder in *contracts*."""
    lines = list(STUB_HEADER)
    for contract in contracts:
        lines.extend(["", ""])
        lines.extend(render_builder(contract))
    return "\n".join(lines) + "\n"
