"""Source field name resolution."""

from typing import Any, Mapping, Tuple


def to_snake_case(name: str) -> str:
    """
    Convert a CamelCase identifier to snake_case.

    Every ASCII uppercase letter is lower-cased and, unless it is the first
    character, preceded by an underscore. ``UserId`` becomes ``user_id``;
    ``ID`` becomes ``i_d``. Other characters are kept as they are.

    Args:
        name: Identifier to convert

    Returns:
        The snake_case form
    """
    out = []
    for i, ch in enumerate(name):
        if "A" <= ch <= "Z":
            if i > 0:
                out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def resolve_source_field(fields: Mapping[str, Any], expected: str) -> Tuple[bool, Any]:
    """
    Find the source field matching an expected name.

    Resolution order:
    1. A source field named exactly ``expected``
    2. The first source field whose snake_case name equals ``expected``
    3. A source field named exactly the snake_case form of ``expected``

    Args:
        fields: Source field names to values, in source declaration order
        expected: Name derived from the target field (annotation or field name)

    Returns:
        ``(found, value)``; ``value`` is ``None`` when not found
    """
    if expected in fields:
        return True, fields[expected]

    for name, value in fields.items():
        if to_snake_case(name) == expected:
            return True, value

    snake_expected = to_snake_case(expected)
    if snake_expected in fields:
        return True, fields[snake_expected]

    return False, None
